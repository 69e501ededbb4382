from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

# Dialects with a native INSERT ... ON CONFLICT DO NOTHING
_CONFLICT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite":     sqlite_insert,
}


def upsert_pair(db: Session, model, defaults: dict | None = None, **keys):
    """
    Make sure exactly one `model` row exists for the unique key `keys` and return it.

    The insert and the duplicate check are one statement, so concurrent callers
    converge on the same row instead of racing a "select, then insert". The row is
    flushed but not committed; the caller owns the transaction. `defaults` are
    extra column values used only when the row is newly inserted.

    Usage:
        link = upsert_pair(db, MaintenanceTypeComponent,
                           maintenanceTypeId=type_id, componentCatalogId=component_id)
        db.commit()
    """
    insert = _CONFLICT_INSERTS.get(db.get_bind().dialect.name)
    if insert is not None:
        stmt = insert(model).values(**keys, **(defaults or {}))
        db.execute(stmt.on_conflict_do_nothing(index_elements=list(keys)))
    else:
        try:
            with db.begin_nested():
                db.add(model(**keys, **(defaults or {})))
        except IntegrityError:
            # Unique key already taken: the existing row is the result
            pass
    return db.query(model).filter_by(**keys).one()
