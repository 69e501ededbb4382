from sqlalchemy.orm import Session

from maintrack.models.audit_log import AuditAction, AuditLog
from maintrack.models.vehicle import Vehicle


def _vehicle_of(entity) -> int | None:
    if isinstance(entity, Vehicle):
        return entity.id
    return getattr(entity, "vehicleId", None)


def log_action(
    db: Session,
    user_id: int | None,
    action: AuditAction,
    entity,
    description: str | None = None,
) -> None:
    """
    Add an audit entry for `entity` to the session without committing.

    `entity` is the affected ORM row, or a bare name such as "Catalog" for
    actions without a single row. Type, id and owning vehicle are read off
    the row, so it must be flushed first.

    Usage:
        db.add(event)
        db.flush()
        log_action(db, user_id, AuditAction.CREATE, event, f"Recorded maintenance at {event.kmAtService} km")
        db.commit()
    """
    if isinstance(entity, str):
        entity_type, entity_id, vehicle_id = entity, None, None
    else:
        entity_type, entity_id, vehicle_id = type(entity).__name__, entity.id, _vehicle_of(entity)

    db.add(AuditLog(
        userId=user_id,
        action=action,
        entityType=entity_type,
        entityId=entity_id,
        vehicleId=vehicle_id,
        description=description,
    ))
