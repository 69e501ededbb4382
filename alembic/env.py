"""
Alembic environment for maintrack.

The database URL comes from maintrack settings (DATABASE_URL / .env), never
from alembic.ini, and autogenerate compares against every model registered
in maintrack/models/__init__.py.
"""

from logging.config import fileConfig

from sqlalchemy import create_engine, pool
from alembic import context

from maintrack.config import settings
from maintrack.database import Base
import maintrack.models  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _configure_options() -> dict:
    return {
        "target_metadata":        target_metadata,
        "compare_type":           True,
        "compare_server_default": True,
        # SQLite rebuilds tables to alter constraints
        "render_as_batch":        settings.is_sqlite,
    }


# ─── Offline Mode ─────────────────────────────────────────────────────────────
def run_migrations_offline() -> None:
    """Emit the migration SQL to stdout instead of running it."""
    context.configure(
        url=settings.DATABASE_URL,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_options(),
    )
    with context.begin_transaction():
        context.run_migrations()


# ─── Online Mode ──────────────────────────────────────────────────────────────
def run_migrations_online() -> None:
    connectable = create_engine(settings.DATABASE_URL, poolclass=pool.NullPool)
    with connectable.connect() as connection:
        context.configure(connection=connection, **_configure_options())
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
