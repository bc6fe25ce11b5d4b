"""
Notekeeper — Alembic Migration Environment
============================================

What:  Runs migrations for the `notes` schema.
How:   Online mode connects through the application's async engine builder
       and hands Alembic a sync connection via `run_sync`; offline mode
       renders SQL for DATABASE_URL without connecting.
Usage: cd backend && alembic upgrade head
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy.engine import Connection

from app.config import settings
from app.database import Base, build_engine
from app.models import note  # noqa: F401  (registers the notes table)

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# The URL in alembic.ini is a placeholder; settings win
config.set_main_option("sqlalchemy.url", settings.database_url)

# Shared by both modes. SQLite needs batch mode to alter tables.
MIGRATION_OPTIONS = {
    "target_metadata": Base.metadata,
    "render_as_batch": settings.is_sqlite,
    "compare_type": True,
}


def run_migrations_offline() -> None:
    """Emit the migration SQL to stdout (`alembic upgrade head --sql`)."""
    context.configure(
        url=settings.database_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **MIGRATION_OPTIONS,
    )
    with context.begin_transaction():
        context.run_migrations()


def _migrate(connection: Connection) -> None:
    context.configure(connection=connection, **MIGRATION_OPTIONS)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    engine = build_engine(settings.database_url)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_migrate)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
