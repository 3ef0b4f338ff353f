"""Alembic entry point for the ``books`` schema.

The URL comes from ``DATABASE_CONFIG__DATABASE_URL`` (through the application
settings), never from ``alembic.ini``. Online runs use a throwaway asyncpg
engine without a pool.
"""

import asyncio
import logging

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from src.core.config import get_settings
from src.infrastructure.database import models  # noqa: F401 - registers tables
from src.infrastructure.database.base import Base

logger = logging.getLogger("alembic.env")


def _run(**options: object) -> None:
    context.configure(target_metadata=Base.metadata, compare_type=True, **options)
    with context.begin_transaction():
        context.run_migrations()


def _run_on(connection: Connection) -> None:
    _run(connection=connection)


async def _run_online(database_url: str) -> None:
    engine = create_async_engine(database_url, poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_run_on)
    finally:
        await engine.dispose()


def main() -> None:
    """Emit SQL in offline mode, otherwise migrate the configured database."""
    database_url = get_settings().database_config.database_url
    if context.is_offline_mode():
        logger.info("Generating migration SQL")
        _run(url=database_url, literal_binds=True, dialect_opts={"paramstyle": "named"})
    else:
        logger.info("Migrating the configured database")
        asyncio.run(_run_online(database_url))


main()
