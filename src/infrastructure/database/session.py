"""Async engine, session factory and connectivity check.

One engine, and so one connection pool, serves the whole process. It is
created on first use and disposed of by ``close_database`` at shutdown.
Sessions never commit on their own: writers call ``commit`` explicitly, and
anything left uncommitted when a session closes is rolled back.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from functools import cache

from loguru import logger
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.core.config import get_settings
from src.infrastructure.constants import COMMAND_TIMEOUT_SECONDS, POOL_RECYCLE_SECONDS


def create_database_engine(database_url: str | None = None) -> AsyncEngine:
    """Create an asyncpg engine sized from ``DatabaseConfig``.

    Args:
        database_url: Overrides the configured URL.

    Returns:
        AsyncEngine: A new engine with its own pool.
    """
    db_config = get_settings().database_config
    engine = create_async_engine(
        database_url or db_config.database_url,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=db_config.pool_pre_ping,
        pool_recycle=POOL_RECYCLE_SECONDS,
        echo=db_config.echo,
        connect_args={
            "server_settings": {"jit": "off"},
            "command_timeout": COMMAND_TIMEOUT_SECONDS,
        },
    )
    logger.info(
        "Database engine ready (pool_size={}, max_overflow={})",
        db_config.pool_size,
        db_config.max_overflow,
    )
    return engine


@cache
def get_engine() -> AsyncEngine:
    """Return the process-wide engine."""
    return create_database_engine()


@cache
def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the session factory bound to the process-wide engine."""
    return async_sessionmaker(get_engine(), class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Open a session, rolling it back if the block raises.

    Example:
        async with get_async_session() as session:
            store = BookRepository(session)
            await store.insert(book)
            await store.commit()
    """
    async with get_session_factory()() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            logger.debug("Rolled back database session after an error")
            raise


async def close_database() -> None:
    """Dispose of the engine, if one was created, and forget it."""
    if get_engine.cache_info().currsize:
        await get_engine().dispose()
        logger.info("Database engine disposed")
    get_session_factory.cache_clear()
    get_engine.cache_clear()


async def check_database_connection() -> tuple[bool, str | None]:
    """Run ``SELECT 1`` against the database.

    Returns:
        tuple[bool, str | None]: Whether it answered, and the error otherwise.
    """
    try:
        async with get_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        return False, str(e)
    return True, None
