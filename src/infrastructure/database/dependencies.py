"""FastAPI dependency providing one database session per request."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database.session import get_async_session


async def get_db() -> AsyncGenerator[AsyncSession]:
    """Yield the request's session.

    The session is closed once the response has been sent, which may be after
    the client has its answer, so nothing is committed here. Writes are
    committed by the book service before it returns.
    """
    async with get_async_session() as session:
        yield session


DatabaseSession = Annotated[AsyncSession, Depends(get_db)]
