"""Primary-key CRUD over one mapped model.

Writes are flushed, not committed: constraint violations are raised inside
the call that caused them, and committing is left to whoever owns the
session.
"""

from collections.abc import Iterable, Mapping

from loguru import logger
from sqlalchemy import delete as sql_delete
from sqlalchemy import inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database.base import Base


class BaseRepository[T: Base]:
    """Rows of ``model_class`` addressed by their primary key.

    Args:
        session: Session all statements run on.
        model_class: The mapped class.
        order_by: Column that orders ``filter_by`` results. Defaults to the
            primary key.
    """

    def __init__(
        self,
        session: AsyncSession,
        model_class: type[T],
        order_by: str | None = None,
    ) -> None:
        self.session = session
        self.model_class = model_class
        self.name = model_class.__name__
        mapper = inspect(model_class)
        self.columns = mapper.columns
        self.key_column = mapper.primary_key[0]
        self.order_column = self.columns[order_by] if order_by else self.key_column
        logger.debug("Repository ready for {}", self.name)

    def _mapped(self, fields: Iterable[str], action: str) -> list[str]:
        known = [field for field in fields if field in self.columns]
        for field in set(fields) - set(known):
            logger.warning("Cannot {} {} by unmapped column '{}'", action, self.name, field)
        return known

    async def get_by_key(self, key: object) -> T | None:
        result = await self.session.execute(
            select(self.model_class).where(self.key_column == key)
        )
        return result.scalar_one_or_none()

    async def filter_by(self, **kwargs: object) -> list[T]:
        """Return rows whose columns equal ``kwargs``, in ``order_column`` order.

        Unmapped names are skipped with a warning.
        """
        stmt = select(self.model_class).order_by(self.order_column)
        for field in self._mapped(kwargs, "filter"):
            stmt = stmt.where(self.columns[field] == kwargs[field])
        rows = list((await self.session.execute(stmt)).scalars().all())
        logger.debug("{} filter {} matched {} rows", self.name, kwargs, len(rows))
        return rows

    async def create(self, obj: T) -> T:
        self.session.add(obj)
        await self.session.flush()
        await self.session.refresh(obj)
        logger.info("Inserted {}", self.name)
        return obj

    async def update(self, key: object, data: Mapping[str, object]) -> T | None:
        """Assign ``data`` to the row with ``key``.

        Returns:
            T | None: The refreshed row, or None when no row has ``key``.
        """
        instance = await self.get_by_key(key)
        if instance is None:
            return None
        fields = self._mapped(data, "update")
        for field in fields:
            setattr(instance, field, data[field])
        await self.session.flush()
        await self.session.refresh(instance)
        logger.info("Updated {} {} ({})", self.name, key, ", ".join(fields))
        return instance

    async def delete(self, key: object) -> bool:
        """Delete the row with ``key`` and report whether there was one."""
        result = await self.session.execute(
            sql_delete(self.model_class).where(self.key_column == key)
        )
        if deleted := result.rowcount > 0:
            logger.info("Deleted {} {}", self.name, key)
        return deleted
