"""PostgreSQL implementation of the book store."""

from collections.abc import Mapping

from sqlalchemy import Column
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.constants import INTEGER_COLUMN_MAX, INTEGER_COLUMN_MIN
from src.core.exceptions import ConflictError, NotFoundError, ValidationError
from src.core.types import Filters
from src.domain.books.schemas import Book
from src.infrastructure.database.models import BookModel
from src.infrastructure.database.repository import BaseRepository


def _missing(isbn: str) -> NotFoundError:
    return NotFoundError(
        f"There is no book with an isbn '{isbn}'", context={"isbn": isbn}
    )


def coerce_filters(
    filters: Filters, columns: Mapping[str, Column[object]]
) -> dict[str, object]:
    """Convert query-string values to the types of the columns they name.

    Names that are not columns pass through unchanged. Integers outside the
    range of an INTEGER column are rejected like any other bad value.

    Args:
        filters: Raw query parameters.
        columns: Mapped columns of the filtered table.

    Returns:
        dict[str, object]: Filter values keyed by name.

    Raises:
        ValidationError: With one message per value that cannot be converted.
    """
    criteria: dict[str, object] = {}
    violations: list[str] = []
    for name, raw in filters.items():
        if name not in columns:
            criteria[name] = raw
            continue
        python_type = columns[name].type.python_type
        try:
            value = python_type(raw)
        except ValueError:
            violations.append(f"{name}: Expected a value of type {python_type.__name__}")
            continue
        if python_type is int and not INTEGER_COLUMN_MIN <= value <= INTEGER_COLUMN_MAX:
            violations.append(f"{name}: Value out of range")
            continue
        criteria[name] = value
    if violations:
        raise ValidationError(violations, context={"filters": dict(filters)})
    return criteria


class BookRepository:
    """Book store backed by the ``books`` table.

    Rows are converted to ``Book`` models before they leave the repository,
    and missing keys or duplicate inserts are reported with the application's
    exception types.

    Args:
        session: The async SQLAlchemy session to use for operations.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.rows = BaseRepository(session, BookModel, order_by="title")

    async def list_all(self, filters: Filters) -> list[Book]:
        rows = await self.rows.filter_by(**coerce_filters(filters, self.rows.columns))
        return [Book.model_validate(row) for row in rows]

    async def get_by_key(self, isbn: str) -> Book:
        row = await self.rows.get_by_key(isbn)
        if row is None:
            raise _missing(isbn)
        return Book.model_validate(row)

    async def insert(self, book: Book) -> Book:
        try:
            row = await self.rows.create(BookModel(**book.model_dump()))
        except IntegrityError as e:
            raise ConflictError(
                f"A book with isbn '{book.isbn}' already exists",
                context={"isbn": book.isbn},
                cause=e,
            ) from e
        return Book.model_validate(row)

    async def update(self, isbn: str, fields: Mapping[str, object]) -> Book:
        row = await self.rows.update(isbn, fields)
        if row is None:
            raise _missing(isbn)
        return Book.model_validate(row)

    async def remove(self, isbn: str) -> None:
        if not await self.rows.delete(isbn):
            raise _missing(isbn)

    async def commit(self) -> None:
        """Commit the session's transaction."""
        await self.rows.session.commit()
