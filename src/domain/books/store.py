"""Contract the book service expects from its persistence layer."""

from collections.abc import Mapping
from typing import Protocol

from src.core.types import Filters
from src.domain.books.schemas import Book


class BookStore(Protocol):
    """Persistence operations for books, keyed by isbn.

    Implementations raise ``NotFoundError`` when a key is absent and
    ``ConflictError`` when an insert collides with an existing book. Writes
    become durable only once ``commit`` returns.
    """

    async def list_all(self, filters: Filters) -> list[Book]:
        """Return every book matching the equality filters."""
        ...

    async def get_by_key(self, isbn: str) -> Book:
        """Return the book with this isbn."""
        ...

    async def insert(self, book: Book) -> Book:
        """Store a new book and return it as persisted."""
        ...

    async def update(self, isbn: str, fields: Mapping[str, object]) -> Book:
        """Replace the mutable fields of a book and return the result."""
        ...

    async def remove(self, isbn: str) -> None:
        """Delete the book with this isbn."""
        ...

    async def commit(self) -> None:
        """Make the writes made so far durable."""
        ...
