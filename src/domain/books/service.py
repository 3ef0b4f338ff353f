"""Book use cases: list, get, create, full-replace update and delete.

``BookService`` receives its store at construction and holds no other
state. Writes are validated before the store is touched and committed before
the operation returns, so a failed commit surfaces as a failed operation. Any
failure the store raises propagates unchanged to the caller.
"""

from collections.abc import Mapping

from loguru import logger

from src.core.exceptions import ValidationError
from src.core.types import Document, Filters
from src.domain.books.schemas import Book
from src.domain.books.store import BookStore
from src.domain.books.validation import (
    Invalid,
    SchemaKind,
    ValidationResult,
    validate_document,
)

IMMUTABLE_KEY = "isbn"
IMMUTABLE_KEY_MESSAGE = "Cannot update isbn"


def _require_valid(result: ValidationResult, kind: SchemaKind) -> Document:
    if isinstance(result, Invalid):
        logger.debug(
            "Rejected {} payload with {} violation(s)", kind.value, len(result.messages)
        )
        raise ValidationError(result.messages, context={"schema": kind.value})
    return result.payload.model_dump()


class BookService:
    """Orchestrates validation and persistence for book operations.

    Args:
        store: The book store to read from and write to.
    """

    def __init__(self, store: BookStore) -> None:
        self.store = store

    async def list_books(self, filters: Filters | None = None) -> list[Book]:
        """Return all books, narrowed by passthrough equality filters."""
        return await self.store.list_all(filters or {})

    async def get_book(self, isbn: str) -> Book:
        """Return one book.

        Raises:
            NotFoundError: If no book has this isbn.
        """
        return await self.store.get_by_key(isbn)

    async def create_book(self, document: object) -> Book:
        """Validate a creation document and store the new book.

        Args:
            document: Untyped request body, including the isbn.

        Returns:
            Book: The stored book.

        Raises:
            ValidationError: If the document violates the creation schema.
            ConflictError: If a book with the same isbn already exists.
        """
        fields = _require_valid(
            validate_document(document, SchemaKind.CREATE), SchemaKind.CREATE
        )
        book = await self.store.insert(Book.model_validate(fields))
        await self.store.commit()
        logger.info("Created book {}", book.isbn, isbn=book.isbn)
        return book

    async def update_book(self, isbn: str, document: object) -> Book:
        """Replace every mutable field of an existing book.

        The isbn guard runs before schema validation, so a payload that both
        carries an isbn and breaks the schema reports the isbn violation.

        Args:
            isbn: Key of the book to update.
            document: Untyped request body without an isbn.

        Returns:
            Book: The updated book.

        Raises:
            ValidationError: If the document carries an isbn or violates the
                edit schema.
            NotFoundError: If no book has this isbn.
        """
        if isinstance(document, Mapping) and IMMUTABLE_KEY in document:
            raise ValidationError(IMMUTABLE_KEY_MESSAGE, context={"isbn": isbn})

        fields = _require_valid(
            validate_document(document, SchemaKind.EDIT), SchemaKind.EDIT
        )
        book = await self.store.update(isbn, fields)
        await self.store.commit()
        logger.info("Updated book {}", isbn, isbn=isbn)
        return book

    async def delete_book(self, isbn: str) -> None:
        """Delete a book.

        Raises:
            NotFoundError: If no book has this isbn.
        """
        await self.store.remove(isbn)
        await self.store.commit()
        logger.info("Deleted book {}", isbn, isbn=isbn)
