"""Book catalog domain: the Book entity, its schemas, and the book service."""

from src.domain.books.schemas import Book, BookCreate, BookEdit
from src.domain.books.service import BookService
from src.domain.books.store import BookStore
from src.domain.books.validation import (
    Invalid,
    SchemaKind,
    Valid,
    ValidationResult,
    validate_document,
)

__all__ = [
    "Book",
    "BookCreate",
    "BookEdit",
    "BookService",
    "BookStore",
    "Invalid",
    "SchemaKind",
    "Valid",
    "ValidationResult",
    "validate_document",
]
