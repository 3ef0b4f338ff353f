"""FastAPI dependencies wiring the book service to its store.

Tests replace ``get_book_store`` through ``app.dependency_overrides`` to run
the HTTP layer against an in-memory store.
"""

from typing import Annotated

from fastapi import Depends

from src.domain.books import BookService, BookStore
from src.infrastructure.database import BookRepository, DatabaseSession


def get_book_store(session: DatabaseSession) -> BookStore:
    """Provide the PostgreSQL book store bound to the request's session."""
    return BookRepository(session)


def get_book_service(
    store: Annotated[BookStore, Depends(get_book_store)],
) -> BookService:
    """Provide a book service using the request's store."""
    return BookService(store)


BookServiceDep = Annotated[BookService, Depends(get_book_service)]
