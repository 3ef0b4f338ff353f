"""Shared fixtures for HTTP-level tests.

The application runs in-process through ``httpx.ASGITransport``, which does
not trigger the lifespan, so no database is needed. The book store
dependency is overridden with an in-memory store.
"""

from collections.abc import AsyncGenerator, Generator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from src.api.dependencies import get_book_store
from src.api.main import app as main_app
from src.core.context import RequestContext
from tests.fixtures.test_book_fixtures import (
    InMemoryBookStore,
    book_document,
    book_store,
    edit_document,
)

__all__ = ["book_document", "book_store", "edit_document"]


@pytest.fixture
def app(book_store: InMemoryBookStore) -> Generator[FastAPI]:
    """Provide the application wired to the in-memory store."""
    main_app.dependency_overrides[get_book_store] = lambda: book_store
    yield main_app
    main_app.dependency_overrides.clear()
    RequestContext.clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Provide an HTTP client bound to the application."""
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as test_client:
        yield test_client

