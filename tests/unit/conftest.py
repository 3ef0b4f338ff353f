"""Shared fixtures for unit tests."""

from collections.abc import Generator

import pytest

from src.core.config import get_settings
from src.core.context import RequestContext
from src.core.error_context import _get_sensitive_fields
from tests.fixtures.test_book_fixtures import (
    book_document,
    book_store,
    edit_document,
    sample_book,
)

__all__ = ["book_document", "book_store", "edit_document", "sample_book"]


@pytest.fixture(autouse=True)
def isolated_state() -> Generator[None]:
    """Clear cached settings and request context around every unit test."""
    get_settings.cache_clear()
    _get_sensitive_fields.cache_clear()
    RequestContext.clear()
    yield
    get_settings.cache_clear()
    _get_sensitive_fields.cache_clear()
    RequestContext.clear()
