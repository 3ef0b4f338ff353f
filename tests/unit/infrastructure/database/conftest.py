"""Fixtures for repository tests with a mocked AsyncSession."""

from typing import cast

import pytest
from pytest_mock import MockerFixture, MockType
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database.models import BookModel


@pytest.fixture
def mock_async_session(mocker: MockerFixture) -> MockType:
    """Provide an AsyncSession mock whose async methods are awaitable."""
    return cast("MockType", mocker.MagicMock(spec=AsyncSession))


@pytest.fixture
def mock_query_result(mocker: MockerFixture) -> MockType:
    """Provide a mock result returned by ``session.execute``."""
    return cast("MockType", mocker.MagicMock())


@pytest.fixture
def book_rows() -> list[BookModel]:
    """Provide two unsaved book rows."""
    return [
        BookModel(
            isbn="0691161518",
            amazon_url="http://a.co/eobPtX2",
            author="Matthew Lane",
            language="english",
            pages=264,
            publisher="Princeton University Press",
            title="Power-Up",
            year=2017,
        ),
        BookModel(
            isbn="1593275846",
            amazon_url="http://a.co/5Hoc2Za",
            author="Marijn Haverbeke",
            language="english",
            pages=472,
            publisher="No Starch Press",
            title="Eloquent JavaScript",
            year=2014,
        ),
    ]
