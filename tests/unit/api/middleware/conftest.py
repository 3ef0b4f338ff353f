"""Fixtures for API middleware tests."""

from typing import cast

import pytest
from fastapi import Request
from pytest_mock import MockerFixture, MockType
from starlette.datastructures import URL


@pytest.fixture
def mock_request(mocker: MockerFixture) -> MockType:
    """Create mock FastAPI Request with the attributes handlers read.

    Returns:
        MockType: Mock request object with standard HTTP request attributes.
    """
    request = mocker.Mock(spec=Request)
    request.method = "GET"
    request.url = mocker.Mock(spec=URL)
    request.url.path = "/books/0691161518"
    request.headers = {"user-agent": "test-client/1.0"}
    request.client = mocker.Mock()
    request.client.host = "127.0.0.1"
    return cast("MockType", request)


@pytest.fixture
def mock_app(mocker: MockerFixture) -> MockType:
    """Provide a stand-in ASGI application."""
    return cast("MockType", mocker.AsyncMock())
