"""HTTP tests for application-wide endpoints and middleware."""

import pytest
from httpx import AsyncClient
from pytest_mock import MockerFixture

from src.api.constants import CORRELATION_ID_HEADER, REQUEST_ID_HEADER


@pytest.mark.integration
class TestApplicationEndpoints:
    """Health and info endpoints."""

    async def test_info(self, client: AsyncClient) -> None:
        response = await client.get("/info")

        body = response.json()
        assert response.status_code == 200
        assert body["app_name"] == "Bookshelf"
        assert body["environment"] == "development"

    async def test_health_degraded_without_database(
        self, client: AsyncClient, mocker: MockerFixture
    ) -> None:
        mocker.patch(
            "src.api.routers.system.check_database_connection",
            new=mocker.AsyncMock(return_value=(False, "connection refused")),
        )

        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "degraded", "database": False}

    async def test_unknown_route(self, client: AsyncClient) -> None:
        response = await client.get("/authors")

        assert response.status_code == 404
        assert response.json()["error_code"] == "NOT_FOUND"

    async def test_wrong_method(self, client: AsyncClient) -> None:
        response = await client.patch("/books/1", json={})

        assert response.status_code == 405


@pytest.mark.integration
class TestMiddlewareStack:
    """Headers added by the middleware."""

    async def test_security_headers(self, client: AsyncClient) -> None:
        response = await client.get("/books")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert "Strict-Transport-Security" in response.headers

    async def test_correlation_id_round_trip(self, client: AsyncClient) -> None:
        response = await client.get(
            "/books/0000", headers={CORRELATION_ID_HEADER: "corr-from-client"}
        )

        assert response.headers[CORRELATION_ID_HEADER] == "corr-from-client"
        assert response.json()["correlation_id"] == "corr-from-client"

    async def test_request_id_in_error_body(self, client: AsyncClient) -> None:
        response = await client.get("/books/0000")

        assert response.json()["request_id"] == response.headers[REQUEST_ID_HEADER]


@pytest.mark.integration
@pytest.mark.parametrize(
    ("path", "method", "errors"),
    [
        ("/books", "get", {"400", "500"}),
        ("/books", "post", {"400", "409", "500"}),
        ("/books/{isbn}", "get", {"404", "500"}),
        ("/books/{isbn}", "put", {"400", "404", "500"}),
        ("/books/{isbn}", "delete", {"404", "500"}),
    ],
)
async def test_openapi_documents_route_errors(
    client: AsyncClient, path: str, method: str, errors: set[str]
) -> None:
    schema = (await client.get("/openapi.json")).json()

    documented = set(schema["paths"][path][method]["responses"])

    assert documented - {"200", "201", "422"} == errors
