"""HTTP tests for the /books resource."""

from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from pytest_mock import MockerFixture

from src.api.constants import CORRELATION_ID_HEADER, REQUEST_ID_HEADER
from src.api.dependencies import get_book_store
from src.api.main import create_app
from src.core.config import Settings
from tests.fixtures.test_book_fixtures import make_book_document, make_edit_document

ISBN = "0691161518"


@pytest.mark.integration
class TestBookLifecycle:
    """Create, read, update and delete through the HTTP API."""

    async def test_full_lifecycle(
        self, client: AsyncClient, book_document: dict[str, Any]
    ) -> None:
        # Create
        response = await client.post("/books", json=book_document)
        assert response.status_code == 201
        assert response.json() == {"book": book_document}

        # Read
        response = await client.get(f"/books/{ISBN}")
        assert response.status_code == 200
        assert response.json() == {"book": book_document}

        # Update
        edit = make_edit_document(title="Power-Up (2nd edition)", pages=280)
        response = await client.put(f"/books/{ISBN}", json=edit)
        assert response.status_code == 200
        assert response.json() == {"book": {**edit, "isbn": ISBN}}

        # Delete
        response = await client.delete(f"/books/{ISBN}")
        assert response.status_code == 200
        assert response.json() == {"message": "Book deleted"}

        response = await client.get(f"/books/{ISBN}")
        assert response.status_code == 404

    async def test_empty_list(self, client: AsyncClient) -> None:
        response = await client.get("/books")

        assert response.status_code == 200
        assert response.json() == {"books": []}

    async def test_list_is_ordered_by_title(self, client: AsyncClient) -> None:
        for isbn, title in [("3", "Cryptonomicon"), ("1", "Anathem"), ("2", "Baroque")]:
            await client.post("/books", json=make_book_document(isbn=isbn, title=title))

        response = await client.get("/books")

        assert [book["title"] for book in response.json()["books"]] == [
            "Anathem",
            "Baroque",
            "Cryptonomicon",
        ]

    async def test_list_filters_by_query_parameters(self, client: AsyncClient) -> None:
        await client.post("/books", json=make_book_document(isbn="1", author="Ann"))
        await client.post("/books", json=make_book_document(isbn="2", author="Bob"))

        response = await client.get("/books", params={"author": "Bob"})

        assert [book["isbn"] for book in response.json()["books"]] == ["2"]

    async def test_list_filters_on_integer_fields(self, client: AsyncClient) -> None:
        await client.post("/books", json=make_book_document(isbn="1", pages=100))
        await client.post("/books", json=make_book_document(isbn="2", pages=200))

        response = await client.get("/books", params={"pages": "200"})

        assert [book["isbn"] for book in response.json()["books"]] == ["2"]

    async def test_update_is_idempotent(
        self, client: AsyncClient, book_document: dict[str, Any]
    ) -> None:
        await client.post("/books", json=book_document)
        edit = make_edit_document(year=2020)

        first = await client.put(f"/books/{ISBN}", json=edit)
        second = await client.put(f"/books/{ISBN}", json=edit)

        assert first.status_code == second.status_code == 200
        assert first.json() == second.json()


@pytest.mark.integration
class TestBookErrors:
    """Error responses for the /books resource."""

    async def test_get_missing_book(self, client: AsyncClient) -> None:
        response = await client.get("/books/0000")

        body = response.json()
        assert response.status_code == 404
        assert body["message"] == "There is no book with an isbn '0000'"
        assert body["error_code"] == "NOT_FOUND"

    async def test_update_missing_book(self, client: AsyncClient) -> None:
        response = await client.put("/books/0000", json=make_edit_document())

        assert response.status_code == 404

    async def test_delete_missing_book(self, client: AsyncClient) -> None:
        response = await client.delete("/books/0000")

        assert response.status_code == 404

    async def test_create_missing_fields(self, client: AsyncClient) -> None:
        response = await client.post("/books", json={"title": "Only a title"})

        body = response.json()
        assert response.status_code == 400
        assert body["error_code"] == "VALIDATION_ERROR"
        assert body["message"] == [
            "amazon_url: Field required",
            "author: Field required",
            "language: Field required",
            "pages: Field required",
            "publisher: Field required",
            "year: Field required",
            "isbn: Field required",
        ]

    async def test_create_wrong_type(self, client: AsyncClient) -> None:
        response = await client.post("/books", json=make_book_document(pages="264"))

        assert response.status_code == 400
        assert response.json()["message"] == ["pages: Input should be a valid integer"]

    async def test_create_empty_body(self, client: AsyncClient) -> None:
        response = await client.post("/books")

        assert response.status_code == 400
        assert len(response.json()["message"]) == 8

    async def test_create_malformed_json(self, client: AsyncClient) -> None:
        response = await client.post(
            "/books",
            content=b'{"isbn": ',
            headers={"Content-Type": "application/json"},
        )

        body = response.json()
        assert response.status_code == 400
        assert body["error_code"] == "VALIDATION_ERROR"
        assert isinstance(body["message"], list)

    async def test_create_duplicate_isbn(
        self, client: AsyncClient, book_document: dict[str, Any]
    ) -> None:
        await client.post("/books", json=book_document)

        response = await client.post("/books", json=book_document)

        assert response.status_code == 409
        assert response.json()["error_code"] == "CONFLICT"

    async def test_update_cannot_change_isbn(
        self, client: AsyncClient, book_document: dict[str, Any]
    ) -> None:
        await client.post("/books", json=book_document)

        response = await client.put(f"/books/{ISBN}", json={**book_document, "isbn": "1"})

        assert response.status_code == 400
        assert response.json()["message"] == "Cannot update isbn"
        assert (await client.get(f"/books/{ISBN}")).json() == {"book": book_document}

    async def test_update_rejects_partial_document(
        self, client: AsyncClient, book_document: dict[str, Any]
    ) -> None:
        await client.post("/books", json=book_document)

        response = await client.put(f"/books/{ISBN}", json={"title": "Renamed"})

        assert response.status_code == 400
        assert "author: Field required" in response.json()["message"]

    async def test_unexpected_store_failure(
        self, client: AsyncClient, book_store: Any
    ) -> None:
        async def broken(_filters: object) -> list[object]:
            raise RuntimeError("connection reset by peer")

        book_store.list_all = broken

        response = await client.get(
            "/books", headers={CORRELATION_ID_HEADER: "corr-failing"}
        )

        body = response.json()
        assert response.status_code == 500
        assert body["message"] == "An internal server error occurred"
        assert body["error_code"] == "INTERNAL_ERROR"
        assert "connection reset" not in response.text
        assert response.headers[CORRELATION_ID_HEADER] == "corr-failing"
        assert response.headers[REQUEST_ID_HEADER] == body["request_id"]
        assert response.headers["X-Content-Type-Options"] == "nosniff"

    async def test_failed_commit_is_not_reported_as_success(
        self, client: AsyncClient, book_store: Any, book_document: dict[str, Any]
    ) -> None:
        async def broken_commit() -> None:
            raise RuntimeError("could not serialize access")

        book_store.commit = broken_commit

        response = await client.post("/books", json=book_document)

        assert response.status_code == 500
        assert response.json()["message"] == "An internal server error occurred"

    @pytest.mark.parametrize(
        ("field", "value"), [("pages", 2**31), ("year", 2**40), ("year", -(2**40))]
    )
    async def test_create_rejects_integers_too_large_to_store(
        self, client: AsyncClient, field: str, value: int
    ) -> None:
        response = await client.post("/books", json=make_book_document(**{field: value}))

        assert response.status_code == 400
        assert response.json()["message"][0].startswith(f"{field}: Input should be")

    @pytest.mark.parametrize("pages", ["abc", "99999999999"])
    async def test_list_rejects_bad_integer_filters(
        self, client: AsyncClient, pages: str
    ) -> None:
        response = await client.get("/books", params={"pages": pages})

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"


@pytest.mark.integration
async def test_debug_mode_still_hides_internal_errors(
    book_store: Any, mocker: MockerFixture
) -> None:
    application = create_app(Settings(debug=True))
    application.dependency_overrides[get_book_store] = lambda: book_store
    mocker.patch.object(
        book_store,
        "get_by_key",
        side_effect=RuntimeError("secret dsn postgres://u:pw@h"),
    )

    async with AsyncClient(
        transport=ASGITransport(app=application), base_url="http://test"
    ) as debug_client:
        response = await debug_client.get(f"/books/{ISBN}")

    assert response.status_code == 500
    assert response.headers["content-type"] == "application/json"
    assert response.json()["message"] == "An internal server error occurred"
    assert "secret dsn" not in response.text


@pytest.mark.integration
async def test_catalog_walkthrough(client: AsyncClient) -> None:
    """Create, fetch, miss, reject an isbn change, delete, delete again."""
    book = {
        "isbn": "987654321",
        "amazon_url": "http://a.co/12345",
        "author": "Test Author",
        "language": "english",
        "pages": 400,
        "publisher": "Test Publiser",
        "title": "Test Title",
        "year": 2024,
    }

    created = await client.post("/books", json=book)
    assert created.status_code == 201
    assert created.json() == {"book": book}

    fetched = await client.get("/books/987654321")
    assert fetched.status_code == 200
    assert fetched.json() == {"book": book}

    assert (await client.get("/books/0000")).status_code == 404

    rejected = await client.put("/books/987654321", json={**book, "isbn": "12345678"})
    assert rejected.status_code == 400

    deleted = await client.delete("/books/987654321")
    assert deleted.status_code == 200
    assert deleted.json() == {"message": "Book deleted"}

    assert (await client.delete("/books/987654321")).status_code == 404


@pytest.mark.integration
@pytest.mark.parametrize(("field", "value"), [("pages", "400"), ("year", "2024")])
async def test_update_rejects_string_integers(
    client: AsyncClient, book_document: dict[str, Any], field: str, value: str
) -> None:
    await client.post("/books", json=book_document)

    response = await client.put(
        f"/books/{ISBN}", json=make_edit_document(**{field: value})
    )

    assert response.status_code == 400
    assert response.json()["message"] == [f"{field}: Input should be a valid integer"]
