"""Routes for the ``/books`` collection.

Request bodies are accepted as untyped JSON and handed to the service, which
validates them against the create or edit schema. Failures are raised as
application exceptions and rendered by the registered exception handlers.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Request, status

from src.api.constants import BOOK_DELETED_MESSAGE
from src.api.dependencies import BookServiceDep
from src.api.schemas.books import BookListResponse, BookResponse, MessageResponse
from src.api.schemas.errors import ErrorResponse


def error_responses(*status_codes: int) -> dict[int | str, dict[str, Any]]:
    """Document the error statuses a route can return, plus 500."""
    codes = (*status_codes, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return {code: {"model": ErrorResponse} for code in codes}


router = APIRouter(prefix="/books", tags=["books"])

JsonBody = Annotated[Any, Body()]


@router.get(
    "",
    response_model=BookListResponse,
    responses=error_responses(status.HTTP_400_BAD_REQUEST),
)
async def list_books(request: Request, service: BookServiceDep) -> BookListResponse:
    """List every book ordered by title.

    Query parameters are passed through as equality filters on book fields,
    e.g. ``/books?author=Matthew Lane``.
    """
    books = await service.list_books(dict(request.query_params))
    return BookListResponse(books=books)


@router.get(
    "/{isbn}",
    response_model=BookResponse,
    responses=error_responses(status.HTTP_404_NOT_FOUND),
)
async def get_book(isbn: str, service: BookServiceDep) -> BookResponse:
    """Fetch a single book by isbn."""
    return BookResponse(book=await service.get_book(isbn))


@router.post(
    "",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(status.HTTP_400_BAD_REQUEST, status.HTTP_409_CONFLICT),
)
async def create_book(service: BookServiceDep, document: JsonBody = None) -> BookResponse:
    """Create a book from a full creation payload, isbn included."""
    return BookResponse(book=await service.create_book(document))


@router.put(
    "/{isbn}",
    response_model=BookResponse,
    responses=error_responses(status.HTTP_400_BAD_REQUEST, status.HTTP_404_NOT_FOUND),
)
async def update_book(
    isbn: str, service: BookServiceDep, document: JsonBody = None
) -> BookResponse:
    """Replace every mutable field of a book. The isbn cannot change."""
    return BookResponse(book=await service.update_book(isbn, document))


@router.delete(
    "/{isbn}",
    response_model=MessageResponse,
    responses=error_responses(status.HTTP_404_NOT_FOUND),
)
async def delete_book(isbn: str, service: BookServiceDep) -> MessageResponse:
    """Delete a book by isbn."""
    await service.delete_book(isbn)
    return MessageResponse(message=BOOK_DELETED_MESSAGE)
