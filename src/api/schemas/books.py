"""Response envelopes for the books resource."""

from pydantic import BaseModel, Field

from src.domain.books.schemas import Book


class BookResponse(BaseModel):
    """A single book."""

    book: Book


class BookListResponse(BaseModel):
    """Every book matching the request's filters."""

    books: list[Book] = Field(default_factory=list)


class MessageResponse(BaseModel):
    """Confirmation of an operation without a body of its own."""

    message: str = Field(..., examples=["Book deleted"])
