"""Pydantic schemas for book payloads and the Book entity.

Payload schemas run in strict mode: JSON strings are never coerced to
integers and booleans are never accepted as strings, so ``"250"`` for
``pages`` is a violation rather than a silently converted value. Unknown
fields are rejected. Integers must fit the 32-bit columns they are stored in.
"""

from pydantic import BaseModel, ConfigDict, Field

from src.core.constants import INTEGER_COLUMN_MAX, INTEGER_COLUMN_MIN


class BookEdit(BaseModel):
    """Full-replace update payload: every mutable field, never the isbn."""

    model_config = ConfigDict(strict=True, extra="forbid")

    amazon_url: str = Field(
        ...,
        description="Link to the book's Amazon page",
        examples=["http://a.co/eobPtX2"],
    )
    author: str = Field(..., description="Author name", examples=["Matthew Lane"])
    language: str = Field(..., description="Language of the text", examples=["english"])
    pages: int = Field(
        ..., gt=0, le=INTEGER_COLUMN_MAX, description="Page count", examples=[264]
    )
    publisher: str = Field(
        ..., description="Publisher name", examples=["Princeton University Press"]
    )
    title: str = Field(
        ...,
        description="Book title",
        examples=["Power-Up: Unlocking the Hidden Mathematics in Video Games"],
    )
    year: int = Field(
        ...,
        ge=INTEGER_COLUMN_MIN,
        le=INTEGER_COLUMN_MAX,
        description="Publication year",
        examples=[2017],
    )


class BookCreate(BookEdit):
    """Creation payload: the mutable fields plus the client-chosen isbn."""

    isbn: str = Field(
        ..., description="Unique, immutable business key", examples=["0691161518"]
    )


class Book(BookCreate):
    """A stored book, as returned by the book store."""

    model_config = ConfigDict(from_attributes=True, frozen=True, strict=False)
