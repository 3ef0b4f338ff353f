"""ORM table mappings."""

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.base import Base


class BookModel(Base):
    """Row in the ``books`` table, keyed by the client-supplied isbn."""

    __tablename__ = "books"

    isbn: Mapped[str] = mapped_column(Text, primary_key=True)
    amazon_url: Mapped[str] = mapped_column(Text, nullable=False)
    author: Mapped[str] = mapped_column(Text, nullable=False)
    language: Mapped[str] = mapped_column(Text, nullable=False)
    pages: Mapped[int] = mapped_column(Integer, nullable=False)
    publisher: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    year: Mapped[int] = mapped_column(Integer, nullable=False)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(isbn={self.isbn!r})>"
