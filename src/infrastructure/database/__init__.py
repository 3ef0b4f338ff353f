"""Database access with async PostgreSQL and the repository pattern.

Core components:
- **base**: Declarative base with constraint naming conventions
- **models**: ORM mapping of the ``books`` table
- **session**: Async engine and session management
- **repository**: Generic repository keyed by a model's primary key
- **book_repository**: Book store implementation on top of the repository
- **dependencies**: FastAPI dependency injection helpers
"""

from src.infrastructure.database.base import Base
from src.infrastructure.database.book_repository import BookRepository
from src.infrastructure.database.dependencies import DatabaseSession, get_db
from src.infrastructure.database.models import BookModel
from src.infrastructure.database.repository import BaseRepository
from src.infrastructure.database.session import (
    check_database_connection,
    close_database,
    get_async_session,
    get_engine,
)

__all__ = [
    "Base",
    "BaseRepository",
    "BookModel",
    "BookRepository",
    "DatabaseSession",
    "check_database_connection",
    "close_database",
    "get_async_session",
    "get_db",
    "get_engine",
]
