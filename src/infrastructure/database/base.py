"""SQLAlchemy declarative base with constraint naming conventions.

All ORM models inherit from ``Base`` so their constraints get predictable
names, which keeps Alembic autogenerate output stable.
"""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

from src.infrastructure.constants import NAMING_CONVENTION


class Base(DeclarativeBase):
    """SQLAlchemy declarative base with naming conventions."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)
