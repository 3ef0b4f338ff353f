"""Infrastructure layer for data persistence.

This package holds the concrete implementations the domain layer depends on:
the async SQLAlchemy engine and session lifecycle, the ORM table mapping for
books, and the repository that fulfils the book store contract against
PostgreSQL.
"""
