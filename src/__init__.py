"""Bookshelf - a book catalog API.

Bookshelf exposes create, read, update and delete operations over book
records stored in PostgreSQL, built with FastAPI and async SQLAlchemy.

Architecture Overview:
- **API Layer**: FastAPI routers, middleware, and error translation
- **Core Layer**: Configuration, logging, tracing, and the exception hierarchy
- **Domain Layer**: Book schemas, payload validation, and the book service
- **Infrastructure Layer**: Async database access and the book repository
"""
