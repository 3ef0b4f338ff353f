"""Application factory for the Bookshelf API.

The ASGI ``app`` at the bottom of this module is what uvicorn serves.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from src.api.middleware.error_handler import register_exception_handlers
from src.api.middleware.request_context import RequestContextMiddleware
from src.api.middleware.request_logging import RequestLoggingMiddleware
from src.api.middleware.security_headers import SecurityHeadersMiddleware
from src.api.routers import books, system
from src.api.utils.responses import ORJSONResponse
from src.core.config import Settings, get_settings
from src.core.logging import setup_logging
from src.core.observability import instrument_app, setup_tracing
from src.infrastructure.database.session import check_database_connection, close_database


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncGenerator[None]:
    """Refuse to start without a database, and dispose of the pool on exit.

    Raises:
        RuntimeError: If the database does not answer at startup.
    """
    reachable, error_msg = await check_database_connection()
    if not reachable:
        logger.error("Database unreachable at startup: {}", error_msg)
        msg = f"Database connection failed: {error_msg}"
        raise RuntimeError(msg)

    logger.info("{} v{} started", application.title, application.version)
    try:
        yield
    finally:
        await close_database()
        logger.info("{} stopped", application.title)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application from settings.

    ``settings.debug`` only drives auto-reload. It is never passed to FastAPI,
    whose debug mode answers unhandled errors with a traceback page.

    Args:
        settings: Settings to build from. Defaults to ``get_settings()``.

    Returns:
        FastAPI: The assembled application.
    """
    settings = settings or get_settings()

    setup_logging(settings)
    setup_tracing(settings)

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        docs_url=settings.docs_url,
        redoc_url=settings.redoc_url,
        openapi_url=settings.openapi_url,
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )
    register_exception_handlers(application)

    # Last added runs first: security headers wrap the correlation ID, which
    # wraps request logging and its 500 fallback.
    application.add_middleware(RequestLoggingMiddleware, log_config=settings.log_config)
    application.add_middleware(RequestContextMiddleware)
    application.add_middleware(SecurityHeadersMiddleware)

    application.include_router(books.router)
    application.include_router(system.router)

    instrument_app(application, settings)
    return application


app = create_app()
