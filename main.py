"""Command-line entry point that serves the Bookshelf API with uvicorn."""

import os

import uvicorn
from loguru import logger

from src.core.config import get_settings
from src.core.logging import setup_logging

UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def build_uvicorn_log_config() -> dict[str, object]:
    """Route uvicorn's loggers through the Loguru intercept handler."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "handlers": {
            "default": {"class": "src.core.logging.InterceptHandler"},
        },
        "loggers": {
            name: {"handlers": ["default"], "level": "INFO", "propagate": False}
            for name in UVICORN_LOGGERS
        },
    }


def main() -> None:
    """Run the API server.

    ``PORT`` overrides the configured port, as set by container platforms.
    Debug mode serves the app by import string so auto-reload works.
    """
    settings = get_settings()
    setup_logging(settings)

    port = int(os.environ.get("PORT", settings.api_port))
    mode = "development mode with auto-reload" if settings.debug else "production mode"
    logger.info("Starting Uvicorn on http://{}:{} ({})", settings.api_host, port, mode)

    uvicorn.run(
        "src.api.main:app",
        host=settings.api_host,
        port=port,
        reload=settings.debug,
        log_config=build_uvicorn_log_config(),
    )


if __name__ == "__main__":
    main()
