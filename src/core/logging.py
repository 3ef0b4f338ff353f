"""Loguru configuration for the service.

``setup_logging`` installs one stdout sink in one of two shapes:

- ``console``: a colored line per record. Request context (correlation ID,
  method, path, status, duration) comes first, then any other bound fields
  as ``key=value``.
- ``json``: one orjson-encoded object per record carrying every public bound
  field, for log collectors.

Standard-library loggers (uvicorn, SQLAlchemy, asyncpg) are forwarded into
Loguru through ``InterceptHandler``. Keys listed in
``LogConfig.sensitive_fields`` are redacted in both shapes.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any, Final, cast

import orjson
from loguru import logger

from src.core.config import get_settings
from src.core.constants import REDACTED

if TYPE_CHECKING:
    from src.core.config import Settings

FALLBACK_FORMAT: Final = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name} | {message}\n"
SHORT_ID_LENGTH: Final = 8
MAX_VALUE_LENGTH: Final = 100

# Shown first, in this order, when present
CONTEXT_FIELDS: Final = (
    "correlation_id",
    "request_id",
    "method",
    "path",
    "status_code",
    "duration_ms",
)

_STATUS_MARKUP: Final = {
    "2": ("<green>", "</green>"),
    "3": ("<cyan>", "</cyan>"),
    "4": ("<red>", "</red>"),
    "5": ("<red><bold>", "</bold></red>"),
}

_configured = False


def _braces(value: object) -> str:
    # Loguru treats the formatter's return value as a format string
    return str(value).replace("{", "{{").replace("}", "}}")


def _is_public(key: str) -> bool:
    return not key.startswith("_")


def _redacted(key: str, value: object) -> object:
    return REDACTED if key in get_settings().log_config.sensitive_fields else value


def _render_context(field: str, value: object) -> str:
    text = str(value)
    if field == "correlation_id":
        text = text[:SHORT_ID_LENGTH]
    elif field == "duration_ms":
        text = f"{text}ms"
    elif field == "status_code" and (markup := _STATUS_MARKUP.get(text[:1])):
        return f"{markup[0]}{text}{markup[1]}"
    return _braces(text)


def _render_extra(key: str, value: object) -> str:
    text = str(_redacted(key, value))
    if len(text) > MAX_VALUE_LENGTH:
        text = text[: MAX_VALUE_LENGTH - 3] + "..."
    return f"{_braces(key)}={_braces(text)}"


def format_console_with_context(record: dict[str, Any]) -> str:
    """Build the Loguru format string for one console line."""
    try:
        extra: dict[str, Any] = record.get("extra", {})
        tags = [
            f"[<yellow>{_render_context(field, extra[field])}</yellow>]"
            for field in CONTEXT_FIELDS
            if extra.get(field) is not None
        ]
        tags += [
            f"[<dim>{_render_extra(key, value)}</dim>]"
            for key, value in extra.items()
            if key not in CONTEXT_FIELDS and _is_public(key) and value is not None
        ]
        columns = [
            f"<green>{record['time'].strftime('%Y-%m-%d %H:%M:%S.%f')[:-3]}</green>",
            f"<level>{record['level'].name: <8}</level>",
            f"<cyan>{record['name']}:{record['function']}:{record['line']}</cyan>",
        ]
        if tags:
            columns.append(" ".join(tags))
        columns.append(_braces(record["message"]))
    except (AttributeError, TypeError, ValueError, KeyError):
        return FALLBACK_FORMAT
    line = " | ".join(columns)
    if record.get("exception"):
        line += "\n{exception}"
    return line + "\n"


def serialize_for_json(record: dict[str, Any]) -> str:
    """Encode one record as a JSON line."""
    entry: dict[str, Any] = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "logger": record["name"],
        "function": record["function"],
        "line": record["line"],
    }
    entry.update(
        (key, _redacted(key, value))
        for key, value in record.get("extra", {}).items()
        if _is_public(key)
    )
    if exc := record.get("exception"):
        entry["exception"] = {
            "type": exc.type.__name__ if exc.type else None,
            "value": str(exc.value) if exc.value else None,
        }
    return orjson.dumps(entry, default=str).decode() + "\n"


def _json_sink(message: object) -> None:
    sys.stdout.write(serialize_for_json(cast("Any", message).record))
    sys.stdout.flush()


class InterceptHandler(logging.Handler):
    """Re-emit standard-library log records through Loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Skip logging's own frames so Loguru reports the real caller
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(settings: Settings) -> None:
    """Install the configured sink and intercept standard logging.

    Only the first call in a process has any effect.
    """
    global _configured  # noqa: PLW0603
    if _configured:
        return

    log_config = settings.log_config
    formatter = log_config.log_formatter_type or "console"
    logger.remove()
    if formatter == "json":
        logger.add(_json_sink, level=log_config.log_level, enqueue=True, diagnose=False)
    else:
        logger.add(
            sys.stdout,
            format=cast("Any", format_console_with_context),
            level=log_config.log_level,
            enqueue=True,
            colorize=True,
            diagnose=settings.debug,
            backtrace=settings.debug,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        std_logger = logging.getLogger(name)
        if not std_logger.handlers:
            std_logger.handlers = [InterceptHandler()]
            std_logger.setLevel(logging.INFO)
            std_logger.propagate = False

    _configured = True
    logger.info("Logging configured ({} formatter, level {})", formatter, log_config.log_level)
