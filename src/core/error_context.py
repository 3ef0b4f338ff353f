"""Redaction of secrets in the context attached to error log records.

A key is sensitive when it matches ``DEFAULT_SENSITIVE_PATTERN`` or contains
one of ``LogConfig.sensitive_fields``. Its value is replaced by ``REDACTED``
at any nesting depth. Book fields such as ``author`` are never redacted.
"""

from __future__ import annotations

import re
from functools import lru_cache
from re import Pattern
from typing import Any, Final

from src.core.config import get_settings
from src.core.constants import REDACTED

DEFAULT_SENSITIVE_PATTERN: Final[Pattern[str]] = re.compile(
    r"(password|passwd|pwd|secret|token|api[_-]?key|apikey|auth(?!ors?(?![a-z]))|"
    r"credential|private[_-]?key|access[_-]?key|session|connection[_-]?string)",
    re.IGNORECASE,
)

# Anything nested deeper than this is redacted wholesale
MAX_DEPTH: Final[int] = 10

# Exception attributes that are logged through other channels
_SKIPPED_ATTRIBUTES: Final = frozenset({"stack_trace", "cause"})


@lru_cache(maxsize=1)
def _get_sensitive_fields() -> tuple[str, ...]:
    return tuple(field.lower() for field in get_settings().log_config.sensitive_fields)


def is_sensitive_field(field_name: str) -> bool:
    """Tell whether values stored under ``field_name`` must be hidden."""
    if DEFAULT_SENSITIVE_PATTERN.search(field_name):
        return True
    lowered = field_name.lower()
    return any(fragment in lowered for fragment in _get_sensitive_fields())


def sanitize_value(value: Any, field_name: str = "", depth: int = 0) -> Any:  # noqa: ANN401
    """Return ``value`` with sensitive entries redacted.

    Dicts are walked by key; lists and tuples are walked element by element.
    """
    if depth > MAX_DEPTH or (field_name and is_sensitive_field(field_name)):
        return REDACTED
    match value:
        case dict():
            return {key: sanitize_value(item, key, depth + 1) for key, item in value.items()}
        case list():
            return [sanitize_value(item, depth=depth + 1) for item in value]
        case tuple():
            return tuple(sanitize_value(item, depth=depth + 1) for item in value)
        case _:
            return value


def sanitize_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Copy ``data`` with every sensitive value redacted."""
    return {key: sanitize_value(value, key) for key, value in data.items()}


def sanitize_error_context(
    error: Exception, context: dict[str, Any] | None = None
) -> dict[str, Any]:
    """Build the keyword arguments an error handler logs for ``error``.

    Args:
        error: The exception being handled.
        context: Request details to merge in.

    Returns:
        dict[str, Any]: Error type and message, the merged context and the
            exception's public attributes, all redacted.
    """
    result: dict[str, Any] = {
        "error_type": type(error).__name__,
        "error_message": str(error),
        **sanitize_dict(context or {}),
    }
    attributes = {
        name: value
        for name, value in vars(error).items()
        if not name.startswith("_") and name not in _SKIPPED_ATTRIBUTES
    }
    if attributes:
        result["error_attributes"] = sanitize_dict(attributes)
    return result
