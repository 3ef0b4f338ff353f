"""Application exceptions.

Everything the service raises on purpose is a ``BookshelfError``. Each one
names an ``ErrorCode`` for clients and a ``Severity`` that decides whether
the error handlers log it as a warning or as an error. The HTTP status for
each type is chosen in ``src.api.middleware.error_handler.translate_error``.
"""

import hashlib
import traceback
from collections.abc import Sequence
from enum import Enum
from typing import ClassVar

from src.core.types import ErrorContext

# Innermost frames of the raising stack that identify where an error comes from
FINGERPRINT_FRAMES = 5


class ErrorCode(Enum):
    """Machine-readable error identifiers returned in error bodies."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"


class Severity(Enum):
    """How serious an error is. LOW and MEDIUM are expected in normal use."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class BookshelfError(Exception):
    """Base class of all application exceptions.

    The raising stack is captured on construction and hashed into
    ``fingerprint`` so that log aggregation can group repeats of the same
    failure.

    Args:
        error_code: An ``ErrorCode`` or a custom code string.
        message: Human-readable description.
        severity: Defaults to MEDIUM.
        context: Structured details for the logs.
        cause: The exception being wrapped, chained as ``__cause__``.
    """

    def __init__(
        self,
        error_code: str | ErrorCode,
        message: str,
        severity: Severity = Severity.MEDIUM,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.error_code = (
            error_code.value if isinstance(error_code, ErrorCode) else error_code
        )
        self.message = message
        self.severity = severity
        self.context = context or {}
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause
        self.stack_trace = traceback.format_stack()[:-1]
        self.fingerprint = self._fingerprint()

    def _fingerprint(self) -> str:
        parts = [type(self).__name__, self.error_code]
        for frame in self.stack_trace[-FINGERPRINT_FRAMES:]:
            if "src/" in frame and "site-packages" not in frame:
                parts.append(frame.strip().splitlines()[0])
        return hashlib.sha256(":".join(parts).encode()).hexdigest()[:16]

    @property
    def detail(self) -> str | list[str]:
        """What the client is told about this error."""
        return self.message

    @property
    def is_expected(self) -> bool:
        return self.severity in {Severity.LOW, Severity.MEDIUM}

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        context = f", context={self.context}" if self.context else ""
        return (
            f"{type(self).__name__}(error_code='{self.error_code}', "
            f"message='{self.message}', severity={self.severity.value}{context})"
        )


class _ClassifiedError(BookshelfError):
    """An error whose code and severity are fixed by its type."""

    default_code: ClassVar[ErrorCode]
    default_severity: ClassVar[Severity]

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            error_code or self.default_code, message, self.default_severity, context, cause
        )


class ValidationError(_ClassifiedError):
    """Input broke the rules for a book or a filter.

    ``message`` is either one string or the ordered violations; a sequence is
    kept as ``violations`` and returned whole by ``detail``.
    """

    default_code = ErrorCode.VALIDATION_ERROR
    default_severity = Severity.LOW

    def __init__(
        self,
        message: str | Sequence[str],
        error_code: str | ErrorCode | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.violations: list[str] | None = (
            None if isinstance(message, str) else list(message)
        )
        text = "; ".join(self.violations) if self.violations is not None else message
        super().__init__(text, error_code, context, cause)

    @property
    def detail(self) -> str | list[str]:
        return self.message if self.violations is None else self.violations


class NotFoundError(_ClassifiedError):
    """No record has the requested key."""

    default_code = ErrorCode.NOT_FOUND
    default_severity = Severity.LOW


class ConflictError(_ClassifiedError):
    """A write collided with an existing record, such as a reused isbn."""

    default_code = ErrorCode.CONFLICT
    default_severity = Severity.MEDIUM
