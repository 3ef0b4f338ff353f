"""Turning exceptions into ``ErrorResponse`` bodies.

``translate_error`` decides, without side effects, which status, error code,
message and severity a failure is reported with:

- ``ValidationError`` and unparseable request bodies: 400
- ``NotFoundError`` and unknown routes: 404
- ``ConflictError``: 409
- other Starlette ``HTTPException``: their own status
- anything else: 500, with the real message kept out of the body

The handlers below log the failure and render the translation.
"""

from dataclasses import dataclass
from typing import Any, Final

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response
from loguru import logger
from starlette.exceptions import HTTPException

from src.api.constants import INTERNAL_ERROR_MESSAGE
from src.api.schemas.errors import ErrorResponse, ServiceInfo
from src.api.utils.responses import ORJSONResponse
from src.core.config import get_settings
from src.core.context import RequestContext, generate_request_id
from src.core.error_context import sanitize_error_context
from src.core.exceptions import (
    BookshelfError,
    ConflictError,
    ErrorCode,
    NotFoundError,
    Severity,
    ValidationError,
)

_CLIENT_ERROR_STATUS: Final[dict[type[BookshelfError], int]] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
}

_STATUS_ERROR_CODE: Final = {
    status.HTTP_400_BAD_REQUEST: ErrorCode.VALIDATION_ERROR,
    status.HTTP_404_NOT_FOUND: ErrorCode.NOT_FOUND,
    status.HTTP_409_CONFLICT: ErrorCode.CONFLICT,
}


@dataclass(frozen=True, slots=True)
class ErrorTranslation:
    """What the client is told about a failure."""

    status_code: int
    error_code: str
    message: str | list[str]
    severity: Severity


def _internal(error_code: str, severity: Severity, status_code: int = 500) -> ErrorTranslation:
    return ErrorTranslation(status_code, error_code, INTERNAL_ERROR_MESSAGE, severity)


def _field_path(error: dict[str, Any]) -> str:
    return ".".join(str(part) for part in error.get("loc", ()))


def translate_error(exc: Exception) -> ErrorTranslation:
    """Describe ``exc`` as an HTTP failure.

    Failures the client caused keep their message. Everything else gets
    ``INTERNAL_ERROR_MESSAGE`` and the details only reach the logs.
    """
    match exc:
        case BookshelfError():
            status_code = next(
                (code for cls, code in _CLIENT_ERROR_STATUS.items() if isinstance(exc, cls)),
                None,
            )
            if status_code is None:
                return _internal(exc.error_code, exc.severity)
            return ErrorTranslation(status_code, exc.error_code, exc.detail, exc.severity)
        case RequestValidationError():
            violations = [
                f"{_field_path(error)}: {error.get('msg', 'Invalid value')}"
                for error in exc.errors()
            ]
            return ErrorTranslation(
                status.HTTP_400_BAD_REQUEST,
                ErrorCode.VALIDATION_ERROR.value,
                violations,
                Severity.LOW,
            )
        case HTTPException() if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            return _internal(ErrorCode.INTERNAL_ERROR.value, Severity.HIGH, exc.status_code)
        case HTTPException():
            code = _STATUS_ERROR_CODE.get(exc.status_code, ErrorCode.INTERNAL_ERROR)
            return ErrorTranslation(exc.status_code, code.value, str(exc.detail), Severity.LOW)
        case _:
            return _internal(ErrorCode.INTERNAL_ERROR.value, Severity.CRITICAL)


def _render(translation: ErrorTranslation) -> ORJSONResponse:
    settings = get_settings()
    body = ErrorResponse(
        message=translation.message,
        error_code=translation.error_code,
        severity=translation.severity.value,
        correlation_id=RequestContext.get_correlation_id(),
        request_id=RequestContext.get_request_id() or generate_request_id(),
        service_info=ServiceInfo(
            name=settings.app_name,
            version=settings.app_version,
            environment=settings.environment,
        ),
    )
    return ORJSONResponse(
        status_code=translation.status_code, content=body.model_dump(mode="json")
    )


def _where(request: Request) -> dict[str, str]:
    return {"request_method": request.method, "request_path": request.url.path}


def _require[E: Exception](exc: Exception, expected: type[E]) -> E:
    if not isinstance(exc, expected):
        raise TypeError(f"Expected {expected.__name__}, got {type(exc).__name__}")
    return exc


async def bookshelf_error_handler(request: Request, exc: Exception) -> Response:
    """Render a ``BookshelfError``, logging it as a warning when it is expected."""
    error = _require(exc, BookshelfError)
    translation = translate_error(error)
    log = logger.warning if error.is_expected else logger.error
    log(
        "{} while handling request: {}",
        type(error).__name__,
        error.message,
        status_code=translation.status_code,
        fingerprint=error.fingerprint,
        **sanitize_error_context(error, _where(request)),
    )
    return _render(translation)


async def validation_error_handler(request: Request, exc: Exception) -> Response:
    """Render a request FastAPI could not parse as a list of violations."""
    translation = translate_error(_require(exc, RequestValidationError))
    logger.warning(
        "Request validation failed",
        status_code=translation.status_code,
        validation_errors=translation.message,
        **_where(request),
    )
    return _render(translation)


async def http_exception_handler(request: Request, exc: Exception) -> Response:
    """Render routing errors such as unknown paths or disallowed methods."""
    error = _require(exc, HTTPException)
    translation = translate_error(error)
    logger.warning(
        "HTTP {} for request",
        error.status_code,
        status_code=translation.status_code,
        detail=error.detail,
        **_where(request),
    )
    response = _render(translation)
    response.headers.update(error.headers or {})
    return response


async def generic_exception_handler(request: Request, exc: Exception) -> Response:
    """Log an unexpected exception with its traceback and answer with a bare 500."""
    logger.exception(
        "Unhandled {}",
        type(exc).__name__,
        **sanitize_error_context(exc, _where(request)),
    )
    return _render(translate_error(exc))


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers above on ``app``."""
    app.add_exception_handler(BookshelfError, bookshelf_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
    logger.debug("Exception handlers registered")
