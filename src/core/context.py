"""Per-request identifiers kept in ``contextvars``.

The correlation ID ties together every service a request touches and is
echoed to the client; the request ID names one HTTP exchange. Each asyncio
task sees its own values, so concurrent requests never mix them up.
"""

import uuid
from contextvars import ContextVar

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)
_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)


class RequestContext:
    """Read and write the identifiers of the request being handled."""

    @staticmethod
    def set_correlation_id(correlation_id: str) -> None:
        _correlation_id.set(correlation_id)

    @staticmethod
    def get_correlation_id() -> str | None:
        return _correlation_id.get()

    @staticmethod
    def set_request_id(request_id: str) -> None:
        _request_id.set(request_id)

    @staticmethod
    def get_request_id() -> str | None:
        return _request_id.get()

    @staticmethod
    def clear() -> None:
        """Forget both identifiers in the current context."""
        _correlation_id.set(None)
        _request_id.set(None)


def generate_correlation_id() -> str:
    """Return a fresh UUID4 string."""
    return str(uuid.uuid4())


def generate_request_id() -> str:
    """Return a fresh request ID of the form ``req-<uuid4>``."""
    return f"req-{uuid.uuid4()}"
