"""Correlation ID propagation.

The ``X-Correlation-ID`` header is taken from the incoming request, or
generated when absent, stored in a context variable, bound to every log line
emitted while the request is handled, and echoed back on the response.
"""

from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from src.api.constants import CORRELATION_ID_HEADER
from src.core.context import RequestContext, generate_correlation_id


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Set the correlation ID for the lifetime of a request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Process the request with a correlation ID in context.

        Args:
            request: The incoming request.
            call_next: The next middleware/endpoint.

        Returns:
            Response: Response with correlation ID header.
        """
        correlation_id = (
            request.headers.get(CORRELATION_ID_HEADER) or generate_correlation_id()
        )
        RequestContext.set_correlation_id(correlation_id)

        # contextualize removes the binding once the request is done
        with logger.contextualize(correlation_id=correlation_id):
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = correlation_id
            return response
