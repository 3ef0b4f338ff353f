"""Access logging, request IDs and the last-resort 500 response.

Every request gets an ``X-Request-ID`` (the client's, or a new one). Unless
its path is in ``LogConfig.excluded_paths``, it is logged when it starts and
when it completes, with a warning when it takes longer than
``LogConfig.slow_request_threshold_ms``.

This is the innermost middleware. An exception that no registered handler
claimed is turned into the generic 500 response here, so that response still
passes back out through the correlation ID and security header middleware.
"""

import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from src.api.constants import MAX_USER_AGENT_LENGTH, REQUEST_ID_HEADER
from src.api.middleware.error_handler import generic_exception_handler
from src.core.config import LogConfig, get_settings
from src.core.constants import MILLISECONDS_PER_SECOND
from src.core.context import RequestContext, generate_request_id

type CallNext = Callable[[Request], Awaitable[Response]]


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each request and tag its response with the request ID.

    Args:
        app: The wrapped application.
        log_config: Excluded paths and the slow-request threshold.
    """

    def __init__(self, app: ASGIApp, *, log_config: LogConfig) -> None:
        super().__init__(app)
        self.log_config = log_config
        self.excluded_paths = frozenset(log_config.excluded_paths)
        # Proxy headers can be forged unless a trusted proxy sets them
        self.trust_proxy_headers = get_settings().environment == "production"

    def _get_client_ip(self, request: Request) -> str:
        if self.trust_proxy_headers:
            forwarded = request.headers.get("x-forwarded-for") or request.headers.get(
                "x-real-ip"
            )
            if forwarded:
                return forwarded.split(",")[0].strip()
        return request.client.host if request.client else "unknown"

    @staticmethod
    def _get_user_agent(request: Request) -> str:
        return request.headers.get("user-agent", "")[:MAX_USER_AGENT_LENGTH] or "unknown"

    @staticmethod
    async def _respond(request: Request, call_next: CallNext) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:  # noqa: BLE001 - answered with the generic 500
            return await generic_exception_handler(request, exc)

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        """Run the request, logging it unless its path is excluded.

        Returns:
            Response: The application's response, or the generic 500 response
                when the application raised.
        """
        request_id = request.headers.get(REQUEST_ID_HEADER) or generate_request_id()
        RequestContext.set_request_id(request_id)

        if request.url.path in self.excluded_paths:
            response = await self._respond(request, call_next)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response

        with logger.contextualize(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client_host=self._get_client_ip(request),
            user_agent=self._get_user_agent(request),
        ):
            logger.info("Request started", query_params=dict(request.query_params) or None)
            started = time.perf_counter()
            response = await self._respond(request, call_next)
            elapsed_ms = round((time.perf_counter() - started) * MILLISECONDS_PER_SECOND, 2)

            log = logger.error if response.status_code >= 500 else logger.info
            log(
                "Request completed",
                status_code=response.status_code,
                duration_ms=elapsed_ms,
                response_size=int(response.headers.get("content-length", 0)),
            )
            if elapsed_ms > self.log_config.slow_request_threshold_ms:
                logger.warning(
                    "Slow request detected",
                    duration_ms=elapsed_ms,
                    threshold_ms=self.log_config.slow_request_threshold_ms,
                )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
