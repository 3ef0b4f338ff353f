"""Browser hardening headers stamped on every response."""

from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from src.api.constants import DEFAULT_HSTS_MAX_AGE

BASE_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
}


def hsts_value(max_age: int, *, include_subdomains: bool = True, preload: bool = False) -> str:
    """Compose a ``Strict-Transport-Security`` value."""
    directives = [f"max-age={max_age}"]
    if include_subdomains:
        directives.append("includeSubDomains")
    if preload:
        directives.append("preload")
    return "; ".join(directives)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Overwrite the hardening headers on each response.

    Args:
        app: The wrapped application.
        hsts_max_age: HSTS lifetime in seconds, or None to omit HSTS.
        hsts_include_subdomains: Extend HSTS to subdomains.
        hsts_preload: Ask browsers to preload the HSTS policy.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        hsts_max_age: int | None = DEFAULT_HSTS_MAX_AGE,
        hsts_include_subdomains: bool = True,
        hsts_preload: bool = False,
    ) -> None:
        super().__init__(app)
        self.headers = dict(BASE_HEADERS)
        if hsts_max_age is not None:
            self.headers["Strict-Transport-Security"] = hsts_value(
                hsts_max_age,
                include_subdomains=hsts_include_subdomains,
                preload=hsts_preload,
            )

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        response = await call_next(request)
        response.headers.update(self.headers)
        return response
