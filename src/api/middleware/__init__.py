"""Middleware for cross-cutting request and response concerns.

- **SecurityHeadersMiddleware**: adds HSTS, X-Frame-Options and related headers
- **RequestContextMiddleware**: propagates the correlation ID
- **RequestLoggingMiddleware**: logs each request with its timing
- **error_handler**: translates exceptions into error responses

Middleware run in reverse order of registration, so security headers are
applied last on the way out and the correlation ID is set before anything
logs.
"""
