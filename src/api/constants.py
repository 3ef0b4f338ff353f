"""API-related constants."""

# HTTP Headers
CORRELATION_ID_HEADER = "X-Correlation-ID"
REQUEST_ID_HEADER = "X-Request-ID"

# Request logging
MAX_USER_AGENT_LENGTH = 200

# Security
DEFAULT_HSTS_MAX_AGE = 31536000  # 1 year in seconds

# Error messages
INTERNAL_ERROR_MESSAGE = "An internal server error occurred"
BOOK_DELETED_MESSAGE = "Book deleted"
