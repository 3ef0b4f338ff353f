"""Core application constants."""

# Time constants
MILLISECONDS_PER_SECOND = 1000

# Security and redaction
REDACTED = "[REDACTED]"

# Range of a PostgreSQL INTEGER column
INTEGER_COLUMN_MIN = -2_147_483_648
INTEGER_COLUMN_MAX = 2_147_483_647
