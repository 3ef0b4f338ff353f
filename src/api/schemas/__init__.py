"""Pydantic models for API responses.

- **books**: Envelopes wrapping books and confirmation messages
- **errors**: The standard error body returned for every failure
- **system**: Health and info bodies for the operational endpoints
"""
