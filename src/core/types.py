"""Type aliases for dynamic data structures throughout the application.

Request payloads arrive as untyped JSON and are only turned into typed
models after validation. These aliases name the shapes that exist before
that point, and the loosely typed context dictionaries used for logging.
"""

from typing import Any

# Untyped field map as decoded from a request body, before validation
type Document = dict[str, Any]

# Query parameters passed through to the record store as equality filters
type Filters = dict[str, str]

# Context dictionary for error details and debugging information
type ErrorContext = dict[str, Any]
