"""Body returned by every failed request.

``message`` is the only field clients need: a string, or the ordered list of
violations when a payload broke several rules. The other fields help match a
response to its log lines.
"""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field

_EXAMPLE = {
    "message": "Cannot update isbn",
    "error_code": "VALIDATION_ERROR",
    "severity": "LOW",
    "correlation_id": "3f2c9a4e-8d1b-4c7a-9e05-6b1d2f7a8c90",
    "request_id": "req-b71e0c55-2a9d-4f3e-8c61-0d4a9e7f1b23",
    "timestamp": "2026-03-02T09:15:00+00:00",
    "service_info": {"name": "Bookshelf", "version": "0.1.0", "environment": "staging"},
}


class ServiceInfo(BaseModel):
    """Which deployment produced the error."""

    name: str = Field(..., examples=["Bookshelf"])
    version: str = Field(..., examples=["0.1.0"])
    environment: str = Field(..., examples=["development", "staging", "production"])


class ErrorResponse(BaseModel):
    """Error body shared by every route."""

    model_config = ConfigDict(json_schema_extra={"examples": [_EXAMPLE]})

    message: str | list[str] = Field(
        ...,
        description="What went wrong, or every violation in the order found",
        examples=[
            "There is no book with an isbn '0000'",
            ["author: Field required", "pages: Input should be a valid integer"],
        ],
    )
    error_code: str = Field(
        ..., examples=["VALIDATION_ERROR", "NOT_FOUND", "CONFLICT", "INTERNAL_ERROR"]
    )
    severity: str | None = Field(default=None, examples=["LOW", "CRITICAL"])
    correlation_id: str | None = Field(
        default=None, description="Echo of the X-Correlation-ID response header"
    )
    request_id: str | None = Field(
        default=None, description="Echo of the X-Request-ID response header"
    )
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    service_info: ServiceInfo | None = None
