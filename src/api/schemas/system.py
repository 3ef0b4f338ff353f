"""Response bodies for the operational endpoints."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthStatus(BaseModel):
    """Liveness plus database reachability."""

    status: Literal["healthy", "degraded"]
    database: bool = Field(..., description="Whether the database answered")


class AppInfo(BaseModel):
    """Identity of the running service."""

    app_name: str
    version: str
    environment: str
    debug: bool
