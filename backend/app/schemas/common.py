"""
BrettAppsCode Backend - Shared Response Schemas
=================================================

What:  The error envelope and health check payload shared by all routers.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standardized error body for every non-2xx response.

    Example:
        {"success": false, "error": "Access denied", "request_id": "a1b2c3d4"}
    """

    success: bool = Field(default=False)
    error: str = Field(description="Human-readable error message")
    details: Optional[Any] = Field(default=None, description="Field-level problems, if any")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, degraded")
    version: str = Field(description="Application version")
    storage: str = Field(description="Storage root state: ready, absent, unwritable")
    uptime_seconds: float = Field(description="Seconds since service started")
