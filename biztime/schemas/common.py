"""
BizTime Backend — Shared Response Schemas
===========================================

What:  Response models used by more than one router: the error envelope,
       the delete acknowledgement and the health check.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standardized error body returned by every exception handler.

    Example:
        {
            "error": "not_found",
            "message": "No such invoice: 42",
            "details": {"resource": "invoice", "resource_id": "42"},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class StatusResponse(BaseModel):
    """Returned by DELETE endpoints."""
    status: str = Field(default="deleted", description="Outcome of the operation")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
