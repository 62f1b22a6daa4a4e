"""
PromptShelf Backend — Shared Response Schemas
==============================================

What:  Error and health payloads shared by every router.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    field: str = Field(description="Dotted path of the offending field")
    message: str


class ErrorResponse(BaseModel):
    """
    Standard error body returned by the global exception handlers.

    Example:
        {
            "error": "validation_error",
            "message": "Validation failed",
            "details": [{"field": "title", "message": "Title is required"}],
            "request_id": "550e8400-e29b-41d4-a716-446655440000"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[List[ErrorDetail]] = Field(default=None)
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health; a reachable process with a dead database is not healthy."""
    status: str = Field(description="healthy, degraded or unhealthy")
    version: str
    database: str = Field(description="connected or disconnected")
    llm: str = Field(description="available, not_configured, unavailable or circuit_open")
    uptime_seconds: float
