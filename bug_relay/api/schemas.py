"""API response schemas outside the submit-bug contract."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error body for routes other than submit-bug."""

    error: str = Field(..., description="Error category")
    detail: str = Field(..., description="Human readable error detail")
    request_id: str | None = Field(default=None, description="Request ID for tracing")


class HealthResponse(BaseModel):
    """Basic health check response."""

    status: Literal["healthy", "degraded"]
    timestamp: datetime
    tracker: Literal["github", "mock"] = Field(..., description="Configured tracker backend")
    tracker_configured: bool = Field(
        ...,
        description="Whether the tracker has the credential and repository it needs",
    )
