"""Health check endpoints."""

from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Request

from ..schemas import HealthResponse

logger = structlog.get_logger(__name__)
router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Basic health check",
    description="Quick health check endpoint for load balancers and monitoring",
)
async def health_check(request: Request) -> HealthResponse:
    """
    Basic health check.

    Reports "degraded" when the GitHub backend is selected but missing its
    token or repository; submissions will fail with 500 until fixed.
    Never calls GitHub.
    """
    settings = request.app.state.settings
    configured = settings.ISSUE_TRACKER == "mock" or settings.github_configured

    if not configured:
        logger.warning("health_check_degraded", tracker=settings.ISSUE_TRACKER)

    return HealthResponse(
        status="healthy" if configured else "degraded",
        timestamp=datetime.now(timezone.utc),
        tracker=settings.ISSUE_TRACKER,
        tracker_configured=configured,
    )
