"""FastAPI application for the BugRelay submission endpoint.

Provides:
- POST/OPTIONS /submit-bug (also mounted at /api/submit-bug)
- Health checks

Run with:
    uvicorn bug_relay.api.main:app
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..core.config import Settings, get_settings
from ..core.logging import setup_logging
from ..integrations import IssueTrackerClient, get_tracker_client
from ..services.submitter import BugReportSubmitter
from .dispatch import method_not_allowed
from .middleware.logging import RequestLoggingMiddleware
from .routes import health_router, submit_router
from .routes.submit import SUBMIT_PATHS, as_response
from .schemas import ErrorResponse

logger = structlog.get_logger(__name__)

API_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup logs the selected tracker; shutdown closes the tracker
    client's HTTP connection pool.
    """
    settings: Settings = app.state.settings

    logger.info(
        "application_starting",
        app_name=settings.APP_NAME,
        environment=settings.ENVIRONMENT.value,
        tracker=settings.ISSUE_TRACKER,
        repo=settings.GITHUB_REPO,
    )

    if settings.ISSUE_TRACKER == "github" and not settings.github_configured:
        logger.warning("github_not_configured", detail="all submissions will fail with 500")

    try:
        yield
    finally:
        logger.info("application_shutting_down")
        await app.state.submitter.client.close()
        logger.info("application_shutdown_complete")


def create_app(
    settings: Settings | None = None,
    client: IssueTrackerClient | None = None,
) -> FastAPI:
    """
    Build the ASGI application.

    Args:
        settings: Settings to use (defaults to environment settings)
        client: Tracker client (defaults to get_tracker_client(settings))

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    client = client or get_tracker_client(settings)

    app = FastAPI(
        title="BugRelay API",
        description="Files website bug reports as GitHub issues.",
        version=API_VERSION,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.is_development else None,
    )
    app.state.settings = settings
    app.state.submitter = BugReportSubmitter(settings, client)

    # CORS headers for submit-bug are set per response in api.dispatch
    app.add_middleware(RequestLoggingMiddleware)

    _register_exception_handlers(app, settings)

    app.include_router(health_router)
    app.include_router(submit_router)

    @app.get("/", include_in_schema=False)
    async def root():
        """Basic service information."""
        return {
            "name": settings.APP_NAME,
            "version": API_VERSION,
            "submit_url": "/submit-bug",
            "health_url": "/health",
            "environment": settings.ENVIRONMENT.value,
        }

    return app


def _register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request,
        exc: StarletteHTTPException,
    ) -> Response:
        """Handle HTTP exceptions with consistent error format.

        The submit-bug paths keep their own 405 body and CORS headers for
        methods the router rejects before dispatch.
        """
        if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED and request.url.path in SUBMIT_PATHS:
            logger.warning("method_not_allowed", method=request.method, path=request.url.path)
            return as_response(method_not_allowed())

        request_id = getattr(request.state, "request_id", None)

        logger.warning(
            "http_exception",
            status_code=exc.status_code,
            detail=exc.detail,
            path=request.url.path,
        )

        error_response = ErrorResponse(
            error="http_error",
            detail=str(exc.detail),
            request_id=request_id,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response.model_dump(),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions with logging."""
        request_id = getattr(request.state, "request_id", None)

        logger.error(
            "unexpected_exception",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
            exc_info=True,
        )

        # In production, don't expose internal error details
        detail = str(exc) if settings.DEBUG else "An unexpected error occurred"

        error_response = ErrorResponse(
            error="internal_error",
            detail=detail,
            request_id=request_id,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_response.model_dump(),
        )


setup_logging()
app = create_app()
