"""API route handlers."""

from .health import router as health_router
from .submit import router as submit_router

__all__ = ["health_router", "submit_router"]
