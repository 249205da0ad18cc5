"""Route module exports for API v1."""

from .health import router as health_router
from .syllabus import router as syllabus_router

__all__ = ["health_router", "syllabus_router"]
