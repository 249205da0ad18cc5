"""
Artifact: syllabus_ingest/api/v1/router.py
Purpose: Aggregates v1 API route modules for single include in app startup.
Created: 2026-10-12
Revised:
- 2026-10-14: Added syllabus routes.
Preconditions:
- Route modules under api/v1/routes are importable.
Inputs:
- Acceptable: FastAPI include_router integration.
- Unacceptable: Missing route modules or invalid router objects.
Postconditions:
- Exposes a composed APIRouter containing health and syllabus routes.
Returns:
- `APIRouter` instance.
Errors/Exceptions:
- Import errors if route modules cannot be resolved.
"""

from fastapi import APIRouter

from .routes.health import router as health_router
from .routes.syllabus import router as syllabus_router

api_v1_router = APIRouter()
api_v1_router.include_router(health_router)
api_v1_router.include_router(syllabus_router)
