"""
Artifact: syllabus_ingest/main.py
Purpose: Builds the FastAPI application and wires logging, schema setup and routes.
Created: 2026-10-12
Revised:
- 2026-10-14: Mounted versioned API router and kept the unversioned health route.
- 2026-10-16: Created database tables on startup.
Preconditions:
- Environment (or .env) provides GEMINI_API_KEY for uploads to succeed.
Inputs:
- Acceptable: ASGI server startup, e.g. `uvicorn syllabus_ingest.main:app`.
- Unacceptable: None.
Postconditions:
- Tables exist and routes are registered under /api/v1 plus legacy /health.
Returns:
- `app` FastAPI instance.
Errors/Exceptions:
- Database errors during startup propagate and abort the server.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from .api.v1.router import api_v1_router
from .api.v1.routes.health import get_health_status
from .core.config import settings
from .core.logging import configure_logging, get_logger
from .db.base import init_db

configure_logging(settings.log_level())
logger = get_logger("syllabus.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("%s started | model=%s", settings.app_title, settings.gemini_model())
    yield


app = FastAPI(title=settings.app_title, lifespan=lifespan)
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/health")
def health_legacy():
    return get_health_status("/health")
