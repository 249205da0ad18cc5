"""
Artifact: syllabus_ingest/api/v1/routes/health.py
Purpose: Reports service readiness (database reachable, model credentials present).
Created: 2026-10-12
Revised:
- 2026-10-16: Added database ping and model configuration flag.
Preconditions:
- FastAPI routing context is initialized.
Inputs:
- Acceptable: HTTP GET requests without body.
- Unacceptable: Unsupported HTTP methods at the health route.
Postconditions:
- Never raises; an unreachable database is reported as `database: "unavailable"`.
Returns:
- Dictionary with `ok`, `database` and `modelConfigured`.
Errors/Exceptions:
- None; database errors are logged and reported in the payload.
"""

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from ....core.config import settings
from ....core.logging import get_logger
from ....db.base import engine

logger = get_logger("syllabus.api")
router = APIRouter(tags=["health"])


def _database_status() -> str:
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning("Health check database ping failed: %s", repr(e))
        return "unavailable"
    return "ok"


def get_health_status(route_path: str) -> dict:
    """Shared health-check handler body used by v1 and legacy routes."""
    logger.debug("GET %s", route_path)
    database = _database_status()
    return {
        "ok": database == "ok",
        "database": database,
        "modelConfigured": bool(settings.gemini_api_key()),
    }


@router.get("/health")
def health_v1():
    return get_health_status("/api/v1/health")
