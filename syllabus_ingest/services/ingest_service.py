"""
Artifact: syllabus_ingest/services/ingest_service.py
Purpose: Coordinates request-level ingestion workflows for API handlers.
Created: 2026-10-14
Revised:
- 2026-10-14: Added upload and completion workflows around the ingestion orchestrator.
- 2026-10-15: Added typed ingestion stream events for SSE transport.
Preconditions:
- Database schema is initialized; gateway settings come from the environment.
Inputs:
- Acceptable: UploadedDocument or CourseCompletionRequest, a user id and a schedule id.
- Unacceptable: Non-positive schedule ids (rejected by the API layer).
Postconditions:
- One orchestrator call per workflow; stream workflows emit ingest.* events.
Returns:
- IngestionReport, or a generator of event dictionaries for streaming.
Errors/Exceptions:
- Stage failures are reported in the IngestionReport; unexpected exceptions propagate.
"""

from typing import Generator

from ..core.config import settings
from ..core.logging import get_logger
from ..schemas.drafts import UploadedDocument
from ..schemas.requests import CourseCompletionRequest
from ..schemas.responses import IngestionReport, IngestionState

logger = get_logger("syllabus.service")

STAGE_PROGRESS = {
    IngestionState.RECEIVED: (5, "Upload received"),
    IngestionState.EXTRACTING: (15, "Extracting document text"),
    IngestionState.QUERYING: (30, "Analyzing syllabus with AI"),
    IngestionState.SANITIZING: (70, "Reading AI response"),
    IngestionState.PARSING: (78, "Parsing course data"),
    IngestionState.GATING: (85, "Checking course details"),
    IngestionState.PERSISTING: (92, "Creating course, assignments and events"),
    IngestionState.AWAITING_USER_INPUT: (95, "Waiting for missing course details"),
}


def _build_orchestrator():
    """Lazy import so route modules load without touching the database or HTTP client."""
    from ..clients.model_gateway import ModelGateway
    from ..db.base import SessionLocal
    from ..orchestrators.ingestion_orchestrator import SyllabusIngestionOrchestrator

    return SyllabusIngestionOrchestrator(
        gateway=ModelGateway(settings.gateway_config()),
        session_factory=SessionLocal,
        max_upload_bytes=settings.max_upload_bytes(),
        max_prompt_chars=settings.max_prompt_text_chars(),
    )


def _build_event(event: str, data: dict) -> dict:
    return {
        "event": event,
        "data": data,
    }


def ingest_workflow(
    document: UploadedDocument,
    user_id: str,
    schedule_id: int,
    route_path: str,
) -> IngestionReport:
    """Execute a full upload ingestion for one document."""
    logger.info(
        "POST %s | file=%r | bytes=%d | user=%s | schedule=%s",
        route_path,
        document.filename,
        document.size,
        user_id,
        schedule_id,
    )
    report = _build_orchestrator().ingest(document, user_id, schedule_id)
    logger.info("Ingestion finished | state=%s success=%s", report.state.value, report.success)
    return report


def complete_workflow(req: CourseCompletionRequest, user_id: str, route_path: str) -> IngestionReport:
    """Persist a course the user finished filling in after a gating pause."""
    logger.info(
        "POST %s | course=%r | schedule=%s | assignments=%d | events=%d",
        route_path,
        req.courseName,
        req.scheduleId,
        len(req.parsedAssignments),
        len(req.parsedEvents),
    )
    report = _build_orchestrator().complete(req, user_id)
    logger.info("Completion finished | state=%s success=%s", report.state.value, report.success)
    return report


def stream_ingest_workflow(
    document: UploadedDocument,
    user_id: str,
    schedule_id: int,
    route_path: str,
) -> Generator[dict, None, None]:
    """
    Execute ingestion and emit typed stream events for SSE clients.

    Event sequence:
      ingest.started -> ingest.stage* -> ingest.completed
      or ingest.error when the report is a failure.
    """
    logger.info(
        "POST %s [stream] | file=%r | bytes=%d | user=%s | schedule=%s",
        route_path,
        document.filename,
        document.size,
        user_id,
        schedule_id,
    )

    for step in _build_orchestrator().stream_ingest(document, user_id, schedule_id):
        if isinstance(step, IngestionReport):
            payload = {**step.model_dump(mode="json"), "stage": step.state.value, "progress_percent": 100}
            if step.state == IngestionState.FAILED:
                yield _build_event("ingest.error", {**payload, "status_message": "Syllabus import failed"})
            else:
                yield _build_event("ingest.completed", {**payload, "status_message": step.message})
            continue

        progress, status_message = STAGE_PROGRESS[step]
        yield _build_event(
            "ingest.started" if step == IngestionState.RECEIVED else "ingest.stage",
            {
                "stage": step.value,
                "progress_percent": progress,
                "status_message": status_message,
            },
        )
