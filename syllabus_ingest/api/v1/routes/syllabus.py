"""
Artifact: syllabus_ingest/api/v1/routes/syllabus.py
Purpose: Defines syllabus upload, streamed upload and course completion route handlers.
Created: 2026-10-14
Revised:
- 2026-10-14: Added upload and completion routes with error-kind to HTTP status mapping.
- 2026-10-15: Added SSE upload streaming endpoint and shared stream handler.
Preconditions:
- Caller identity arrives in the X-User-Id header (authentication happens upstream).
Inputs:
- Acceptable: Multipart `file` plus form `scheduleId`; JSON CourseCompletionRequest for completion.
- Unacceptable: Missing file, missing user id or non-positive schedule ids.
Postconditions:
- Every pipeline outcome is returned as an IngestionReport body.
Returns:
- JSONResponse with the report, or a text/event-stream of ingest.* events.
Errors/Exceptions:
- HTTPException(400/401) for invalid input; HTTPException(500) for unexpected failures.
"""

import json
import traceback
from typing import Optional

from fastapi import APIRouter, File, Form, Header, HTTPException, UploadFile
from fastapi.responses import JSONResponse, StreamingResponse

from ....core.config import settings
from ....core.errors import ErrorKind
from ....core.logging import get_logger
from ....schemas.drafts import UploadedDocument
from ....schemas.requests import CourseCompletionRequest
from ....schemas.responses import IngestionReport
from ....services.ingest_service import complete_workflow, ingest_workflow, stream_ingest_workflow

logger = get_logger("syllabus.api")
router = APIRouter(prefix="/syllabus", tags=["syllabus"])

EXTRACTION_KINDS = {
    ErrorKind.UNSUPPORTED_FORMAT,
    ErrorKind.CORRUPT_DOCUMENT,
    ErrorKind.EMPTY_CONTENT,
    ErrorKind.DOCUMENT_TOO_LARGE,
}


def status_for_report(report: IngestionReport) -> int:
    if report.success or report.requiresUserInput or not report.errorKind:
        return 200
    kind = ErrorKind(report.errorKind)
    if kind in EXTRACTION_KINDS:
        return 422
    if kind == ErrorKind.SCHEDULE_NOT_FOUND:
        return 404
    if kind == ErrorKind.PERSISTENCE_FAULT:
        return 500
    return 502


def _report_response(report: IngestionReport) -> JSONResponse:
    return JSONResponse(status_code=status_for_report(report), content=report.model_dump(mode="json"))


def _require_user(user_id: Optional[str]) -> str:
    if not user_id or not user_id.strip():
        raise HTTPException(status_code=401, detail="Missing X-User-Id header.")
    return user_id.strip()


def _require_schedule_id(schedule_id: int) -> int:
    if schedule_id <= 0:
        raise HTTPException(status_code=400, detail="Invalid schedule ID.")
    return schedule_id


def read_upload(file: Optional[UploadFile]) -> UploadedDocument:
    """Read at most one byte past the limit so oversized uploads are rejected without buffering them."""
    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="Please select a file to upload.")
    content = file.file.read(settings.max_upload_bytes() + 1)
    return UploadedDocument(filename=file.filename, content=content, content_type=file.content_type)


def handle_upload_request(document: UploadedDocument, user_id: str, schedule_id: int, route_path: str):
    """Shared upload handler body."""
    try:
        report = ingest_workflow(document, user_id, schedule_id, route_path=route_path)
    except Exception as e:
        logger.error("Ingestion error: %s", repr(e))
        logger.debug("Traceback:\n%s", traceback.format_exc())
        raise HTTPException(status_code=500, detail="An unexpected error occurred while processing the syllabus.")
    return _report_response(report)


def _format_sse(event: str, data: dict, event_id: int) -> str:
    payload = json.dumps(data, ensure_ascii=False)
    lines = [f"id: {event_id}", f"event: {event}"]
    for line in payload.splitlines() or [""]:
        lines.append(f"data: {line}")
    lines.append("")
    return "\n".join(lines) + "\n"


def handle_upload_stream_request(document: UploadedDocument, user_id: str, schedule_id: int, route_path: str):
    """Shared streamed upload handler body."""

    def event_stream():
        event_id = 0
        try:
            for event_id, event in enumerate(
                stream_ingest_workflow(document, user_id, schedule_id, route_path=route_path), start=1
            ):
                yield _format_sse(str(event.get("event", "message")), event.get("data", {}), event_id)
        except Exception as e:
            logger.error("Ingestion stream error: %s", repr(e))
            logger.debug("Traceback:\n%s", traceback.format_exc())
            yield _format_sse(
                "ingest.error",
                {
                    "stage": "Failed",
                    "progress_percent": 100,
                    "status_message": "Syllabus import failed",
                    "message": "An unexpected error occurred while processing the syllabus.",
                },
                event_id=event_id + 1,
            )

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache, no-transform",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


@router.post("/upload")
def upload_syllabus(
    file: UploadFile = File(None),
    scheduleId: int = Form(...),
    x_user_id: Optional[str] = Header(None),
):
    user_id = _require_user(x_user_id)
    schedule_id = _require_schedule_id(scheduleId)
    document = read_upload(file)
    return handle_upload_request(document, user_id, schedule_id, route_path="/api/v1/syllabus/upload")


@router.post("/upload/stream")
def upload_syllabus_stream(
    file: UploadFile = File(None),
    scheduleId: int = Form(...),
    x_user_id: Optional[str] = Header(None),
):
    user_id = _require_user(x_user_id)
    schedule_id = _require_schedule_id(scheduleId)
    document = read_upload(file)
    return handle_upload_stream_request(document, user_id, schedule_id, route_path="/api/v1/syllabus/upload/stream")


@router.post("/complete")
def complete_course(req: CourseCompletionRequest, x_user_id: Optional[str] = Header(None)):
    user_id = _require_user(x_user_id)
    _require_schedule_id(req.scheduleId)
    try:
        report = complete_workflow(req, user_id, route_path="/api/v1/syllabus/complete")
    except Exception as e:
        logger.error("Completion error: %s", repr(e))
        logger.debug("Traceback:\n%s", traceback.format_exc())
        raise HTTPException(status_code=500, detail="An unexpected error occurred while saving the course.")
    return _report_response(report)
