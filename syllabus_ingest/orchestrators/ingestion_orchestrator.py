"""
Artifact: syllabus_ingest/orchestrators/ingestion_orchestrator.py
Purpose: Runs a syllabus through extraction, model query, JSON recovery, gating and persistence.
Created: 2026-10-13
Revised:
- 2026-10-14: Added completion entry point that re-enters at gating with user-edited fields.
- 2026-10-15: Exposed stage transitions as a generator for progress streaming.
- 2026-10-16: Checked schedule ownership before spending a model call.
- 2026-10-17: Saved courses with inverted ranges without class meetings instead of blocking them.
Preconditions:
- Gateway is constructed with an explicit GatewayConfig; database tables exist.
Inputs:
- Acceptable: UploadedDocument with a .pdf/.docx/.txt name, a user id and a positive schedule id.
- Unacceptable: None at this layer; every stage failure becomes a failed report.
Postconditions:
- A course with its assignments and events is committed in one transaction, or nothing is.
Returns:
- IngestionReport whose `state` is Done, AwaitingUserInput or Failed.
Errors/Exceptions:
- Only IngestionError subclasses are caught; anything else propagates to the API layer.
"""

from datetime import date, datetime, timedelta
from typing import Callable, Generator, List, Optional, Tuple, Union

from sqlalchemy.orm import Session

from ..clients.model_gateway import ModelGateway
from ..core.errors import IngestionError
from ..core.logging import get_logger
from ..db import repository
from ..schemas.drafts import (
    AssignmentDraft,
    CompletedCourse,
    CourseDraft,
    EventDraft,
    ParsedSyllabus,
    UploadedDocument,
)
from ..schemas.requests import CourseCompletionRequest
from ..schemas.responses import IngestionReport, IngestionState
from ..schemas.shared import CoursePayload, ParsedAssignment, ParsedEvent, SkippedItem
from ..services import completion_gate, response_sanitizer, syllabus_parser
from ..services.document_text_service import extract_text
from ..services.prompt_builder import build_prompt
from ..services.recurring_events import EVENT_DESCRIPTION_MAX, EVENT_NAME_MAX, generate_class_meetings, truncate

logger = get_logger("syllabus.ingest")

ASSIGNMENT_NAME_MAX = 50
DEFAULT_EVENT_TITLE = "Study Session"
DEFAULT_EVENT_TYPE = "study"
DEFAULT_EVENT_DURATION = timedelta(hours=1)

EVENT_TYPE_COLORS = {
    "exam": "#dc3545",
    "assignment": "#ffc107",
    "study": "#28a745",
    "project": "#17a2b8",
}
DEFAULT_EVENT_COLOR = "#007bff"

# Stage updates yield the state just entered; the last item is always the report.
IngestionStep = Union[IngestionState, IngestionReport]


def event_color(event_type: Optional[str]) -> str:
    return EVENT_TYPE_COLORS.get((event_type or "").lower(), DEFAULT_EVENT_COLOR)


def _iso_date(value: Optional[date]) -> str:
    return value.isoformat() if value else ""


def _hhmm(value) -> str:
    return value.strftime("%H:%M") if value else ""


def _iso_datetime(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat(timespec="minutes") if value else None


def course_payload(draft: CourseDraft) -> CoursePayload:
    """Course fields as plain strings for the completion form."""
    return CoursePayload(
        courseName=draft.name or "",
        courseDescription=draft.description or "",
        startDate=_iso_date(draft.start_date),
        endDate=_iso_date(draft.end_date),
        classMeetingDays=draft.meeting_days or "",
        classStartTime=_hhmm(draft.start_time),
        classEndTime=_hhmm(draft.end_time),
        location=draft.location or "",
        courseColor=draft.color or "",
        difficultyLevel=draft.difficulty or 0,
    )


def _parsed_assignments(items: List[AssignmentDraft]) -> List[ParsedAssignment]:
    return [ParsedAssignment(assignmentName=a.name, dueDate=_iso_datetime(a.due)) for a in items]


def _parsed_events(items: List[EventDraft]) -> List[ParsedEvent]:
    return [
        ParsedEvent(
            title=e.title,
            startDate=_iso_datetime(e.start),
            endDate=_iso_datetime(e.end),
            eventType=e.event_type,
            description=e.description,
        )
        for e in items
    ]


def prepare_assignments(
    drafts: List[AssignmentDraft],
) -> Tuple[List[AssignmentDraft], List[SkippedItem]]:
    kept, skipped = [], []
    for draft in drafts:
        if not draft.name:
            skipped.append(SkippedItem(itemType="assignment", reason="missing name"))
            continue
        if draft.due is None:
            skipped.append(
                SkippedItem(itemType="assignment", name=draft.name, reason="missing or unparsable due date")
            )
            continue
        kept.append(AssignmentDraft(name=truncate(draft.name, ASSIGNMENT_NAME_MAX), due=draft.due))
    return kept, skipped


def prepare_model_events(
    drafts: List[EventDraft],
    course: CompletedCourse,
) -> Tuple[List[EventDraft], List[SkippedItem]]:
    """Fill defaults for model-suggested events and drop the ones that cannot be scheduled."""
    kept, skipped = [], []
    for draft in drafts:
        title = draft.title or DEFAULT_EVENT_TITLE
        if draft.start is None:
            skipped.append(SkippedItem(itemType="event", name=title, reason="missing or unparsable start"))
            continue
        end = draft.end or draft.start + DEFAULT_EVENT_DURATION
        if end <= draft.start:
            skipped.append(SkippedItem(itemType="event", name=title, reason="ends before it starts"))
            continue

        event_type = draft.event_type or DEFAULT_EVENT_TYPE
        kept.append(
            EventDraft(
                title=truncate(title, EVENT_NAME_MAX),
                start=draft.start,
                end=end,
                event_type=event_type,
                description=truncate(draft.description or f"{event_type} event", EVENT_DESCRIPTION_MAX),
                location=course.location,
                color=event_color(event_type),
                attached_to_course=True,
            )
        )
    return kept, skipped


def prepare_class_meetings(course: CompletedCourse) -> Tuple[List[EventDraft], List[SkippedItem]]:
    """Inverted date or time ranges still save the course, just without recurring meetings."""
    if course.end_date < course.start_date:
        reason = "course end date is before its start date"
    elif course.end_time <= course.start_time:
        reason = "class end time is not after its start time"
    else:
        return generate_class_meetings(course), []
    logger.info("No class meetings for %r: %s", course.name, reason)
    return [], [SkippedItem(itemType="class meeting", name=course.name, reason=reason)]


def failure_report(error: IngestionError, stage: IngestionState) -> IngestionReport:
    logger.warning(
        "Ingestion failed at %s | kind=%s message=%s",
        stage.value,
        error.kind.value,
        error.message,
    )
    if error.detail:
        logger.debug("Failure detail: %s", error.detail)
    return IngestionReport(
        success=False,
        message=error.message,
        state=IngestionState.FAILED,
        errorKind=error.kind.value,
        errors=[error.message],
    )


class SyllabusIngestionOrchestrator:
    """Coordinates one ingestion call end to end; holds no per-call state."""

    def __init__(
        self,
        gateway: ModelGateway,
        session_factory: Callable[[], Session],
        today: Callable[[], date] = date.today,
        max_upload_bytes: Optional[int] = None,
        max_prompt_chars: Optional[int] = None,
    ):
        self.gateway = gateway
        self.session_factory = session_factory
        self.today = today
        self.max_upload_bytes = max_upload_bytes
        self.max_prompt_chars = max_prompt_chars

    def ingest(self, document: UploadedDocument, user_id: str, schedule_id: int) -> IngestionReport:
        return self._drain(self.stream_ingest(document, user_id, schedule_id))

    def complete(self, request: CourseCompletionRequest, user_id: str) -> IngestionReport:
        """Gate and persist user-edited course fields plus previously parsed items."""
        logger.info("Completing course %r | schedule=%s", request.courseName, request.scheduleId)
        parsed = syllabus_parser.from_completion_request(request)
        return self._drain(self._gate_and_persist(parsed, user_id, request.scheduleId))

    def stream_ingest(
        self,
        document: UploadedDocument,
        user_id: str,
        schedule_id: int,
    ) -> Generator[IngestionStep, None, None]:
        stage = IngestionState.RECEIVED
        yield stage
        logger.info(
            "Ingesting %r | bytes=%d user=%s schedule=%s",
            document.filename,
            document.size,
            user_id,
            schedule_id,
        )
        try:
            with repository.transaction(self.session_factory) as session:
                repository.require_schedule(session, schedule_id, user_id)

            stage = IngestionState.EXTRACTING
            yield stage
            text = extract_text(document, max_bytes=self.max_upload_bytes)
            if self.max_prompt_chars and len(text) > self.max_prompt_chars:
                logger.info("Truncating syllabus text from %d to %d chars", len(text), self.max_prompt_chars)
                text = text[: self.max_prompt_chars]

            stage = IngestionState.QUERYING
            yield stage
            raw = self.gateway.send(build_prompt(text, today=self.today()))
            logger.debug("Model output preview: %r", raw[:500])

            stage = IngestionState.SANITIZING
            yield stage
            candidate = response_sanitizer.sanitize(raw)

            stage = IngestionState.PARSING
            yield stage
            parsed = syllabus_parser.parse(candidate)
        except IngestionError as e:
            yield failure_report(e, stage)
            return

        yield from self._gate_and_persist(parsed, user_id, schedule_id)

    def _gate_and_persist(
        self,
        parsed: ParsedSyllabus,
        user_id: str,
        schedule_id: int,
    ) -> Generator[IngestionStep, None, None]:
        yield IngestionState.GATING
        result = completion_gate.evaluate(parsed.course)
        if isinstance(result, completion_gate.Incomplete):
            yield IngestionState.AWAITING_USER_INPUT
            yield IngestionReport(
                success=False,
                message="Some course details are missing. Please complete them to continue.",
                state=IngestionState.AWAITING_USER_INPUT,
                requiresUserInput=True,
                missingFields=result.missing_fields,
                course=course_payload(result.draft),
                parsedAssignments=_parsed_assignments(parsed.assignments),
                parsedEvents=_parsed_events(parsed.events),
            )
            return

        yield IngestionState.PERSISTING
        try:
            report = self._persist(result.course, parsed, user_id, schedule_id)
        except IngestionError as e:
            yield failure_report(e, IngestionState.PERSISTING)
            return
        yield report

    def _persist(
        self,
        course: CompletedCourse,
        parsed: ParsedSyllabus,
        user_id: str,
        schedule_id: int,
    ) -> IngestionReport:
        assignments, skipped = prepare_assignments(parsed.assignments)
        model_events, skipped_events = prepare_model_events(parsed.events, course)
        meetings, skipped_meetings = prepare_class_meetings(course)
        skipped.extend(skipped_meetings + skipped_events)
        events = meetings + model_events
        today = self.today()

        with repository.transaction(self.session_factory) as session:
            saved = repository.save_ingestion(
                session,
                user_id=user_id,
                schedule_id=schedule_id,
                course=course,
                is_active=course.start_date <= today <= course.end_date,
                assignments=assignments,
                events=events,
            )

        if skipped:
            logger.info("Skipped %d item(s): %s", len(skipped), [s.reason for s in skipped])
        logger.info(
            "Ingestion done | course_id=%s assignments=%d events=%d",
            saved.course_id,
            saved.assignments_created,
            saved.events_created,
        )
        return IngestionReport(
            success=True,
            message=(
                f"Successfully created course '{course.name}' with "
                f"{saved.assignments_created} assignments and {saved.events_created} events."
            ),
            state=IngestionState.DONE,
            coursesCreated=1,
            assignmentsCreated=saved.assignments_created,
            eventsCreated=saved.events_created,
            courseId=saved.course_id,
            skipped=skipped,
        )

    @staticmethod
    def _drain(steps: Generator[IngestionStep, None, None]) -> IngestionReport:
        report = None
        for step in steps:
            if isinstance(step, IngestionReport):
                report = step
        return report
