"""
Artifact: syllabus_ingest/services/syllabus_parser.py
Purpose: Deserializes sanitized model JSON (or a user-edited completion payload) into a ParsedSyllabus.
Created: 2026-10-12
Revised:
- 2026-10-13: Added case-insensitive keys, field aliases and tolerant date/time parsing.
- 2026-10-14: Added completion-request conversion so re-submitted courses share the same rules.
Preconditions:
- Input is the output of the response sanitizer, or a validated CourseCompletionRequest.
Inputs:
- Acceptable: A JSON object with a "course" object and optional "assignments"/"events" arrays.
- Unacceptable: Invalid JSON, non-object top level, or a missing/null course object.
Postconditions:
- Missing, empty, "null" or unparsable scalar fields become None instead of failing the parse.
Returns:
- ParsedSyllabus.
Errors/Exceptions:
- ParseError for structural failures; the offending text is kept in `detail` for logs.
"""

import json
import re
from datetime import date, datetime, time
from typing import Any, Iterable, List, Optional

from ..core.errors import ParseError
from ..core.logging import get_logger
from ..schemas.drafts import AssignmentDraft, CourseDraft, EventDraft, ParsedSyllabus
from ..schemas.requests import CourseCompletionRequest

logger = get_logger("syllabus.parse")

END_OF_DAY = time(23, 59)

_DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%m/%d/%y",
    "%m-%d-%Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%b %d %Y",
    "%d %B %Y",
    "%d %b %Y",
    "%A, %B %d, %Y",
)
_TIME_FORMATS = (
    "%H:%M",
    "%H:%M:%S",
    "%I:%M %p",
    "%I:%M%p",
    "%I:%M:%S %p",
    "%I %p",
    "%I%p",
)
_DATETIME_FORMATS = (
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d %I:%M %p",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %I:%M %p",
    "%B %d, %Y %H:%M",
    "%B %d, %Y %I:%M %p",
)

COURSE_FIELDS = {
    "name": ("courseName", "name", "title"),
    "description": ("courseDescription", "description"),
    "start_date": ("startDate",),
    "end_date": ("endDate",),
    "meeting_days": ("classMeetingDays", "meetingDays"),
    "start_time": ("classStartTime", "startTime"),
    "end_time": ("classEndTime", "endTime"),
    "location": ("location",),
    "color": ("courseColor", "color"),
}


def clean_scalar(value: Any) -> Optional[str]:
    """Normalize a scalar to a stripped string, or None for missing/empty/"null"."""
    if value is None or isinstance(value, (dict, list)):
        return None
    if isinstance(value, bool):
        return str(value).lower()
    text = str(value).strip()
    if not text or text.lower() in {"null", "none", "n/a"}:
        return None
    return text


_MERIDIEM_RE = re.compile(r"\s*([ap])\.?\s?m\.?(?=\s|$)", re.IGNORECASE)


def _normalize_meridiem(text: str) -> str:
    """Rewrite 3:00pm / 3 p.m. as 3:00 PM / 3 PM for strptime."""
    return _MERIDIEM_RE.sub(lambda m: " " + m.group(1) + "m", text).upper()


def _from_iso(text: str) -> Optional[datetime]:
    candidate = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError:
        return None
    # Model timestamps are wall-clock times for the course; keep them naive.
    return parsed.replace(tzinfo=None)


def parse_date(value: Any) -> Optional[date]:
    text = clean_scalar(value)
    if text is None:
        return None
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    parsed = _from_iso(text)
    return parsed.date() if parsed else None


def parse_time(value: Any) -> Optional[time]:
    text = clean_scalar(value)
    if text is None:
        return None
    normalized = _normalize_meridiem(text)
    for fmt in _TIME_FORMATS:
        try:
            return datetime.strptime(normalized, fmt).time()
        except ValueError:
            continue
    parsed = _from_iso(text)
    return parsed.time() if parsed and ("T" in text or " " in text) else None


def parse_datetime(value: Any, date_only_time: time = time(0, 0)) -> Optional[datetime]:
    """Parse a timestamp; a bare date is placed at `date_only_time`."""
    text = clean_scalar(value)
    if text is None:
        return None
    if ":" not in text:
        day = parse_date(text)
        return datetime.combine(day, date_only_time) if day else None
    parsed = _from_iso(text)
    if parsed:
        return parsed
    normalized = _normalize_meridiem(text)
    for fmt in _DATETIME_FORMATS:
        try:
            return datetime.strptime(normalized, fmt)
        except ValueError:
            continue
    return None


def _lower_keys(obj: dict) -> dict:
    return {str(k).lower(): v for k, v in obj.items()}


def _lookup(obj: dict, names: Iterable[str]) -> Any:
    for name in names:
        value = obj.get(name.lower())
        if clean_scalar(value) is not None:
            return value
    return None


def _parse_course(raw: dict) -> CourseDraft:
    fields = _lower_keys(raw)

    def get(key: str) -> Any:
        return _lookup(fields, COURSE_FIELDS[key])

    return CourseDraft(
        name=clean_scalar(get("name")),
        description=clean_scalar(get("description")),
        start_date=parse_date(get("start_date")),
        end_date=parse_date(get("end_date")),
        meeting_days=clean_scalar(get("meeting_days")),
        start_time=parse_time(get("start_time")),
        end_time=parse_time(get("end_time")),
        location=clean_scalar(get("location")),
        color=clean_scalar(get("color")),
    )


def _parse_assignment(raw: dict) -> AssignmentDraft:
    fields = _lower_keys(raw)
    return AssignmentDraft(
        name=clean_scalar(_lookup(fields, ("assignmentName", "name", "title"))),
        due=parse_datetime(_lookup(fields, ("dueDate", "due")), date_only_time=END_OF_DAY),
    )


def _parse_event(raw: dict) -> EventDraft:
    fields = _lower_keys(raw)
    event_type = clean_scalar(_lookup(fields, ("eventType", "type")))
    return EventDraft(
        title=clean_scalar(_lookup(fields, ("title", "name"))),
        start=parse_datetime(_lookup(fields, ("startDate", "start"))),
        end=parse_datetime(_lookup(fields, ("endDate", "end"))),
        event_type=event_type.lower() if event_type else None,
        description=clean_scalar(_lookup(fields, ("description",))),
    )


def _object_items(value: Any, label: str) -> List[dict]:
    if value is None:
        return []
    if not isinstance(value, list):
        logger.warning("Ignoring %s: expected a list, got %s", label, type(value).__name__)
        return []
    items = [item for item in value if isinstance(item, dict)]
    if len(items) != len(value):
        logger.warning("Ignoring %d non-object %s entries", len(value) - len(items), label)
    return items


def parse_syllabus_data(data: Any) -> ParsedSyllabus:
    """Convert an already-decoded JSON value into a ParsedSyllabus."""
    if not isinstance(data, dict):
        raise ParseError(
            "Could not extract course information from syllabus.",
            detail=f"top-level JSON is {type(data).__name__}, expected object",
        )
    top = _lower_keys(data)
    course_raw = top.get("course")
    if not isinstance(course_raw, dict):
        raise ParseError(
            "Could not extract course information from syllabus.",
            detail=f"missing course object; keys={sorted(top)}",
        )

    parsed = ParsedSyllabus(
        course=_parse_course(course_raw),
        assignments=[_parse_assignment(a) for a in _object_items(top.get("assignments"), "assignments")],
        events=[_parse_event(e) for e in _object_items(top.get("events"), "events")],
    )
    logger.info(
        "Parsed syllabus | course=%r assignments=%d events=%d",
        parsed.course.name,
        len(parsed.assignments),
        len(parsed.events),
    )
    return parsed


def parse(candidate: str) -> ParsedSyllabus:
    """Decode sanitized model JSON into a ParsedSyllabus."""
    try:
        data = json.loads(candidate)
    except ValueError as e:
        raise ParseError(
            "Could not parse the AI response.",
            detail=f"{e}. Text: {candidate[:2000]}",
        ) from e
    return parse_syllabus_data(data)


def from_completion_request(req: CourseCompletionRequest) -> ParsedSyllabus:
    """Build a ParsedSyllabus from user-edited course fields and previously parsed items."""
    course = CourseDraft(
        name=clean_scalar(req.courseName),
        description=clean_scalar(req.courseDescription),
        start_date=parse_date(req.startDate),
        end_date=parse_date(req.endDate),
        meeting_days=clean_scalar(req.classMeetingDays),
        start_time=parse_time(req.classStartTime),
        end_time=parse_time(req.classEndTime),
        location=clean_scalar(req.location),
        color=clean_scalar(req.courseColor),
    )
    assignments = [
        AssignmentDraft(
            name=clean_scalar(a.assignmentName),
            due=parse_datetime(a.dueDate, date_only_time=END_OF_DAY),
        )
        for a in req.parsedAssignments
    ]
    events = [
        EventDraft(
            title=clean_scalar(e.title),
            start=parse_datetime(e.startDate),
            end=parse_datetime(e.endDate),
            event_type=(clean_scalar(e.eventType) or "").lower() or None,
            description=clean_scalar(e.description),
        )
        for e in req.parsedEvents
    ]
    return ParsedSyllabus(course=course, assignments=assignments, events=events)
