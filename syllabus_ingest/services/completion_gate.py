"""
Artifact: syllabus_ingest/services/completion_gate.py
Purpose: Decides whether a parsed course has enough data to be persisted without user input.
Created: 2026-10-13
Revised:
- 2026-10-17: Truncated course text fields to their stored lengths.
Preconditions:
- Draft comes from the syllabus parser (absent fields are None).
Inputs:
- Acceptable: Any CourseDraft.
- Unacceptable: None.
Postconditions:
- Location, color and difficulty are always defaulted and never block completion.
- Completed course text fields fit their stored column lengths.
Returns:
- Complete(course) or Incomplete(draft, missing_fields).
Errors/Exceptions:
- None; an incomplete course is a normal outcome, not an error.
"""

import re
from dataclasses import dataclass, replace
from typing import List, Optional, Union

from ..core.logging import get_logger
from ..db.entities import COURSE_NAME_MAX, DESCRIPTION_MAX, LOCATION_MAX
from ..schemas.drafts import CompletedCourse, CourseDraft
from .recurring_events import truncate

logger = get_logger("syllabus.gate")

DEFAULT_LOCATION = "TBD"
DEFAULT_COLOR = "#007bff"
DEFAULT_DIFFICULTY = 0

_HEX_COLOR_RE = re.compile(r"^#?(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_COURSE_NUMBER_RE = re.compile(r"(?<!\d)(\d{3,4})(?!\d)")

# (draft attribute, field name reported to the completion form)
REQUIRED_FIELDS = (
    ("name", "courseName"),
    ("description", "courseDescription"),
    ("start_date", "startDate"),
    ("end_date", "endDate"),
    ("meeting_days", "classMeetingDays"),
    ("start_time", "classStartTime"),
    ("end_time", "classEndTime"),
)


@dataclass(frozen=True)
class Complete:
    course: CompletedCourse


@dataclass(frozen=True)
class Incomplete:
    draft: CourseDraft
    missing_fields: List[str]


GateResult = Union[Complete, Incomplete]


def derive_difficulty(course_name: Optional[str]) -> int:
    """100-level -> 1 ... 400-level and above -> 4; no course number -> 0."""
    match = _COURSE_NUMBER_RE.search(course_name or "")
    if not match:
        return DEFAULT_DIFFICULTY
    leading = int(match.group(1)[0])
    if leading == 0:
        return DEFAULT_DIFFICULTY
    return min(leading, 4)


def normalize_color(color: Optional[str]) -> str:
    if not color or not _HEX_COLOR_RE.match(color.strip()):
        return DEFAULT_COLOR
    value = color.strip()
    return value if value.startswith("#") else f"#{value}"


def apply_defaults(draft: CourseDraft) -> CourseDraft:
    return replace(
        draft,
        location=draft.location or DEFAULT_LOCATION,
        color=normalize_color(draft.color),
        difficulty=derive_difficulty(draft.name),
    )


def missing_fields(draft: CourseDraft) -> List[str]:
    return [label for attr, label in REQUIRED_FIELDS if getattr(draft, attr) is None]


def evaluate(draft: CourseDraft) -> GateResult:
    filled = apply_defaults(draft)
    missing = missing_fields(filled)
    if missing:
        logger.info("Course %r is incomplete | missing=%s", filled.name, missing)
        return Incomplete(draft=filled, missing_fields=missing)

    course = CompletedCourse(
        name=truncate(filled.name, COURSE_NAME_MAX),
        description=truncate(filled.description, DESCRIPTION_MAX),
        start_date=filled.start_date,
        end_date=filled.end_date,
        meeting_days=filled.meeting_days,
        start_time=filled.start_time,
        end_time=filled.end_time,
        location=truncate(filled.location, LOCATION_MAX),
        color=filled.color,
        difficulty=filled.difficulty,
    )
    logger.info("Course %r passed completion gate | difficulty=%d", course.name, course.difficulty)
    return Complete(course=course)
