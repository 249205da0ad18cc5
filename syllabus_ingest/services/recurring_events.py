"""
Artifact: syllabus_ingest/services/recurring_events.py
Purpose: Enumerates every class-meeting occurrence of a course as a discrete event.
Created: 2026-10-13
Revised:
- 2026-10-14: Accepted weekday abbreviations and slash/and-separated day lists.
Preconditions:
- Course passed the completion gate (dates, times and meeting days present).
Inputs:
- Acceptable: CompletedCourse with comma-separated weekday names.
- Unacceptable: None; unknown day tokens are dropped.
Postconditions:
- Same course in, same events out, ordered by date ascending.
Returns:
- List of EventDraft with event_type "class".
Errors/Exceptions:
- None.
"""

import re
from datetime import datetime, timedelta
from typing import FrozenSet, List

from ..core.logging import get_logger
from ..schemas.drafts import CompletedCourse, EventDraft

logger = get_logger("syllabus.recurring")

EVENT_NAME_MAX = 30
EVENT_DESCRIPTION_MAX = 200

WEEKDAYS = {
    "monday": 0, "mon": 0,
    "tuesday": 1, "tue": 1, "tues": 1,
    "wednesday": 2, "wed": 2,
    "thursday": 3, "thu": 3, "thur": 3, "thurs": 3,
    "friday": 4, "fri": 4,
    "saturday": 5, "sat": 5,
    "sunday": 6, "sun": 6,
}

_DAY_SPLIT_RE = re.compile(r"[\s,/;&]+")


def truncate(value: str, limit: int) -> str:
    return value if len(value) <= limit else value[:limit]


def parse_meeting_days(meeting_days: str) -> FrozenSet[int]:
    """Map day tokens to weekday numbers (Monday=0); unrecognized tokens are ignored."""
    days = set()
    for token in _DAY_SPLIT_RE.split(meeting_days or ""):
        key = token.strip().strip(".").lower()
        if not key or key == "and":
            continue
        if key in WEEKDAYS:
            days.add(WEEKDAYS[key])
        else:
            logger.debug("Ignoring unrecognized meeting day %r", token)
    return frozenset(days)


def generate_class_meetings(course: CompletedCourse) -> List[EventDraft]:
    weekdays = parse_meeting_days(course.meeting_days)
    if not weekdays:
        logger.info("No recognized meeting days in %r; no class events generated", course.meeting_days)
        return []

    name = truncate(f"{course.name} Class", EVENT_NAME_MAX)
    description = truncate(f"Class meeting for {course.name}", EVENT_DESCRIPTION_MAX)

    events = []
    day = course.start_date
    while day <= course.end_date:
        if day.weekday() in weekdays:
            events.append(
                EventDraft(
                    title=name,
                    start=datetime.combine(day, course.start_time),
                    end=datetime.combine(day, course.end_time),
                    event_type="class",
                    description=description,
                    location=course.location,
                    color=course.color,
                    attached_to_course=True,
                )
            )
        day += timedelta(days=1)

    logger.info("Generated %d class meetings for %r", len(events), course.name)
    return events
