"""
Artifact: syllabus_ingest/schemas/drafts.py
Purpose: Defines the in-memory values that flow between ingestion pipeline stages.
Created: 2026-10-12
Revised:
- 2026-10-13: Added CompletedCourse for drafts that passed the completion gate.
Preconditions:
- None.
Inputs:
- Acceptable: Parsed Python values (dates, times, datetimes) or None for absent fields.
- Unacceptable: Sentinel strings such as "null" or "" standing in for absence.
Postconditions:
- Stages share one explicit-absence representation (`None`).
Returns:
- Dataclass instances.
Errors/Exceptions:
- None.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import List, Optional


@dataclass
class UploadedDocument:
    filename: str
    content: bytes
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass
class CourseDraft:
    name: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    meeting_days: Optional[str] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    location: Optional[str] = None
    color: Optional[str] = None
    difficulty: Optional[int] = None


@dataclass
class AssignmentDraft:
    name: Optional[str] = None
    due: Optional[datetime] = None


@dataclass
class EventDraft:
    title: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    event_type: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    color: Optional[str] = None
    attached_to_course: bool = True


@dataclass
class ParsedSyllabus:
    course: CourseDraft
    assignments: List[AssignmentDraft] = field(default_factory=list)
    events: List[EventDraft] = field(default_factory=list)


@dataclass(frozen=True)
class CompletedCourse:
    """A course draft whose required fields are all present, defaults applied."""

    name: str
    description: str
    start_date: date
    end_date: date
    meeting_days: str
    start_time: time
    end_time: time
    location: str
    color: str
    difficulty: int
