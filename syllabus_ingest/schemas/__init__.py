"""Schema package exports for ingestion service contracts."""

from .drafts import (
    AssignmentDraft,
    CompletedCourse,
    CourseDraft,
    EventDraft,
    ParsedSyllabus,
    UploadedDocument,
)
from .requests import CourseCompletionRequest
from .responses import IngestionReport, IngestionState
from .shared import CoursePayload, ParsedAssignment, ParsedEvent, SkippedItem

__all__ = [
    "AssignmentDraft",
    "CompletedCourse",
    "CourseCompletionRequest",
    "CourseDraft",
    "CoursePayload",
    "EventDraft",
    "IngestionReport",
    "IngestionState",
    "ParsedAssignment",
    "ParsedEvent",
    "ParsedSyllabus",
    "SkippedItem",
    "UploadedDocument",
]
