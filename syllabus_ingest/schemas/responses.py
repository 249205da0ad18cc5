"""
Artifact: syllabus_ingest/schemas/responses.py
Purpose: Defines the ingestion report returned by the upload and completion workflows.
Created: 2026-10-12
Revised:
- 2026-10-14: Added terminal state, error kind and skipped-item diagnostics.
Preconditions:
- Pydantic BaseModel and shared schema models are available.
Inputs:
- Acceptable: Counts, messages and partial course payloads produced by the orchestrator.
- Unacceptable: Raw model output in any user-facing field.
Postconditions:
- Report objects serialize to the JSON contract consumed by the web layer.
Returns:
- `IngestionReport` model instances.
Errors/Exceptions:
- Pydantic validation errors when report fields have incompatible types.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel

from .shared import CoursePayload, ParsedAssignment, ParsedEvent, SkippedItem


class IngestionState(str, Enum):
    RECEIVED = "Received"
    EXTRACTING = "Extracting"
    QUERYING = "Querying"
    SANITIZING = "Sanitizing"
    PARSING = "Parsing"
    GATING = "Gating"
    PERSISTING = "Persisting"
    AWAITING_USER_INPUT = "AwaitingUserInput"
    DONE = "Done"
    FAILED = "Failed"


class IngestionReport(BaseModel):
    success: bool
    message: str
    state: IngestionState
    errorKind: Optional[str] = None
    coursesCreated: int = 0
    assignmentsCreated: int = 0
    eventsCreated: int = 0
    courseId: Optional[int] = None
    skipped: List[SkippedItem] = []
    errors: List[str] = []
    requiresUserInput: bool = False
    missingFields: List[str] = []
    course: Optional[CoursePayload] = None
    parsedAssignments: List[ParsedAssignment] = []
    parsedEvents: List[ParsedEvent] = []
