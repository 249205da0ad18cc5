"""
Artifact: syllabus_ingest/schemas/requests.py
Purpose: Defines transport request models accepted by the course completion workflow.
Created: 2026-10-12
Revised:
- 2026-10-14: Carried previously parsed assignments/events through the completion request.
Preconditions:
- Pydantic BaseModel and typing modules are available.
Inputs:
- Acceptable: JSON object with course fields as plain strings and a positive scheduleId.
- Unacceptable: Missing scheduleId or non-list parsedAssignments/parsedEvents.
Postconditions:
- Request data is validated into typed models used by services/routes.
Returns:
- `CourseCompletionRequest` model instances.
Errors/Exceptions:
- Pydantic validation errors for malformed request bodies.
"""

from typing import List

from .shared import CoursePayload, ParsedAssignment, ParsedEvent


class CourseCompletionRequest(CoursePayload):
    scheduleId: int
    parsedAssignments: List[ParsedAssignment] = []
    parsedEvents: List[ParsedEvent] = []
