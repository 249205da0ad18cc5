"""
Artifact: syllabus_ingest/schemas/shared.py
Purpose: Defines reusable shared schema objects used across requests and responses.
Created: 2026-10-12
Revised:
- 2026-10-14: Added skipped-item diagnostics model.
Preconditions:
- Pydantic BaseModel is installed and importable.
Inputs:
- Acceptable: JSON-compatible values matching declared field types.
- Unacceptable: Incompatible value types.
Postconditions:
- Shared Pydantic models validate and serialize contract-compatible data.
Returns:
- Typed model instances for course payloads, parsed items and skipped-item diagnostics.
Errors/Exceptions:
- Pydantic validation errors for invalid payload data.
"""

from typing import Optional

from pydantic import BaseModel


class CoursePayload(BaseModel):
    """Course fields as plain strings, as the completion form edits them."""

    courseName: str = ""
    courseDescription: str = ""
    startDate: str = ""
    endDate: str = ""
    classMeetingDays: str = ""
    classStartTime: str = ""
    classEndTime: str = ""
    location: str = ""
    courseColor: str = ""
    difficultyLevel: int = 0


class ParsedAssignment(BaseModel):
    assignmentName: Optional[str] = None
    dueDate: Optional[str] = None


class ParsedEvent(BaseModel):
    title: Optional[str] = None
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    eventType: Optional[str] = None
    description: Optional[str] = None


class SkippedItem(BaseModel):
    itemType: str
    name: str = ""
    reason: str
