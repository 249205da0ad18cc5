"""
Artifact: syllabus_ingest/services/prompt_builder.py
Purpose: Builds the instruction sent to the text-generation model for one syllabus.
Created: 2026-10-12
Revised:
- 2026-10-13: Added study-block derivation rules and course difficulty hint.
Preconditions:
- langchain-core is installed.
Inputs:
- Acceptable: Extracted syllabus text and the current date.
- Unacceptable: None; empty text is rejected earlier by the extractor.
Postconditions:
- Returns prompt text; no network or persistence side effects.
Returns:
- Prompt string.
Errors/Exceptions:
- None expected.
"""

from datetime import date
from typing import Optional

from langchain_core.prompts import PromptTemplate

EVENT_TITLE_MAX = 30
EVENT_DESCRIPTION_MAX = 200

SYLLABUS_PROMPT = """\
Analyze this college syllabus and extract the following structured data.

Return STRICT JSON ONLY: no markdown fences, no commentary before or after the object.
Use DOUBLE QUOTES for all keys and string values. No trailing commas.

Rules:
- There is only ONE course per syllabus.
- Include all key details like course name, meeting days/times, start/end dates, and location.
- "classMeetingDays" is a comma-separated list of full weekday names, e.g. "Monday, Wednesday".
- Dates use YYYY-MM-DD, times use 24-hour HH:MM, timestamps use YYYY-MM-DDTHH:MM:SS.
- Extract all assignments, exams and projects that have due dates.
- Use null for unknown fields. Do not guess course dates or meeting times.
- Course difficulty follows the course number: 100-level courses are 1, 200-level 2,
  300-level 3, 400-level and above 4. Mention the course number in "courseName".

Generate study events for exams and assignments leading up to their deadlines:
1. For exams: create 3-5 study sessions in the week before the exam.
2. For major assignments and projects: create study sessions starting 1-2 weeks before the due date.
3. For regular assignments: create 1-2 study sessions 2-3 days before the due date.
4. Each study session is 1-2 hours long.
5. Spread study sessions across different days and never let two sessions overlap.
6. Only create events dated strictly after {today}; omit anything on or before {today}.
7. If no specific times are mentioned, use reasonable study times (e.g. 14:00-16:00, 18:00-20:00).
8. Event titles must be {title_max} characters or less.
9. Event descriptions must be {description_max} characters or less.
10. "eventType" is one of: study, exam, project, assignment.

Return JSON in exactly this structure:
{{
  "course": {{
    "courseName": "Example 101",
    "courseDescription": "Intro to Example Concepts",
    "startDate": "2025-01-20",
    "endDate": "2025-05-10",
    "classMeetingDays": "Monday, Wednesday",
    "classStartTime": "15:00",
    "classEndTime": "16:15",
    "location": "Room 210",
    "courseColor": "#007bff"
  }},
  "assignments": [
    {{
      "assignmentName": "Essay 1",
      "dueDate": "2025-02-10T23:59:00"
    }}
  ],
  "events": [
    {{
      "title": "Study for Midterm",
      "startDate": "2025-03-10T14:00:00",
      "endDate": "2025-03-10T16:00:00",
      "eventType": "study",
      "description": "Review chapters 1-5"
    }}
  ]
}}

Syllabus Text:
{syllabus_text}"""

_template = PromptTemplate.from_template(SYLLABUS_PROMPT)


def build_prompt(text: str, today: Optional[date] = None) -> str:
    """Render the syllabus extraction prompt with `today` as the temporal anchor."""
    anchor = today or date.today()
    return _template.format(
        today=anchor.isoformat(),
        title_max=EVENT_TITLE_MAX,
        description_max=EVENT_DESCRIPTION_MAX,
        syllabus_text=text,
    )
