"""
Artifact: syllabus_ingest/services/response_sanitizer.py
Purpose: Isolates the JSON object inside raw model text and repairs truncated responses.
Created: 2026-10-12
Revised:
- 2026-10-13: Replaced count-based closer repair with nesting-order closers.
Preconditions:
- None.
Inputs:
- Acceptable: Raw model text, possibly fenced (```json), wrapped in prose, or cut off mid-structure.
- Unacceptable: Text with no '{' at all.
Postconditions:
- Already-valid JSON is returned unchanged; repair runs only when the first parse fails.
Returns:
- Candidate JSON text (not guaranteed valid when the defect is interior, e.g. trailing commas).
Errors/Exceptions:
- NoJsonFound when no object start exists.
- UnrecoverableTruncation when the text was cut inside a string or after a dangling ':'.
"""

import json
import re
from typing import List, Optional, Tuple

from ..core.errors import NoJsonFound, UnrecoverableTruncation
from ..core.logging import get_logger

logger = get_logger("syllabus.sanitize")

_LEADING_FENCE_RE = re.compile(r"^```[\w+-]*[ \t]*\n?")
_TRAILING_FENCE_RE = re.compile(r"\n?[ \t]*```$")
_CLOSERS = {"{": "}", "[": "]"}


def strip_code_fences(text: str) -> str:
    """Trim and drop a leading ``` / ```json marker and a trailing ``` marker."""
    cleaned = (text or "").strip()
    cleaned = _LEADING_FENCE_RE.sub("", cleaned, count=1)
    cleaned = _TRAILING_FENCE_RE.sub("", cleaned, count=1)
    return cleaned.strip()


def _is_valid_json(text: str) -> bool:
    try:
        json.loads(text)
    except ValueError:
        return False
    return True


def _scan_structure(text: str) -> Tuple[Optional[int], List[str], bool]:
    """
    Walk `text` (which starts at an opening brace) tracking string literals.

    Returns (index where the outermost container closes or None, open-container
    stack at end of text, whether the text ended inside a string literal).
    """
    stack: List[str] = []
    in_string = False
    escaped = False
    for idx, ch in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in _CLOSERS:
            stack.append(ch)
        elif ch in "}]":
            if stack:
                stack.pop()
            if not stack:
                return idx, [], False
    return None, stack, in_string


def repair_truncation(fragment: str) -> str:
    """
    Close a JSON fragment that starts at its opening brace.

    If the outermost object closes, anything after it is dropped. Otherwise the
    missing closers are appended innermost-first, after trailing commas.
    """
    close_at, stack, in_string = _scan_structure(fragment)
    if close_at is not None:
        return fragment[: close_at + 1]

    if in_string:
        raise UnrecoverableTruncation(
            "The AI response was cut off and could not be recovered.",
            detail=f"truncated inside a string literal: ...{fragment[-120:]}",
        )

    body = fragment.rstrip()
    while body.endswith(","):
        body = body[:-1].rstrip()
    if body.endswith(":"):
        raise UnrecoverableTruncation(
            "The AI response was cut off and could not be recovered.",
            detail=f"truncated after a key: ...{body[-120:]}",
        )

    closers = "".join(_CLOSERS[opener] for opener in reversed(stack))
    logger.info("Appending %d missing closer(s): %s", len(closers), closers)
    return body + closers


def sanitize(raw: str) -> str:
    """Return the JSON payload embedded in raw model text."""
    text = strip_code_fences(raw)
    start = text.find("{")
    if start == -1:
        raise NoJsonFound(
            "The AI response did not contain course data.",
            detail=f"no JSON object in model output: {text[:500]!r}",
        )

    end = text.rfind("}")
    if end > start:
        candidate = text[start : end + 1]
        if _is_valid_json(candidate):
            return candidate

    logger.info("Model output is not valid JSON as sliced; attempting repair")
    repaired = repair_truncation(text[start:])
    logger.debug("Repaired candidate (last 200 chars): %r", repaired[-200:])
    return repaired
