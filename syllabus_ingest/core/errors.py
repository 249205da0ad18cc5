"""
Artifact: syllabus_ingest/core/errors.py
Purpose: Defines the typed error taxonomy raised by each ingestion pipeline stage.
Created: 2026-10-12
Revised:
- 2026-10-13: Added gateway envelope and truncation errors.
- 2026-10-15: Added DocumentTooLarge for the upload size limit.
- 2026-10-16: Added ScheduleNotFound for uploads targeting another user's schedule.
Preconditions:
- None.
Inputs:
- Acceptable: A user-safe message and an optional internal diagnostic detail string.
- Unacceptable: Raw model output in `message` (it belongs in `detail`).
Postconditions:
- Callers can branch on `IngestionError.kind` instead of exception type checks.
Returns:
- Exception classes and the `ErrorKind` enum.
Errors/Exceptions:
- N/A.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    UNSUPPORTED_FORMAT = "UnsupportedFormat"
    CORRUPT_DOCUMENT = "CorruptDocument"
    EMPTY_CONTENT = "EmptyContent"
    DOCUMENT_TOO_LARGE = "DocumentTooLarge"
    CONFIGURATION_ERROR = "ConfigurationError"
    CREDENTIAL_ERROR = "CredentialError"
    SERVICE_ERROR = "ServiceError"
    TIMEOUT = "Timeout"
    MALFORMED_ENVELOPE = "MalformedEnvelope"
    NO_JSON_FOUND = "NoJsonFound"
    UNRECOVERABLE_TRUNCATION = "UnrecoverableTruncation"
    PARSE_ERROR = "ParseError"
    PERSISTENCE_FAULT = "PersistenceFault"
    SCHEDULE_NOT_FOUND = "ScheduleNotFound"


class IngestionError(Exception):
    """Base class for every stage failure; `detail` is for logs only."""

    kind: ErrorKind = ErrorKind.SERVICE_ERROR

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


# Extraction


class ExtractionError(IngestionError):
    pass


class UnsupportedFormat(ExtractionError):
    kind = ErrorKind.UNSUPPORTED_FORMAT


class CorruptDocument(ExtractionError):
    kind = ErrorKind.CORRUPT_DOCUMENT


class EmptyContent(ExtractionError):
    kind = ErrorKind.EMPTY_CONTENT


class DocumentTooLarge(ExtractionError):
    kind = ErrorKind.DOCUMENT_TOO_LARGE


# Gateway


class GatewayError(IngestionError):
    def __init__(
        self,
        message: str,
        detail: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, detail)
        self.status_code = status_code


class ConfigurationError(GatewayError):
    kind = ErrorKind.CONFIGURATION_ERROR


class CredentialError(GatewayError):
    kind = ErrorKind.CREDENTIAL_ERROR


class ServiceError(GatewayError):
    kind = ErrorKind.SERVICE_ERROR


class GatewayTimeout(GatewayError):
    kind = ErrorKind.TIMEOUT


class MalformedEnvelope(GatewayError):
    kind = ErrorKind.MALFORMED_ENVELOPE


# Sanitizer / parser


class SanitizeError(IngestionError):
    pass


class NoJsonFound(SanitizeError):
    kind = ErrorKind.NO_JSON_FOUND


class UnrecoverableTruncation(SanitizeError):
    kind = ErrorKind.UNRECOVERABLE_TRUNCATION


class ParseError(IngestionError):
    kind = ErrorKind.PARSE_ERROR


# Persistence


class PersistenceFault(IngestionError):
    kind = ErrorKind.PERSISTENCE_FAULT


class ScheduleNotFound(IngestionError):
    kind = ErrorKind.SCHEDULE_NOT_FOUND
