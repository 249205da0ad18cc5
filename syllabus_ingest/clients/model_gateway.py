"""
Artifact: syllabus_ingest/clients/model_gateway.py
Purpose: Performs the single HTTP exchange with the Gemini-style text generation endpoint.
Created: 2026-10-12
Revised:
- 2026-10-13: Split credential failures from generic service failures; added envelope validation.
- 2026-10-17: Closed the per-call HTTP session when no shared session is injected.
Preconditions:
- A GatewayConfig carrying the API key is supplied at construction.
Inputs:
- Acceptable: Prompt text of any length the provider accepts.
- Unacceptable: Calls without an API key (rejected before any network I/O).
Postconditions:
- Returns the first candidate's first text part from the provider envelope.
Returns:
- Raw model text (untrusted; may be fenced, wrapped in prose or truncated).
Errors/Exceptions:
- ConfigurationError, CredentialError, ServiceError, GatewayTimeout, MalformedEnvelope.
"""

import time
from typing import Optional

import requests

from ..core.config import GatewayConfig
from ..core.errors import (
    ConfigurationError,
    CredentialError,
    GatewayTimeout,
    MalformedEnvelope,
    ServiceError,
)
from ..core.logging import get_logger

logger = get_logger("syllabus.gateway")

ERROR_BODY_PREVIEW = 1000


def build_request_body(prompt: str, config: GatewayConfig) -> dict:
    return {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": {
            "temperature": config.temperature,
            "maxOutputTokens": config.max_output_tokens,
        },
    }


def extract_candidate_text(envelope) -> str:
    """Return candidates[0].content.parts[0].text or raise MalformedEnvelope."""
    try:
        text = envelope["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as e:
        raise MalformedEnvelope(
            "The AI service returned an unexpected response.",
            detail=f"missing candidates[0].content.parts[0].text: {e!r}",
        ) from e
    if not isinstance(text, str):
        raise MalformedEnvelope(
            "The AI service returned an unexpected response.",
            detail=f"candidate text has type {type(text).__name__}",
        )
    return text


class ModelGateway:
    """Sends one prompt per call; no retries."""

    def __init__(self, config: GatewayConfig, session: Optional[requests.Session] = None):
        self.config = config
        self._session = session

    def _post(self, prompt: str) -> requests.Response:
        kwargs = dict(
            json=build_request_body(prompt, self.config),
            headers={
                "Content-Type": "application/json",
                "x-goog-api-key": self.config.api_key,
            },
            timeout=(self.config.connect_timeout_seconds, self.config.timeout_seconds),
        )
        if self._session is not None:
            return self._session.post(self.config.endpoint, **kwargs)
        with requests.Session() as session:
            return session.post(self.config.endpoint, **kwargs)

    def send(self, prompt: str) -> str:
        if not self.config.api_key:
            logger.error("Gemini API key is not configured")
            raise ConfigurationError(
                "The AI service is not configured.",
                detail="GEMINI_API_KEY is not set",
            )

        logger.info(
            "Calling model | model=%s prompt_chars=%d timeout=%ss",
            self.config.model,
            len(prompt),
            self.config.timeout_seconds,
        )
        t0 = time.time()
        try:
            response = self._post(prompt)
        except requests.Timeout as e:
            raise GatewayTimeout(
                "The AI service took too long to respond.",
                detail=f"timed out after {self.config.timeout_seconds}s",
            ) from e
        except requests.RequestException as e:
            raise ServiceError(
                "The AI service could not be reached.",
                detail=repr(e),
            ) from e

        elapsed_ms = int((time.time() - t0) * 1000)
        logger.info("Model responded | status=%d elapsed=%dms", response.status_code, elapsed_ms)

        if not response.ok:
            body = (response.text or "")[:ERROR_BODY_PREVIEW]
            logger.error("Gemini API error: status=%d body=%s", response.status_code, body)
            if response.status_code in (401, 403):
                raise CredentialError(
                    "The AI service rejected the configured API key.",
                    detail=body,
                    status_code=response.status_code,
                )
            raise ServiceError(
                "The AI service returned an error.",
                detail=body,
                status_code=response.status_code,
            )

        try:
            envelope = response.json()
        except ValueError as e:
            raise MalformedEnvelope(
                "The AI service returned an unexpected response.",
                detail=f"non-JSON body: {(response.text or '')[:ERROR_BODY_PREVIEW]}",
            ) from e

        text = extract_candidate_text(envelope)
        logger.debug("Model output (first 500 chars): %r", text[:500])
        return text
