"""
Artifact: syllabus_ingest/core/config.py
Purpose: Centralizes environment loading and static service configuration values.
Created: 2026-10-12
Revised:
- 2026-10-12: Added gateway configuration object built from environment settings.
- 2026-10-15: Added upload/prompt size limits and OCR toggle.
Preconditions:
- Environment variables may be present in process env and optional .env file.
Inputs:
- Acceptable: String environment variables such as GEMINI_API_KEY and DATABASE_URL.
- Unacceptable: Non-numeric values for numeric settings (defaults are used instead).
Postconditions:
- Dotenv variables are loaded and configuration values are available to callers.
Returns:
- Settings object with accessor methods; GatewayConfig for the model gateway.
Errors/Exceptions:
- No explicit exceptions; a missing API key is reported by the gateway at call time.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1beta/models"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    try:
        return float(raw) if raw else default
    except ValueError:
        return default


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    return raw not in {"0", "false", "no", "off"}


@dataclass(frozen=True)
class GatewayConfig:
    """Everything the model gateway needs; passed in at construction."""

    api_key: str
    model: str = DEFAULT_MODEL
    api_base: str = DEFAULT_API_BASE
    timeout_seconds: float = 120.0
    connect_timeout_seconds: float = 10.0
    temperature: float = 0.2
    max_output_tokens: int = 8192

    @property
    def endpoint(self) -> str:
        return f"{self.api_base.rstrip('/')}/{self.model}:generateContent"


class Settings:
    """Application-level configuration values."""

    app_title: str = "Syllabus Ingestion Service"

    @staticmethod
    def gemini_api_key() -> str:
        return os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY", "")

    @staticmethod
    def gemini_model() -> str:
        return os.getenv("GEMINI_MODEL", DEFAULT_MODEL)

    @staticmethod
    def gemini_api_base() -> str:
        return os.getenv("GEMINI_API_BASE", DEFAULT_API_BASE)

    @staticmethod
    def database_url() -> str:
        return os.getenv("DATABASE_URL", "sqlite:///./syllabus.db")

    @staticmethod
    def max_upload_bytes() -> int:
        return _env_int("MAX_UPLOAD_BYTES", 10 * 1024 * 1024)

    @staticmethod
    def max_prompt_text_chars() -> int:
        return _env_int("MAX_PROMPT_TEXT_CHARS", 60000)

    @staticmethod
    def ocr_enabled() -> bool:
        return _env_flag("ENABLE_OCR", False)

    @staticmethod
    def log_level() -> str:
        return os.getenv("LOG_LEVEL", "INFO").upper()

    def gateway_config(self) -> GatewayConfig:
        return GatewayConfig(
            api_key=self.gemini_api_key(),
            model=self.gemini_model(),
            api_base=self.gemini_api_base(),
            timeout_seconds=_env_float("MODEL_TIMEOUT_SECONDS", 120.0),
            temperature=_env_float("MODEL_TEMPERATURE", 0.2),
            max_output_tokens=_env_int("MODEL_MAX_OUTPUT_TOKENS", 8192),
        )


settings = Settings()
