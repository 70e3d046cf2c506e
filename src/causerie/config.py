"""Configuration constants and settings.

Centralizes tunables and reads overrides from the environment.
"""

import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

# Generation defaults
DEFAULT_MODEL = "gemini-3-flash-preview"
DEFAULT_TEMPERATURE = 0.7

# Bounded waits (seconds) for the first fragment and between fragments
FIRST_CHUNK_TIMEOUT = 30.0
CHUNK_TIMEOUT = 30.0

# Credential lookup order
API_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")

LogLevelName = Literal["debug", "info", "warning", "error"]

_TRUE_VALUES = {"1", "true", "yes", "on"}


def resolve_api_key() -> str | None:
    """Return the first non-empty API key found in the environment."""
    for name in API_KEY_ENV_VARS:
        value = os.getenv(name)
        if value and value.strip():
            return value.strip()
    return None


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


class ChatSettings(BaseModel):
    """Validated runtime settings for a chat session."""

    model_config = ConfigDict(frozen=True)

    model: str = Field(default=DEFAULT_MODEL, min_length=1)
    temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0.0, le=2.0)
    first_chunk_timeout: float = Field(default=FIRST_CHUNK_TIMEOUT, gt=0)
    chunk_timeout: float = Field(default=CHUNK_TIMEOUT, gt=0)
    include_history: bool = True
    preserve_partial_on_failure: bool = False
    log_level: LogLevelName = "warning"
    log_file: Path | None = None

    @classmethod
    def from_env(cls, **overrides) -> "ChatSettings":
        """Build settings from CAUSERIE_* environment variables.

        Explicit keyword overrides win over the environment; None values
        are ignored so CLI options can be passed through unconditionally.

        Environment variables:
            CAUSERIE_MODEL: Model name (default: gemini-3-flash-preview)
            CAUSERIE_TEMPERATURE: Sampling temperature (default: 0.7)
            CAUSERIE_FIRST_CHUNK_TIMEOUT: Seconds to wait for the first fragment
            CAUSERIE_CHUNK_TIMEOUT: Seconds to wait between fragments
            CAUSERIE_INCLUDE_HISTORY: Send prior turns as context (default: true)
            CAUSERIE_PRESERVE_PARTIAL: Keep partial text on failure (default: false)
            CAUSERIE_LOG_LEVEL: debug, info, warning or error (default: warning)
            CAUSERIE_LOG_FILE: Write logs to this file instead of stderr
        """
        values: dict = {
            "model": os.getenv("CAUSERIE_MODEL", DEFAULT_MODEL),
            "temperature": os.getenv("CAUSERIE_TEMPERATURE", str(DEFAULT_TEMPERATURE)),
            "first_chunk_timeout": os.getenv(
                "CAUSERIE_FIRST_CHUNK_TIMEOUT", str(FIRST_CHUNK_TIMEOUT)
            ),
            "chunk_timeout": os.getenv("CAUSERIE_CHUNK_TIMEOUT", str(CHUNK_TIMEOUT)),
            "include_history": _env_flag("CAUSERIE_INCLUDE_HISTORY", True),
            "preserve_partial_on_failure": _env_flag("CAUSERIE_PRESERVE_PARTIAL", False),
            "log_level": os.getenv("CAUSERIE_LOG_LEVEL", "warning").lower(),
            "log_file": os.getenv("CAUSERIE_LOG_FILE") or None,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
