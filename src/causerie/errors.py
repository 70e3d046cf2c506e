"""Error taxonomy.

Hides which failures are caller errors (rejected before any mutation)
and which are generation failures (scoped to one turn).
"""

from enum import Enum


class RejectReason(str, Enum):
    """Why a submission was rejected."""

    EMPTY_INPUT = "empty_input"
    TURN_ACTIVE = "turn_active"


class CauserieError(Exception):
    """Base class for all causerie errors."""


class ValidationError(CauserieError):
    """A submission was rejected before touching the transcript."""

    def __init__(self, reason: RejectReason, message: str | None = None):
        self.reason = reason
        super().__init__(message or reason.value)


class TranscriptError(CauserieError):
    """Illegal transcript mutation (unknown id or message no longer streaming)."""


class GenerationError(CauserieError):
    """Base class for failures of a Generation Client invocation."""


class ConfigurationError(GenerationError):
    """Client configuration is incomplete (e.g. missing API credential)."""


class TransportError(GenerationError):
    """Network failure or timeout while talking to the remote service."""


class UpstreamError(GenerationError):
    """The remote service answered with an explicit error instead of content."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
