"""
Causerie: a terminal chat client that streams replies from Gemini.

The core is the streaming response pipeline: an observable transcript, a
generation client producing ordered text fragments, and a turn controller
folding those fragments into the transcript.
"""

__version__ = "0.1.0"

from .errors import (
    CauserieError,
    ConfigurationError,
    GenerationError,
    RejectReason,
    TranscriptError,
    TransportError,
    UpstreamError,
    ValidationError,
)
from .llm import ChatMessage, GenerationClient, StreamingResponse, create_generation_client
from .transcript import ChangeKind, Message, MessageStatus, Role, Transcript, TranscriptChange
from .turn import SubmitResult, Turn, TurnController, TurnState

__all__ = [
    "CauserieError",
    "ChangeKind",
    "ChatMessage",
    "ConfigurationError",
    "GenerationClient",
    "GenerationError",
    "Message",
    "MessageStatus",
    "RejectReason",
    "Role",
    "StreamingResponse",
    "SubmitResult",
    "Transcript",
    "TranscriptChange",
    "TranscriptError",
    "TransportError",
    "Turn",
    "TurnController",
    "TurnState",
    "UpstreamError",
    "ValidationError",
    "create_generation_client",
]
