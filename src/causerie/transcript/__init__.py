"""Transcript module: messages of one conversation and change notifications."""

from .models import ChangeKind, Message, MessageStatus, Role, TranscriptChange
from .store import Observer, Transcript

__all__ = [
    "ChangeKind",
    "Message",
    "MessageStatus",
    "Observer",
    "Role",
    "Transcript",
    "TranscriptChange",
]
