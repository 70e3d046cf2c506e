"""Data models for the transcript.

Messages are immutable snapshots: the store replaces a message with an
updated copy instead of mutating it, so observers never see a value change
under their feet.
"""

from datetime import datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class MessageStatus(str, Enum):
    """Lifecycle of a message's content."""

    STREAMING = "streaming"  # assistant placeholder still growing
    COMPLETE = "complete"
    FAILED = "failed"


class Message(BaseModel):
    """One message of a conversation."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    role: Role
    content: str = ""
    timestamp: datetime = Field(default_factory=datetime.now)
    status: MessageStatus = MessageStatus.COMPLETE

    @property
    def is_streaming(self) -> bool:
        return self.status is MessageStatus.STREAMING


class ChangeKind(str, Enum):
    APPENDED = "appended"
    UPDATED = "updated"
    FINALIZED = "finalized"
    FAILED = "failed"
    CLEARED = "cleared"


class TranscriptChange(BaseModel):
    """Notification sent to transcript observers after every mutation."""

    model_config = ConfigDict(frozen=True)

    kind: ChangeKind
    message: Message | None = None
