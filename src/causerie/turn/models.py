"""Data structures for turns.

A turn is ephemeral: it lives as long as one request/response cycle and is
never persisted.
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..errors import RejectReason


class TurnState(str, Enum):
    IDLE = "idle"
    AWAITING_FIRST_CHUNK = "awaiting_first_chunk"
    STREAMING = "streaming"
    FINALIZED = "finalized"
    FAILED = "failed"

    @property
    def is_active(self) -> bool:
        return self in (TurnState.AWAITING_FIRST_CHUNK, TurnState.STREAMING)

    @property
    def is_terminal(self) -> bool:
        return self in (TurnState.FINALIZED, TurnState.FAILED)


@dataclass
class Turn:
    """Handle on one user submission and the assistant reply it triggers."""

    user_message_id: str = ""
    assistant_message_id: str = ""
    state: TurnState = TurnState.AWAITING_FIRST_CHUNK
    fragment_count: int = 0
    error: BaseException | None = None
    cancelled: bool = False
    usage: dict[str, Any] | None = None
    _task: asyncio.Task | None = field(default=None, repr=False)

    def done(self) -> bool:
        return self.state.is_terminal

    def cancel(self) -> bool:
        """Request cancellation; returns False if the turn already ended."""
        if self._task is None or self._task.done() or not self.state.is_active:
            return False
        self.cancelled = True
        self._task.cancel()
        return True

    async def wait(self) -> "Turn":
        """Wait until the turn reaches a terminal state."""
        if self._task is not None:
            try:
                await self._task
            except asyncio.CancelledError:
                # Cancelled through cancel() before the task ever ran
                if not (self.cancelled and self._task.cancelled()):
                    raise
        return self


@dataclass(frozen=True)
class SubmitResult:
    """Outcome of a submission: accepted with a turn, or rejected with a reason."""

    accepted: bool
    reason: RejectReason | None = None
    turn: Turn | None = None

    @classmethod
    def accept(cls, turn: Turn) -> "SubmitResult":
        return cls(accepted=True, turn=turn)

    @classmethod
    def reject(cls, reason: RejectReason) -> "SubmitResult":
        return cls(accepted=False, reason=reason)
