"""Turn controller.

Hides the ordering of transcript mutations during one request/response
cycle: append the user message, append an empty assistant placeholder, fold
each streamed fragment into it, then freeze it or replace it with an error.
At most one turn is active per controller; submissions made meanwhile are
rejected before anything is mutated.
"""

import asyncio
import contextlib

import structlog

from ..errors import GenerationError, RejectReason, ValidationError
from ..llm.base import GenerationClient
from ..llm.models import ChatMessage
from ..prompts import CANCELLED_MESSAGE, GENERATION_ERROR_MESSAGE
from ..transcript import Transcript
from .models import SubmitResult, Turn, TurnState

logger = structlog.get_logger(__name__)


class TurnController:
    """Drives Generation Client invocations into a transcript.

    Must be used from a single event loop; fragments are consumed in one
    task per turn, one suspension per awaited fragment.
    """

    def __init__(
        self,
        transcript: Transcript,
        client: GenerationClient,
        *,
        preserve_partial: bool = False,
        failure_message: str = GENERATION_ERROR_MESSAGE,
        cancelled_message: str = CANCELLED_MESSAGE,
    ) -> None:
        """Initialize the controller.

        Args:
            transcript: Conversation this controller mutates
            client: Generation client (injected, never a global)
            preserve_partial: On failure keep streamed text and append the
                error message instead of replacing the content
            failure_message: User-facing text for a failed generation
            cancelled_message: User-facing text for a cancelled generation
        """
        self._transcript = transcript
        self._client = client
        self._preserve_partial = preserve_partial
        self._failure_message = failure_message
        self._cancelled_message = cancelled_message
        self._current: Turn | None = None

    @property
    def transcript(self) -> Transcript:
        return self._transcript

    @property
    def client(self) -> GenerationClient:
        return self._client

    @property
    def current_turn(self) -> Turn | None:
        """The active turn, or the last one to finish."""
        return self._current

    @property
    def state(self) -> TurnState:
        return self._current.state if self._current is not None else TurnState.IDLE

    @property
    def is_active(self) -> bool:
        """True while a reply is being generated (input should be gated)."""
        return self.state.is_active

    def submit_turn(self, text: str) -> SubmitResult:
        """Start a turn for ``text`` without waiting for the reply.

        Must be called while an event loop is running. Rejected submissions
        leave the transcript untouched and never reach the client.
        """
        try:
            turn = self._begin_turn(text)
        except ValidationError as e:
            return SubmitResult.reject(e.reason)
        return SubmitResult.accept(turn)

    async def run_turn(self, text: str) -> Turn:
        """Start a turn and wait until it is finalized or failed.

        Raises:
            ValidationError: If the submission is rejected
        """
        turn = self._begin_turn(text)
        return await turn.wait()

    def cancel(self) -> bool:
        """Cancel the active turn; returns False when there is none."""
        if self._current is None:
            return False
        return self._current.cancel()

    def new_conversation(self) -> None:
        """Clear the transcript and return to idle.

        Raises:
            ValidationError: While a turn is active
        """
        if self.is_active:
            raise ValidationError(
                RejectReason.TURN_ACTIVE, "Cannot start a new conversation during a reply"
            )
        self._current = None
        self._transcript.clear()
        logger.info("conversation_cleared")

    def _begin_turn(self, text: str) -> Turn:
        content = text.strip() if text else ""
        if not content:
            logger.info("turn_rejected", reason=RejectReason.EMPTY_INPUT.value)
            raise ValidationError(RejectReason.EMPTY_INPUT, "Cannot submit an empty message")
        if self.is_active:
            logger.info("turn_rejected", reason=RejectReason.TURN_ACTIVE.value)
            raise ValidationError(
                RejectReason.TURN_ACTIVE, "A reply is still being generated"
            )

        # Fails before any mutation when no loop is running
        loop = asyncio.get_running_loop()

        history = self._transcript.to_context()
        turn = Turn()
        self._current = turn
        turn.user_message_id = self._transcript.append_user(content).id
        turn.assistant_message_id = self._transcript.append_placeholder().id

        task = loop.create_task(self._drive(turn, history, content))
        task.add_done_callback(lambda t: self._on_task_done(turn, t))
        turn._task = task
        logger.info("turn_accepted", turn=turn.assistant_message_id, history=len(history))
        return turn

    async def _drive(self, turn: Turn, history: list[ChatMessage], user_input: str) -> None:
        log = logger.bind(turn=turn.assistant_message_id)
        try:
            stream = await self._client.stream_chat(history, user_input)
            async with contextlib.aclosing(stream):
                async for fragment in stream:
                    if not fragment:
                        continue
                    turn.state = TurnState.STREAMING
                    turn.fragment_count += 1
                    self._transcript.append_fragment(turn.assistant_message_id, fragment)
            turn.usage = stream.usage
        except asyncio.CancelledError:
            log.info("turn_cancelled", fragments=turn.fragment_count)
            self._fail(turn, self._cancelled_message)
            if not turn.cancelled:
                raise
            return
        except GenerationError as e:
            log.warning(
                "turn_failed",
                error_type=type(e).__name__,
                error=str(e),
                fragments=turn.fragment_count,
            )
            self._fail(turn, self._failure_message, error=e)
            return
        except Exception as e:
            log.exception("turn_failed_unexpectedly", fragments=turn.fragment_count)
            self._fail(turn, self._failure_message, error=e)
            return

        turn.state = TurnState.FINALIZED
        message = self._transcript.finalize(turn.assistant_message_id)
        log.info("turn_finalized", fragments=turn.fragment_count, length=len(message.content))

    def _fail(self, turn: Turn, text: str, error: BaseException | None = None) -> None:
        turn.error = error
        turn.state = TurnState.FAILED
        content = text
        if self._preserve_partial:
            partial = self._transcript.get(turn.assistant_message_id).content
            if partial:
                content = f"{partial}\n\n{text}"
        self._transcript.fail(turn.assistant_message_id, content)

    def _on_task_done(self, turn: Turn, task: asyncio.Task) -> None:
        if not turn.state.is_active:
            return
        if task.cancelled():
            # Cancelled before the driving task got to run
            turn.cancelled = True
            logger.info("turn_cancelled", turn=turn.assistant_message_id, fragments=0)
            self._fail(turn, self._cancelled_message)
            return
        error = task.exception()
        logger.error(
            "turn_ended_without_outcome",
            turn=turn.assistant_message_id,
            error_type=type(error).__name__ if error else None,
        )
        self._fail(turn, self._failure_message, error=error)
