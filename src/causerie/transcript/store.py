"""Observable transcript store.

Hides how messages are kept and how observers are notified. The store only
enforces message-level rules (append order, streaming-only mutation);
turn-level rules belong to the turn controller.
"""

from collections.abc import Callable, Iterator

import structlog

from ..errors import TranscriptError
from ..llm.models import ChatMessage
from .models import ChangeKind, Message, MessageStatus, Role, TranscriptChange

logger = structlog.get_logger(__name__)

Observer = Callable[[TranscriptChange], None]


class Transcript:
    """Ordered, observable list of messages forming one conversation."""

    def __init__(self) -> None:
        self._messages: list[Message] = []
        self._index: dict[str, int] = {}
        self._observers: list[Observer] = []

    @property
    def messages(self) -> tuple[Message, ...]:
        """Snapshot of the conversation, oldest first."""
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))

    def get(self, message_id: str) -> Message:
        """Return the current snapshot of a message."""
        try:
            return self._messages[self._index[message_id]]
        except KeyError:
            raise TranscriptError(f"Unknown message id: {message_id}") from None

    def last(self) -> Message | None:
        return self._messages[-1] if self._messages else None

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register an observer; returns a callable that unsubscribes it."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _notify(self, kind: ChangeKind, message: Message | None = None) -> None:
        change = TranscriptChange(kind=kind, message=message)
        for observer in list(self._observers):
            try:
                observer(change)
            except Exception:
                # One faulty observer must not break the mutation or the others
                logger.exception("observer_failed", kind=kind.value)

    def _append(self, message: Message) -> Message:
        self._index[message.id] = len(self._messages)
        self._messages.append(message)
        self._notify(ChangeKind.APPENDED, message)
        return message

    def _replace(self, message: Message, kind: ChangeKind, **update) -> Message:
        updated = message.model_copy(update=update)
        self._messages[self._index[message.id]] = updated
        self._notify(kind, updated)
        return updated

    def _streaming(self, message_id: str) -> Message:
        message = self.get(message_id)
        if not message.is_streaming:
            raise TranscriptError(
                f"Message {message_id} is {message.status.value} and can no longer change"
            )
        return message

    def append_user(self, content: str) -> Message:
        """Append a user message; its content is fixed from now on."""
        return self._append(Message(role=Role.USER, content=content))

    def append_placeholder(self) -> Message:
        """Append an empty assistant message that will grow while streaming."""
        return self._append(Message(role=Role.ASSISTANT, status=MessageStatus.STREAMING))

    def append_fragment(self, message_id: str, fragment: str) -> Message:
        """Concatenate a fragment to a streaming message."""
        message = self._streaming(message_id)
        return self._replace(message, ChangeKind.UPDATED, content=message.content + fragment)

    def finalize(self, message_id: str) -> Message:
        """Freeze a streaming message's content."""
        message = self._streaming(message_id)
        return self._replace(message, ChangeKind.FINALIZED, status=MessageStatus.COMPLETE)

    def fail(self, message_id: str, content: str) -> Message:
        """Replace a streaming message's content in full and freeze it."""
        message = self._streaming(message_id)
        return self._replace(
            message, ChangeKind.FAILED, content=content, status=MessageStatus.FAILED
        )

    def clear(self) -> None:
        """Drop every message (start a new conversation)."""
        self._messages.clear()
        self._index.clear()
        self._notify(ChangeKind.CLEARED)

    def history_before(self, message_id: str) -> tuple[Message, ...]:
        """Messages preceding ``message_id``, oldest first."""
        self.get(message_id)
        return tuple(self._messages[: self._index[message_id]])

    def to_context(self, before: str | None = None) -> list[ChatMessage]:
        """Answered exchanges as generation context.

        Args:
            before: Only include messages preceding this message id

        A user message is kept only when the reply right after it completed
        with text, so the context alternates user/assistant. Failed and
        still-streaming replies drop out together with their question.
        """
        messages = self.history_before(before) if before is not None else tuple(self._messages)
        context = []
        for question, reply in zip(messages, messages[1:]):
            if question.role is not Role.USER or not _is_answer(reply):
                continue
            context.append(ChatMessage(role=question.role.value, content=question.content))
            context.append(ChatMessage(role=reply.role.value, content=reply.content))
        return context


def _is_answer(message: Message) -> bool:
    return (
        message.role is Role.ASSISTANT
        and message.status is MessageStatus.COMPLETE
        and bool(message.content)
    )
