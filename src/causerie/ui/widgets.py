"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Input history management and send gating
- Per-message rendering (only the changed message is redrawn)
- Welcome panel with starter suggestions
"""

from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.message import Message as TextualMessage
from textual.widgets import Button, Static, TextArea

from ..prompts import SUGGESTIONS, WELCOME_BODY, WELCOME_TITLE
from ..transcript import Message, MessageStatus, Role
from .config import (
    ASSISTANT_LABEL,
    INPUT_HISTORY_MAX_SIZE,
    SEND_LABEL,
    TIMESTAMP_FORMAT,
    TYPING_INDICATOR,
    USER_LABEL,
)


class MessageView(Vertical):
    """One transcript message: a header line and a plain-text body."""

    def __init__(self, message: Message, *args, **kwargs) -> None:
        role_class = "user-message" if message.role is Role.USER else "assistant-message"
        super().__init__(*args, classes=f"chat-message {role_class}", **kwargs)
        self._message = message
        self._header = Static(self._header_text(), classes="message-header", markup=False)
        self._body = Static(self._body_text(), classes="message-content", markup=False)
        self._sync_classes()

    @property
    def message(self) -> Message:
        return self._message

    def compose(self):
        yield self._header
        yield self._body

    def update_message(self, message: Message) -> None:
        """Redraw the body from a newer snapshot of the same message."""
        self._message = message
        self._body.update(self._body_text())
        self._sync_classes()

    def _sync_classes(self) -> None:
        self.set_class(self._message.status is MessageStatus.STREAMING, "-streaming")
        self.set_class(self._message.status is MessageStatus.FAILED, "-failed")

    def _header_text(self) -> str:
        if self._message.role is Role.USER:
            icon, label = ">", USER_LABEL
        else:
            icon, label = "<", ASSISTANT_LABEL
        return f"{icon} {label} [{self._message.timestamp.strftime(TIMESTAMP_FORMAT)}]"

    def _body_text(self) -> str:
        if self._message.is_streaming and not self._message.content:
            return TYPING_INDICATOR
        return self._message.content


class ChatHistoryWidget(VerticalScroll):
    """Scrollable conversation view keyed by message id."""

    BORDER_TITLE = "Discussion"
    ALLOW_MAXIMIZE = True

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._views: dict[str, MessageView] = {}

    def add_message(self, message: Message) -> None:
        """Mount a view for a newly appended message."""
        view = MessageView(message)
        self._views[message.id] = view
        self.mount(view)
        self.border_subtitle = f"{len(self._views)} messages"
        self.scroll_end(animate=False)

    def update_message(self, message: Message) -> None:
        """Redraw only the view of the changed message."""
        view = self._views.get(message.id)
        if view is None:
            self.add_message(message)
            return
        view.update_message(message)
        self.scroll_end(animate=False)

    def load(self, messages: tuple[Message, ...]) -> None:
        """Render an existing transcript from scratch."""
        self.clear_history()
        for message in messages:
            self.add_message(message)

    def get_last_response(self) -> str | None:
        """Get the last non-empty assistant response."""
        for view in reversed(list(self._views.values())):
            message = view.message
            if message.role is Role.ASSISTANT and message.content:
                return message.content
        return None

    def clear_history(self) -> None:
        """Clear the chat history."""
        self._views.clear()
        self.remove_children()
        self.border_subtitle = ""

    @property
    def message_count(self) -> int:
        return len(self._views)


class WelcomePanel(Vertical):
    """Greeting and starter suggestions shown for an empty conversation."""

    class SuggestionChosen(TextualMessage):
        """Sent when the user picks a suggestion."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def compose(self):
        yield Static(WELCOME_TITLE, id="welcome-title")
        yield Static(WELCOME_BODY, id="welcome-body")
        with Horizontal(id="suggestions"):
            for index, suggestion in enumerate(SUGGESTIONS):
                yield Button(f'"{suggestion}"', id=f"suggestion-{index}", classes="suggestion")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        index = int((event.button.id or "").rsplit("-", 1)[-1])
        self.post_message(self.SuggestionChosen(SUGGESTIONS[index]))


class ChatInputBar(Horizontal):
    """Chat input bar with TextArea and Send button."""

    class Submitted(TextualMessage):
        """Message sent when user submits input."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._history: list[str] = []
        self._history_index: int = -1
        self._busy = False

    def compose(self):
        text_area = TextArea(id="chat-input", show_line_numbers=False)
        text_area.cursor_blink = False
        yield text_area
        yield Button(SEND_LABEL, id="send-btn", variant="primary").with_tooltip(
            "Envoyer le message (Ctrl+J)"
        )

    def on_mount(self) -> None:
        text_area = self.query_one("#chat-input", TextArea)
        text_area.focus()
        text_area.highlight_cursor_line = False

    @property
    def busy(self) -> bool:
        return self._busy

    def set_busy(self, busy: bool) -> None:
        """Gate submission while a reply is being generated."""
        self._busy = busy
        self.query_one("#send-btn", Button).disabled = busy

    def set_text(self, value: str) -> None:
        text_area = self.query_one("#chat-input", TextArea)
        text_area.text = value
        text_area.focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send-btn":
            event.stop()
            self._submit()

    def on_key(self, event) -> None:
        """Ctrl+J submits; up/down at the edges of the text recall past input.

        Terminals do not report modifiers with Enter, so ctrl+enter is not
        available.
        """
        if event.key == "ctrl+j":
            self._submit()
        elif event.key == "up" and self._cursor_at(start=True):
            self._recall(-1)
        elif event.key == "down" and self._cursor_at(start=False):
            self._recall(1)
        else:
            return
        event.prevent_default()
        event.stop()

    def _cursor_at(self, start: bool) -> bool:
        text_area = self.query_one("#chat-input", TextArea)
        if start:
            return text_area.cursor_location == (0, 0)
        rows = text_area.text.split("\n")
        return text_area.cursor_location == (len(rows) - 1, len(rows[-1]))

    def _recall(self, step: int) -> None:
        """Move through sent inputs; stepping past the newest empties the box."""
        if not self._history:
            return
        if self._history_index == -1:
            position = len(self._history) if step > 0 else len(self._history) - 1
        else:
            position = max(self._history_index + step, 0)
        text_area = self.query_one("#chat-input", TextArea)
        if position >= len(self._history):
            self._history_index = -1
            text_area.text = ""
            return
        self._history_index = position
        text_area.text = self._history[position]

    def _submit(self) -> None:
        # Input is kept while busy so nothing typed is lost
        if self._busy:
            return
        text_area = self.query_one("#chat-input", TextArea)
        value = text_area.text.strip()
        if not value:
            return
        if value not in self._history[-1:]:
            self._history = [*self._history, value][-INPUT_HISTORY_MAX_SIZE:]
        self._history_index = -1
        text_area.text = ""
        self.post_message(self.Submitted(value))

    def focus_input(self) -> None:
        """Focus the text input."""
        self.query_one("#chat-input", TextArea).focus()
