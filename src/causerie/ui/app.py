"""Main Textual TUI application.

Renders the transcript reactively and forwards input to the turn controller.
The app never mutates the transcript itself.
"""

import asyncio

import structlog
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header, Static

from ..errors import RejectReason, ValidationError
from ..transcript import ChangeKind, TranscriptChange
from ..turn import TurnController
from .config import BUSY_NOTICE, DISCLAIMER, EMPTY_NOTICE
from .styles import APP_CSS
from .themes import SLATE_NIGHT
from .widgets import ChatHistoryWidget, ChatInputBar, WelcomePanel

logger = structlog.get_logger(__name__)


class ChatApp(App):
    """Textual TUI for a streamed chat conversation."""

    CSS = APP_CSS
    TITLE = "Causerie"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quitter"),
        Binding("ctrl+n", "new_chat", "Nouvelle discussion"),
        Binding("escape", "cancel_generation", "Annuler"),
        Binding("ctrl+r", "copy_last_response", "Copier la réponse"),
    ]

    def __init__(self, controller: TurnController) -> None:
        super().__init__()
        self._controller = controller
        self._unsubscribe = None

    @property
    def controller(self) -> TurnController:
        return self._controller

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield WelcomePanel(id="welcome")
        yield ChatHistoryWidget(id="chat-history")
        yield ChatInputBar(id="chat-input-bar")
        yield Static(DISCLAIMER, id="disclaimer")
        yield Footer()

    def on_mount(self) -> None:
        """Called when app is mounted."""
        self.register_theme(SLATE_NIGHT)
        self.theme = "slate-night"
        self.sub_title = self._controller.client.model

        transcript = self._controller.transcript
        self.query_one("#chat-history", ChatHistoryWidget).load(transcript.messages)
        self._unsubscribe = transcript.subscribe(self._on_transcript_change)
        self._sync_view()
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._controller.cancel()

    def _on_transcript_change(self, change: TranscriptChange) -> None:
        chat = self.query_one("#chat-history", ChatHistoryWidget)
        if change.kind is ChangeKind.CLEARED:
            chat.clear_history()
        elif change.kind is ChangeKind.APPENDED:
            chat.add_message(change.message)
        else:
            chat.update_message(change.message)
        self._sync_view()

    def _sync_view(self) -> None:
        """Toggle the welcome panel and gate input on the turn signal."""
        empty = len(self._controller.transcript) == 0
        self.query_one("#welcome", WelcomePanel).display = empty
        self.query_one("#chat-history", ChatHistoryWidget).display = not empty
        self.query_one("#chat-input-bar", ChatInputBar).set_busy(self._controller.is_active)

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        """Handle user input submission."""
        result = self._controller.submit_turn(event.value)
        if not result.accepted:
            notice = BUSY_NOTICE if result.reason is RejectReason.TURN_ACTIVE else EMPTY_NOTICE
            self.notify(notice, severity="warning", timeout=3)

    def on_welcome_panel_suggestion_chosen(self, event: WelcomePanel.SuggestionChosen) -> None:
        self.query_one("#chat-input-bar", ChatInputBar).set_text(event.value)

    def action_new_chat(self) -> None:
        """Start a new conversation."""
        try:
            self._controller.new_conversation()
        except ValidationError:
            self.notify(BUSY_NOTICE, severity="warning", timeout=3)
            return
        self._sync_view()
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    def action_cancel_generation(self) -> None:
        """Cancel the reply being generated."""
        if self._controller.cancel():
            self.notify("Génération annulée", severity="warning", timeout=2)

    def action_copy_last_response(self) -> None:
        """Copy last assistant response to clipboard."""
        chat = self.query_one("#chat-history", ChatHistoryWidget)
        response = chat.get_last_response()
        if response:
            self.copy_to_clipboard(response)
            self.notify("Réponse copiée")
        else:
            self.notify("Aucune réponse à copier", severity="warning")


async def run_chat_tui(controller: TurnController) -> None:
    """Run the Textual TUI.

    Args:
        controller: Turn controller wired to a transcript and a client
    """
    app = ChatApp(controller)
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        logger.info("tui_interrupted")
