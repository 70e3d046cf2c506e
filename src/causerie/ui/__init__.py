"""Terminal UI module for causerie.

Provides a Textual-based TUI that renders a transcript as it streams.

Module structure (each module hides a design decision):
- widgets.py: Custom widgets (message views, input bar, welcome panel)
- styles.py: CSS styling (layout decisions)
- themes.py: Color palette
- config.py: Labels and UI tunables
- app.py: Application orchestration (user interaction flow)
"""

from .app import ChatApp, run_chat_tui
from .widgets import ChatHistoryWidget, ChatInputBar, MessageView, WelcomePanel

__all__ = [
    "ChatApp",
    "ChatHistoryWidget",
    "ChatInputBar",
    "MessageView",
    "WelcomePanel",
    "run_chat_tui",
]
