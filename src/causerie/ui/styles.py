"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
"""

APP_CSS = """
Screen {
    layout: vertical;
    background: $background;
}

/* Welcome panel shown while the conversation is empty */
#welcome {
    height: 1fr;
    align: center middle;
    padding: 1 4;

    #welcome-title {
        width: 100%;
        content-align: center middle;
        text-style: bold;
        color: $primary;
        margin-bottom: 1;
    }

    #welcome-body {
        width: 100%;
        content-align: center middle;
        color: $text-muted;
        margin-bottom: 2;
    }

    #suggestions {
        height: auto;
        align: center middle;
    }

    .suggestion {
        width: 1fr;
        margin: 0 1;
    }
}

/* Conversation */
#chat-history {
    height: 1fr;
    background: $surface;
    border: round $primary 60%;
    border-title-color: $primary;
    border-title-style: bold;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    scrollbar-gutter: stable;
}

.chat-message {
    height: auto;
    margin: 1 0 0 0;
    padding: 0 1;
    background: $panel;

    .message-header {
        text-style: bold;
        color: $text-muted;
    }

    .message-content {
        height: auto;
    }
}

.user-message {
    border-left: thick $primary;
    margin-left: 8;
}

.assistant-message {
    border-left: thick $secondary;
    margin-right: 8;

    &.-streaming .message-header {
        color: $accent;
    }

    &.-failed {
        border-left: thick $error;

        .message-content {
            color: $error;
        }
    }
}

/* Input bar */
#chat-input-bar {
    height: auto;
    max-height: 12;
    padding: 0 1;

    #chat-input {
        width: 1fr;
        height: auto;
        min-height: 3;
        max-height: 10;
        border: round $primary 40%;

        &:focus {
            border: round $primary;
        }
    }

    #send-btn {
        width: 12;
        margin-left: 1;
    }
}

#disclaimer {
    width: 100%;
    height: 1;
    content-align: center middle;
    color: $text-muted;
    text-style: italic;
}
"""
