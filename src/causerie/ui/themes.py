"""Theme definitions for the TUI.

This module hides the color palette. To add a new theme, define it here and
register it in the app.
"""

from textual.theme import Theme

# Slate background with blue/purple accents
SLATE_NIGHT = Theme(
    name="slate-night",
    primary="#3b82f6",      # Blue 500 - main accent, send button
    secondary="#a855f7",    # Purple 500 - assistant accent
    accent="#60a5fa",       # Blue 400 - highlights
    foreground="#e2e8f0",   # Slate 200 - text
    background="#020617",   # Slate 950 - deepest background
    success="#22c55e",
    warning="#f59e0b",
    error="#f87171",
    surface="#0f172a",      # Slate 900 - input and panels
    panel="#1e293b",        # Slate 800 - message bubbles
    dark=True,
    variables={
        "block-cursor-foreground": "#020617",
        "block-cursor-background": "#93c5fd",
        "input-selection-background": "#3b82f6 30%",
        "scrollbar": "#334155",
        "scrollbar-hover": "#475569",
        "footer-key-foreground": "#60a5fa",
    },
)
