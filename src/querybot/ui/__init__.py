"""Terminal UI module for querybot.

Provides a Textual-based TUI in place of the browser page.

Module structure (each module hides a design decision):
- widgets.py: Transcript, input bar and status line
- styles.py: CSS styling (layout decisions)
- screens.py: Modal dialogs (image attachment)
- app.py: Application orchestration (wiring widgets to the controller)
"""

from .app import QueryBotApp, run_textual_tui
from .widgets import ChatInputBar, ChatTranscript, StatusPanel

__all__ = [
    "ChatInputBar",
    "ChatTranscript",
    "QueryBotApp",
    "StatusPanel",
    "run_textual_tui",
]
