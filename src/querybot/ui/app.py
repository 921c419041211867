"""Main Textual TUI application.

Wires the widgets to a ConversationController and runs turns as
background async workers.
"""

import asyncio
import contextlib
import threading
from typing import Any

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header

from ..config import DEFAULT_RELAY_URL
from ..conversation import ConversationController, ImageAttachment, RelayClient, TurnState
from ..speech import SpeechCapture, SpeechOutput
from .screens import AttachImageScreen
from .styles import APP_CSS
from .widgets import ChatInputBar, ChatTranscript, StatusPanel, last_response


class QueryBotApp(App):
    """Textual TUI for voice and text chat through the relay."""

    CSS = APP_CSS
    TITLE = "QueryBot"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("ctrl+t", "toggle_voice", "Voice"),
        Binding("ctrl+o", "attach_image", "Attach"),
        Binding("ctrl+x", "detach_image", "Detach"),
        Binding("ctrl+r", "copy_last_response", "Copy Response"),
    ]

    def __init__(
        self,
        relay_url: str = DEFAULT_RELAY_URL,
        capture: SpeechCapture | None = None,
        output: SpeechOutput | None = None,
    ) -> None:
        super().__init__()
        self._relay_url = relay_url
        self._client = RelayClient(relay_url)
        self.controller = ConversationController(
            relay=self._client,
            capture=capture,
            output=output,
            on_history_change=self._on_history_change,
            on_input_change=self._on_input_change,
            on_state_change=self._on_state_change,
        )

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield ChatTranscript(id="chat-transcript")
        yield StatusPanel(id="status-panel")
        yield ChatInputBar(id="chat-input-bar")
        yield Footer()

    def on_mount(self) -> None:
        self.sub_title = self._relay_url
        if not self.controller.voice_available:
            self.query_one("#voice-btn").disabled = True
            self.notify(
                "Speech recognition is not available; voice input is disabled.",
                severity="warning",
                timeout=5,
            )
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    async def on_unmount(self) -> None:
        """Silence speech, stop capture and close the relay client."""
        self.controller.close()
        with contextlib.suppress(RuntimeError):
            await self._client.close()

    # ------------------------------------------------------------------
    # Controller callbacks
    # ------------------------------------------------------------------

    def _call_thread_safe(self, func: Any, *args: Any) -> None:
        """Run a UI update on the app thread (speech capture calls from its own)."""
        if self._thread_id != threading.get_ident():
            self.call_from_thread(func, *args)
        else:
            func(*args)

    def _on_history_change(self, history) -> None:
        self.query_one("#chat-transcript", ChatTranscript).render_history(history)
        self.query_one("#chat-input-bar", ChatInputBar).set_attachment(
            self.controller.pending_image.filename if self.controller.pending_image else None
        )
        result = self.controller.last_result
        if result is not None:
            self.query_one("#status-panel", StatusPanel).update_result(
                result.model, result.tokens_used
            )

    def _on_input_change(self, text: str) -> None:
        self._call_thread_safe(self.query_one("#chat-input-bar", ChatInputBar).set_text, text)

    def _on_state_change(self, state: TurnState) -> None:
        busy = state is TurnState.SUBMITTING
        self.query_one("#chat-input-bar", ChatInputBar).set_busy(busy)
        self.query_one("#chat-transcript", ChatTranscript).set_thinking(busy)
        if not busy:
            bar = self.query_one("#chat-input-bar", ChatInputBar)
            if not self.controller.voice_available:
                self.query_one("#voice-btn").disabled = True
            bar.focus_input()

    # ------------------------------------------------------------------
    # Input bar events
    # ------------------------------------------------------------------

    def on_chat_input_bar_edited(self, event: ChatInputBar.Edited) -> None:
        if event.value != self.controller.pending_input:
            self.controller.set_input(event.value)

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        self.controller.set_input(event.value)
        self._ask()

    def on_chat_input_bar_voice_toggled(self, event: ChatInputBar.VoiceToggled) -> None:
        self.action_toggle_voice()

    def on_chat_input_bar_attach_requested(self, event: ChatInputBar.AttachRequested) -> None:
        self.action_attach_image()

    @work(group="turn")
    async def _ask(self) -> None:
        await self.controller.ask()

    @work(group="turn")
    async def _toggle_voice(self) -> None:
        bar = self.query_one("#chat-input-bar", ChatInputBar)
        starting = not self.controller.listening
        bar.set_listening(starting)
        try:
            await self.controller.toggle_voice()
        except (OSError, AttributeError) as e:
            bar.set_listening(False)
            self.notify(f"Voice input failed: {e}", severity="error", timeout=5)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def action_toggle_voice(self) -> None:
        if not self.controller.voice_available:
            self.notify("Speech recognition is not available", severity="warning")
            return
        if self.controller.in_flight:
            return
        self._toggle_voice()

    def action_attach_image(self) -> None:
        self.push_screen(AttachImageScreen(), self._attach_from_path)

    def action_detach_image(self) -> None:
        self.controller.detach_image()
        self.query_one("#chat-input-bar", ChatInputBar).set_attachment(None)

    def _attach_from_path(self, path: str | None) -> None:
        if not path:
            return
        try:
            attachment = ImageAttachment.from_path(path)
        except (OSError, ValueError) as e:
            self.notify(f"Cannot attach image: {e}", severity="error", timeout=5)
            return
        self.controller.attach_image(attachment)
        self.query_one("#chat-input-bar", ChatInputBar).set_attachment(attachment.filename)

    def action_copy_last_response(self) -> None:
        """Copy last assistant response to clipboard."""
        response = last_response(self.controller.history)
        if response:
            self.copy_to_clipboard(response)
            self.notify("Response copied")
        else:
            self.notify("No response to copy", severity="warning")


async def run_textual_tui(
    relay_url: str = DEFAULT_RELAY_URL,
    capture: SpeechCapture | None = None,
    output: SpeechOutput | None = None,
) -> None:
    """Run the Textual TUI.

    Args:
        relay_url: Base URL of the completion relay
        capture: Speech capture backend (None disables voice input)
        output: Speech output backend (None keeps replies silent)
    """
    app = QueryBotApp(relay_url=relay_url, capture=capture, output=output)
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    finally:
        app.controller.close()
