"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Transcript rendering and auto-scrolling
- Input bar layout (text, send, voice, attach)
- Status line formatting
"""

from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.message import Message as TextualMessage
from textual.widgets import Button, Markdown, Static, TextArea

from ..conversation import Message


def last_response(history: tuple[Message, ...]) -> str | None:
    """Get the last assistant response that was not an error."""
    for msg in reversed(history):
        if msg.role == "assistant" and not msg.error:
            return msg.content
    return None


class ChatTranscript(VerticalScroll):
    """Scrollable, append-only view of the conversation history."""

    BORDER_TITLE = "QueryBot"
    BORDER_SUBTITLE = "Ask a question..."
    ALLOW_SELECT = True

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._rendered = 0

    def compose(self):
        yield Static("Thinking...", id="thinking")

    def render_history(self, history: tuple[Message, ...]) -> None:
        """Render messages not yet shown, then scroll to the newest."""
        thinking = self.query_one("#thinking", Static)
        for msg in history[self._rendered:]:
            self.mount(self._build_message(msg), before=thinking)
        self._rendered = len(history)
        self.border_subtitle = f"{self._rendered} messages"
        self.scroll_end(animate=False)

    def set_thinking(self, active: bool) -> None:
        self.query_one("#thinking", Static).set_class(active, "-active")
        if active:
            self.scroll_end(animate=False)

    def _build_message(self, msg: Message) -> Vertical:
        timestamp = msg.timestamp.strftime("%H:%M:%S")
        if msg.error:
            header, css_class = "! Error", "error-message"
        elif msg.role == "user":
            header, css_class = "> You", "user-message"
        else:
            header, css_class = "< QueryBot", "assistant-message"

        container = Vertical(classes=f"chat-message {css_class}")
        container.compose_add_child(
            Static(f"{header} [{timestamp}]", classes="message-header", markup=False)
        )
        if msg.role == "assistant" and not msg.error:
            container.compose_add_child(Markdown(msg.content, classes="message-content"))
        else:
            container.compose_add_child(
                Static(msg.content, classes="message-content", markup=False)
            )
        return container


class ChatInputBar(Horizontal):
    """Input bar with a text area and Send, Voice and Attach buttons."""

    class Submitted(TextualMessage):
        """Posted when the user submits the typed text."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    class Edited(TextualMessage):
        """Posted when the typed text changes."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    class VoiceToggled(TextualMessage):
        """Posted when the voice button is pressed."""

    class AttachRequested(TextualMessage):
        """Posted when the attach button is pressed."""

    def compose(self):
        with Vertical(id="input-column"):
            text_area = TextArea(id="chat-input", show_line_numbers=False)
            text_area.cursor_blink = False
            yield text_area
            yield Static("", id="attachment-label", markup=False)
        yield Button("Send", id="send-btn", variant="success").with_tooltip(
            "Ask QueryBot (Ctrl+J)"
        )
        yield Button("Voice", id="voice-btn", variant="primary").with_tooltip(
            "Start/stop voice input (Ctrl+T)"
        )
        yield Button("Attach", id="attach-btn").with_tooltip("Attach an image (Ctrl+O)")

    def on_mount(self) -> None:
        text_area = self.query_one("#chat-input", TextArea)
        text_area.highlight_cursor_line = False
        text_area.focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        if event.button.id == "send-btn":
            self._submit()
        elif event.button.id == "voice-btn":
            self.post_message(self.VoiceToggled())
        elif event.button.id == "attach-btn":
            self.post_message(self.AttachRequested())

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        event.stop()
        self.post_message(self.Edited(event.text_area.text))

    def on_key(self, event) -> None:
        """Submit on ctrl+j (terminals do not report ctrl+enter)."""
        if event.key == "ctrl+j":
            self._submit()
            event.prevent_default()
            event.stop()

    def _submit(self) -> None:
        if self.query_one("#send-btn", Button).disabled:
            return
        value = self.query_one("#chat-input", TextArea).text
        if value.strip():
            self.post_message(self.Submitted(value))

    @property
    def text(self) -> str:
        return self.query_one("#chat-input", TextArea).text

    def set_text(self, value: str) -> None:
        text_area = self.query_one("#chat-input", TextArea)
        if text_area.text != value:
            text_area.text = value

    def set_busy(self, busy: bool) -> None:
        """Disable input and voice while a turn is in flight."""
        self.query_one("#chat-input", TextArea).disabled = busy
        self.query_one("#voice-btn", Button).disabled = busy
        send = self.query_one("#send-btn", Button)
        send.disabled = busy
        send.label = "..." if busy else "Send"

    def set_listening(self, listening: bool) -> None:
        voice = self.query_one("#voice-btn", Button)
        voice.label = "Stop" if listening else "Voice"
        voice.set_class(listening, "-listening")

    def set_attachment(self, filename: str | None) -> None:
        label = self.query_one("#attachment-label", Static)
        label.update(f"Attached: {filename}" if filename else "")

    def focus_input(self) -> None:
        self.query_one("#chat-input", TextArea).focus()


class StatusPanel(Static):
    """One-line status: model and token usage of the last turn."""

    def on_mount(self) -> None:
        self.update("No turns yet")

    def update_result(self, model: str, tokens_used: int) -> None:
        self.update(f"Model: {model}  Tokens: {tokens_used:,}")
