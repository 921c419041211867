"""Conversation controller.

Hidden design decisions:
- Single-flight turn discipline (idle -> submitting -> idle)
- Merging typed input with the live speech transcript
- What is spoken after a turn, and when speech is cancelled
- Conversion of every turn failure into an error message in the transcript
"""

import logging
from collections.abc import Callable
from enum import Enum
from typing import Protocol

from ..config import EMPTY_REPLY_FALLBACK, ERROR_APOLOGY
from ..relay.models import TurnSuccess
from ..speech import NullCapture, NullOutput, SpeechCapture, SpeechOutput
from .models import ImageAttachment, Message

logger = logging.getLogger(__name__)


class TurnState(str, Enum):
    """Turn pipeline state."""

    IDLE = "idle"
    SUBMITTING = "submitting"


class TurnSender(Protocol):
    """Anything that can deliver a turn to the relay (see RelayClient)."""

    async def send_turn(
        self,
        history: list[Message],
        image: ImageAttachment | None = None,
    ) -> TurnSuccess: ...


class ConversationController:
    """Owns the transcript and runs one turn at a time.

    Input arrives from three sources: typed text (set_input), a finalized
    speech transcript (toggle_voice) and an explicit submit (ask). Each turn
    appends one user message before the relay call and one assistant message
    after it, so the transcript is append-only and grows by two per turn.

    Optional callbacks let a view follow state changes:
        on_history_change(history): after every append (auto-scroll hook)
        on_input_change(text): when the pending input changes; may be called
            from a speech capture thread
        on_state_change(state): on idle/submitting transitions
    """

    def __init__(
        self,
        relay: TurnSender,
        capture: SpeechCapture | None = None,
        output: SpeechOutput | None = None,
        on_history_change: Callable[[tuple[Message, ...]], None] | None = None,
        on_input_change: Callable[[str], None] | None = None,
        on_state_change: Callable[[TurnState], None] | None = None,
    ) -> None:
        self._relay = relay
        self._capture = capture or NullCapture()
        self._output = output or NullOutput()
        self._on_history_change = on_history_change
        self._on_input_change = on_input_change
        self._on_state_change = on_state_change

        self._history: list[Message] = []
        self._pending_input = ""
        self._pending_image: ImageAttachment | None = None
        self._state = TurnState.IDLE
        self._last_result: TurnSuccess | None = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def history(self) -> tuple[Message, ...]:
        return tuple(self._history)

    @property
    def pending_input(self) -> str:
        return self._pending_input

    @property
    def pending_image(self) -> ImageAttachment | None:
        return self._pending_image

    @property
    def state(self) -> TurnState:
        return self._state

    @property
    def in_flight(self) -> bool:
        return self._state is TurnState.SUBMITTING

    @property
    def listening(self) -> bool:
        return self._capture.is_listening

    @property
    def voice_available(self) -> bool:
        return self._capture.available

    @property
    def last_result(self) -> TurnSuccess | None:
        """Result of the most recent successful turn."""
        return self._last_result

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def set_input(self, text: str) -> None:
        """Replace the pending input text."""
        self._pending_input = text
        self._notify(self._on_input_change, text)

    def attach_image(self, attachment: ImageAttachment) -> None:
        """Attach an image to the next turn, replacing any pending one."""
        self._pending_image = attachment

    def detach_image(self) -> None:
        self._pending_image = None

    # ------------------------------------------------------------------
    # Turns
    # ------------------------------------------------------------------

    async def ask(self) -> Message | None:
        """Submit the pending input and attachment."""
        return await self.submit_turn(self._pending_input, self._pending_image)

    async def submit_turn(
        self,
        current_input: str,
        attached_image: ImageAttachment | None = None,
    ) -> Message | None:
        """Run one conversation turn.

        Args:
            current_input: User text; whitespace-only input is ignored
            attached_image: Optional image sent with this turn

        Returns:
            The assistant message appended for this turn, or None when the
            input was empty or another turn is in flight
        """
        if not current_input or not current_input.strip():
            return None
        if self.in_flight:
            logger.warning("Turn rejected: another turn is in flight")
            return None

        self._set_state(TurnState.SUBMITTING)
        try:
            self.set_input("")
            self._pending_image = None
            self._append(Message(role="user", content=current_input))

            try:
                result = await self._relay.send_turn(list(self._history), attached_image)
            except Exception as e:
                logger.error("Turn failed: %s", e)
                reply = Message(
                    role="assistant",
                    content=f"Error: {str(e) or type(e).__name__}",
                    error=True,
                )
                spoken = ERROR_APOLOGY
            else:
                self._last_result = result
                reply = Message(role="assistant", content=result.content or EMPTY_REPLY_FALLBACK)
                spoken = reply.content

            self._append(reply)
            self.speak(spoken)
            return reply
        finally:
            self._set_state(TurnState.IDLE)

    # ------------------------------------------------------------------
    # Speech
    # ------------------------------------------------------------------

    async def toggle_voice(self) -> Message | None:
        """Start or stop voice capture.

        Starting clears the previous transcript. Stopping with a non-empty
        finalized transcript submits it as a turn; if a turn is already in
        flight the transcript is kept as pending input instead.

        Returns:
            The assistant message when stopping submitted a turn, else None
        """
        if not self._capture.is_listening:
            self._capture.reset()
            self._capture.start(self._mirror_transcript)
            return None

        transcript = self._capture.stop()
        if not transcript.strip():
            return None
        if self.in_flight:
            self.set_input(transcript)
            return None
        return await self.submit_turn(transcript, self._pending_image)

    def speak(self, text: str) -> None:
        """Speak text, cancelling the current utterance first."""
        try:
            self._output.cancel()
            self._output.speak(text)
        except Exception as e:
            logger.warning("Speech output failed: %s", e)

    def close(self) -> None:
        """Stop capture and silence output."""
        if self._capture.is_listening:
            self._capture.stop()
        self._output.cancel()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _mirror_transcript(self, transcript: str) -> None:
        if self._capture.is_listening:
            self.set_input(transcript)

    def _append(self, message: Message) -> None:
        self._history.append(message)
        self._notify(self._on_history_change, self.history)

    def _set_state(self, state: TurnState) -> None:
        self._state = state
        self._notify(self._on_state_change, state)

    @staticmethod
    def _notify(callback: Callable | None, value: object) -> None:
        # A failing view must not break the append-only transcript
        if callback is None:
            return
        try:
            callback(value)
        except Exception:
            logger.exception("View callback failed")
