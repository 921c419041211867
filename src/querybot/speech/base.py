"""Abstract interfaces for speech capture and speech output.

The abstraction hides:
- Which recognition and synthesis engines are used
- Threading of the audio loops
- Device discovery
"""

from abc import ABC, abstractmethod
from collections.abc import Callable

TranscriptCallback = Callable[[str], None]


class SpeechCapture(ABC):
    """Continuous speech-to-text capture.

    At most one capture session is active; callers stop before starting again.
    """

    @abstractmethod
    def start(self, on_transcript: TranscriptCallback) -> None:
        """Begin continuous recognition.

        Args:
            on_transcript: Called with the full transcript so far whenever it changes.
                May be invoked from a background thread.
        """

    @abstractmethod
    def stop(self) -> str:
        """Stop recognition and return the finalized transcript."""

    @abstractmethod
    def reset(self) -> None:
        """Discard the transcript buffer."""

    @property
    @abstractmethod
    def is_listening(self) -> bool:
        """Whether a capture session is active."""

    @property
    def available(self) -> bool:
        """Whether the platform supports capture."""
        return True


class SpeechOutput(ABC):
    """Text-to-speech output with at most one audible utterance."""

    @abstractmethod
    def speak(self, text: str) -> None:
        """Speak text, cancelling any utterance in progress first."""

    @abstractmethod
    def cancel(self) -> None:
        """Stop the current utterance, if any."""

    @property
    @abstractmethod
    def is_speaking(self) -> bool:
        """Whether an utterance is currently playing."""
