"""No-op speech implementations for terminals without audio."""

from .base import SpeechCapture, SpeechOutput, TranscriptCallback


class NullCapture(SpeechCapture):
    """Capture that is never available and never hears anything."""

    def start(self, on_transcript: TranscriptCallback) -> None:
        pass

    def stop(self) -> str:
        return ""

    def reset(self) -> None:
        pass

    @property
    def is_listening(self) -> bool:
        return False

    @property
    def available(self) -> bool:
        return False


class NullOutput(SpeechOutput):
    """Silent output."""

    def speak(self, text: str) -> None:
        pass

    def cancel(self) -> None:
        pass

    @property
    def is_speaking(self) -> bool:
        return False
