"""Microphone speech capture backed by the SpeechRecognition library.

Hidden design decisions:
- Background listening thread and phrase segmentation
- Which recognition service transcribes each phrase
- How phrases are joined into one transcript
"""

import logging
import threading
from typing import Any

import speech_recognition as sr

from ..config import RECOGNITION_LANGUAGE
from .base import SpeechCapture, TranscriptCallback

logger = logging.getLogger(__name__)


class MicrophoneCapture(SpeechCapture):
    """Continuous capture from the default microphone.

    Each recognized phrase is appended to the transcript buffer and the whole
    buffer is reported to the callback, so the caller always sees the live
    transcript rather than single phrases.
    """

    def __init__(
        self,
        language: str = RECOGNITION_LANGUAGE,
        phrase_time_limit: float | None = None,
        recognizer: Any | None = None,
    ) -> None:
        self._language = language
        self._phrase_time_limit = phrase_time_limit
        self._recognizer = recognizer or sr.Recognizer()
        self._lock = threading.Lock()
        self._phrases: list[str] = []
        self._stopper: Any | None = None
        self._on_transcript: TranscriptCallback | None = None

    @property
    def available(self) -> bool:
        """Microphone access needs PyAudio and at least one input device."""
        try:
            return bool(sr.Microphone.list_microphone_names())
        except (AttributeError, OSError):
            return False

    @property
    def is_listening(self) -> bool:
        return self._stopper is not None

    @property
    def transcript(self) -> str:
        with self._lock:
            return " ".join(self._phrases)

    def start(self, on_transcript: TranscriptCallback) -> None:
        if self._stopper is not None:
            return
        self._on_transcript = on_transcript
        microphone = sr.Microphone()
        with microphone as source:
            self._recognizer.adjust_for_ambient_noise(source, duration=0.5)
        self._stopper = self._recognizer.listen_in_background(
            microphone,
            self._handle_audio,
            phrase_time_limit=self._phrase_time_limit,
        )
        logger.debug("Speech capture started (%s)", self._language)

    def stop(self) -> str:
        if self._stopper is not None:
            # Joins the listener thread, so pending phrases are in the buffer
            self._stopper(wait_for_stop=True)
            self._stopper = None
            logger.debug("Speech capture stopped")
        self._on_transcript = None
        return self.transcript

    def reset(self) -> None:
        with self._lock:
            self._phrases.clear()

    def _handle_audio(self, recognizer: Any, audio: Any) -> None:
        """Transcribe one phrase (runs on the listener thread)."""
        try:
            phrase = recognizer.recognize_google(audio, language=self._language)
        except sr.UnknownValueError:
            return
        except sr.RequestError as e:
            logger.warning("Speech recognition request failed: %s", e)
            return

        phrase = phrase.strip()
        if not phrase:
            return
        with self._lock:
            self._phrases.append(phrase)
            transcript = " ".join(self._phrases)

        callback = self._on_transcript
        if callback is not None:
            callback(transcript)
