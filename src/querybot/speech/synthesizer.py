"""Speech output backed by pyttsx3.

Hidden design decisions:
- Engine initialization and voice properties
- Speaking on a worker thread so callers never block
- Cancel-before-speak so only the newest utterance is audible
"""

import logging
import threading
from typing import Any

import pyttsx3

from ..config import BASE_WORDS_PER_MINUTE, SPEECH_PITCH, SPEECH_RATE
from .base import SpeechOutput

logger = logging.getLogger(__name__)


class Pyttsx3Output(SpeechOutput):
    """Text-to-speech through the platform engine (SAPI5, NSSpeech, eSpeak).

    Args:
        rate: Speaking rate multiplier (1.0 is the engine's normal speed)
        pitch: Requested pitch multiplier. Kept for API parity; the pyttsx3
            drivers expose no pitch property, so it is not applied.
        cancel_timeout: Seconds to wait for a cancelled utterance to stop
    """

    def __init__(
        self,
        rate: float = SPEECH_RATE,
        pitch: float = SPEECH_PITCH,
        cancel_timeout: float = 2.0,
    ) -> None:
        self.rate = rate
        self.pitch = pitch
        self._cancel_timeout = cancel_timeout
        self._lock = threading.Lock()
        self._engine: Any | None = None
        self._thread: threading.Thread | None = None

    @property
    def is_speaking(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def speak(self, text: str) -> None:
        self.cancel()
        if not text.strip():
            return
        with self._lock:
            self._thread = threading.Thread(
                target=self._run, args=(text,), name="querybot-tts", daemon=True
            )
            self._thread.start()

    def cancel(self) -> None:
        with self._lock:
            engine, thread = self._engine, self._thread
            self._thread = None
        if thread is None or not thread.is_alive():
            return
        if engine is not None:
            engine.stop()
        thread.join(timeout=self._cancel_timeout)

    def _run(self, text: str) -> None:
        engine = None
        registered = False
        try:
            engine = pyttsx3.init()
            engine.setProperty("rate", int(BASE_WORDS_PER_MINUTE * self.rate))
            with self._lock:
                if self._thread is not threading.current_thread():
                    return
                self._engine = engine
                registered = True
            engine.say(text)
            engine.runAndWait()
        except (RuntimeError, OSError) as e:
            logger.warning("Speech output failed: %s", e)
        finally:
            # Only the thread that registered the engine clears it
            with self._lock:
                if registered and self._engine is engine:
                    self._engine = None
