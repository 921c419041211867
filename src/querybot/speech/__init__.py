"""Speech capability module for querybot.

Speech-to-text capture and text-to-speech output behind small interfaces,
so the conversation pipeline runs without an audio stack.
"""

from .base import SpeechCapture, SpeechOutput, TranscriptCallback
from .factory import create_speech_capture, create_speech_output
from .null import NullCapture, NullOutput

__all__ = [
    "NullCapture",
    "NullOutput",
    "SpeechCapture",
    "SpeechOutput",
    "TranscriptCallback",
    "create_speech_capture",
    "create_speech_output",
]
