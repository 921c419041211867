"""Factory for creating speech capture and output backends."""

from typing import Any

from .base import SpeechCapture, SpeechOutput


def create_speech_capture(backend: str = "system", **kwargs: Any) -> SpeechCapture:
    """Create a speech capture backend.

    Args:
        backend: Backend type ("system" for the microphone or "none")
        **kwargs: Backend-specific configuration

    Returns:
        SpeechCapture instance

    Raises:
        ValueError: If backend type is not supported
    """
    if backend == "system":
        from .recognizer import MicrophoneCapture
        return MicrophoneCapture(**kwargs)

    elif backend == "none":
        from .null import NullCapture
        return NullCapture()

    raise ValueError(
        f"Unsupported speech capture backend: {backend}. "
        f"Supported backends: system, none"
    )


def create_speech_output(backend: str = "system", **kwargs: Any) -> SpeechOutput:
    """Create a speech output backend.

    Args:
        backend: Backend type ("system" for pyttsx3 or "none")
        **kwargs: Backend-specific configuration

    Returns:
        SpeechOutput instance

    Raises:
        ValueError: If backend type is not supported
    """
    if backend == "system":
        from .synthesizer import Pyttsx3Output
        return Pyttsx3Output(**kwargs)

    elif backend == "none":
        from .null import NullOutput
        return NullOutput()

    raise ValueError(
        f"Unsupported speech output backend: {backend}. "
        f"Supported backends: system, none"
    )
