"""Factory functions for CLI.

Centralizes creation of speech backends and logging setup.
Hides configuration details from command implementations.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

from ..speech import (
    NullCapture,
    NullOutput,
    SpeechCapture,
    SpeechOutput,
    create_speech_capture,
    create_speech_output,
)

# Default console for output
_console = Console()


def configure_logging(level: str = "warning", console: Console | None = None) -> None:
    """Route library logging through Rich.

    Args:
        level: Log level name (debug, info, warning, error)
        console: Optional Rich console for output
    """
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console or _console, rich_tracebacks=True)],
        force=True,
    )


def get_capture(enabled: bool, console: Console | None = None) -> SpeechCapture:
    """Create the microphone capture, or a disabled one.

    Falls back to a disabled capture when the speech libraries or a
    microphone are unavailable.
    """
    con = console or _console
    if not enabled:
        return NullCapture()
    try:
        capture = create_speech_capture("system")
    except (ImportError, OSError) as e:
        con.print(f"[yellow]Warning: speech recognition unavailable ({e})[/yellow]")
        return NullCapture()
    if not capture.available:
        con.print("[yellow]Warning: no microphone found, voice input disabled[/yellow]")
        return NullCapture()
    return capture


def get_output(enabled: bool, console: Console | None = None) -> SpeechOutput:
    """Create the speech output, or a silent one."""
    con = console or _console
    if not enabled:
        return NullOutput()
    try:
        return create_speech_output("system")
    except (ImportError, OSError) as e:
        con.print(f"[yellow]Warning: speech output unavailable ({e})[/yellow]")
        return NullOutput()
