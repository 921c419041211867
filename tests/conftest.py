"""Pytest configuration and shared fixtures."""
import asyncio
import logging
import os

import pytest

from querybot.conversation import ImageAttachment, Message
from querybot.llm import ChatMessage, LLMProvider, LLMResponse
from querybot.relay import TurnSuccess
from querybot.speech import SpeechCapture, SpeechOutput


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """Undo global logging changes (e.g. configure_logging) between tests."""
    root = logging.getLogger()
    level, handlers = root.level, root.handlers[:]
    yield
    root.setLevel(level)
    root.handlers[:] = handlers


class FakeProvider(LLMProvider):
    """Provider returning a canned response, raising, or hanging."""

    def __init__(
        self,
        response: LLMResponse | None = None,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self.response = response or LLMResponse(
            content="Paris", model="m1", usage={"total_tokens": 12}
        )
        self.error = error
        self.delay = delay
        self.calls: list[dict] = []
        self.closed = False

    async def chat_completion(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        timeout: float | None = None,
    ) -> LLMResponse:
        self.calls.append({
            "messages": messages,
            "model": model,
            "temperature": temperature,
            "timeout": timeout,
        })
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.response

    async def close(self) -> None:
        self.closed = True


class RecordingFactory:
    """Provider factory that records the credentials it was given."""

    def __init__(self, provider: FakeProvider) -> None:
        self.provider = provider
        self.api_keys: list[str] = []

    def __call__(self, api_key: str) -> FakeProvider:
        self.api_keys.append(api_key)
        return self.provider


class FakeRelayClient:
    """Turn sender returning canned results or raising."""

    def __init__(
        self,
        result: TurnSuccess | None = None,
        error: Exception | None = None,
    ) -> None:
        self.result = result or TurnSuccess(content="Paris", tokens_used=12, model="m1")
        self.error = error
        self.calls: list[tuple[list[Message], ImageAttachment | None]] = []
        self.gate: asyncio.Event | None = None

    async def send_turn(
        self,
        history: list[Message],
        image: ImageAttachment | None = None,
    ) -> TurnSuccess:
        self.calls.append((list(history), image))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.result


class FakeCapture(SpeechCapture):
    """Capture driven by the test: feed() simulates recognized speech."""

    def __init__(self, available: bool = True) -> None:
        self._available = available
        self._listening = False
        self._transcript = ""
        self._callback = None
        self.events: list[str] = []

    def start(self, on_transcript) -> None:
        self.events.append("start")
        self._callback = on_transcript
        self._listening = True

    def stop(self) -> str:
        self.events.append("stop")
        self._listening = False
        self._callback = None
        return self._transcript

    def reset(self) -> None:
        self.events.append("reset")
        self._transcript = ""

    def feed(self, transcript: str) -> None:
        self._transcript = transcript
        if self._callback is not None:
            self._callback(transcript)

    @property
    def is_listening(self) -> bool:
        return self._listening

    @property
    def available(self) -> bool:
        return self._available


class FakeOutput(SpeechOutput):
    """Output recording speak/cancel calls in order."""

    def __init__(self, fail: bool = False) -> None:
        self.events: list[tuple[str, str | None]] = []
        self._speaking: str | None = None
        self.fail = fail

    def speak(self, text: str) -> None:
        if self.fail:
            raise RuntimeError("audio device lost")
        self.events.append(("speak", text))
        self._speaking = text

    def cancel(self) -> None:
        self.events.append(("cancel", None))
        self._speaking = None

    @property
    def is_speaking(self) -> bool:
        return self._speaking is not None

    @property
    def spoken(self) -> list[str]:
        return [text for kind, text in self.events if kind == "speak"]


@pytest.fixture(scope="session")
def api_keys():
    """Return API keys from environment."""
    return {
        "groq": os.getenv("GROQ_API_KEY"),
    }


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def provider_factory(fake_provider):
    return RecordingFactory(fake_provider)


@pytest.fixture
def relay_client():
    return FakeRelayClient()


@pytest.fixture
def capture():
    return FakeCapture()


@pytest.fixture
def output():
    return FakeOutput()


@pytest.fixture
def sample_image(tmp_path):
    """Create a small PNG file and return its path."""
    image_file = tmp_path / "photo.png"
    image_file.write_bytes(b"\x89PNG\r\n\x1a\n" + b"\x00" * 16)
    return image_file
