"""Unit tests for the speech module."""
import threading
import time

import pytest
import speech_recognition as sr

from querybot.speech import (
    NullCapture,
    NullOutput,
    SpeechCapture,
    SpeechOutput,
    create_speech_capture,
    create_speech_output,
)
from querybot.speech import recognizer as recognizer_module
from querybot.speech import synthesizer as synthesizer_module
from querybot.speech.recognizer import MicrophoneCapture
from querybot.speech.synthesizer import Pyttsx3Output


class FakeMicrophone:
    """Stands in for sr.Microphone without touching audio devices."""

    names = ["Built-in Microphone"]

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False

    @classmethod
    def list_microphone_names(cls):
        return cls.names


class FakeRecognizer:
    """Recognizer whose background listener is driven by the test."""

    def __init__(self):
        self.callback = None
        self.adjusted = False
        self.stopped_with: list[bool] = []
        self.listen_kwargs: dict = {}

    def adjust_for_ambient_noise(self, source, duration=1):
        self.adjusted = True

    def listen_in_background(self, source, callback, phrase_time_limit=None):
        self.callback = callback
        self.listen_kwargs = {"phrase_time_limit": phrase_time_limit}

        def stopper(wait_for_stop=True):
            self.stopped_with.append(wait_for_stop)

        return stopper

    def recognize_google(self, audio, language="en-US"):
        if audio == "noise":
            raise sr.UnknownValueError()
        if audio == "offline":
            raise sr.RequestError("recognition connection failed")
        return audio

    def hear(self, audio):
        self.callback(self, audio)


class FakeEngine:
    """pyttsx3 engine whose runAndWait blocks until stop() is called."""

    def __init__(self, log):
        self.log = log
        self.properties: dict = {}
        self.text = None
        self.started = threading.Event()
        self._released = threading.Event()

    def setProperty(self, name, value):
        self.properties[name] = value

    def say(self, text):
        self.text = text
        self.log.append(("say", text))

    def runAndWait(self):
        self.started.set()
        self._released.wait(timeout=5)

    def stop(self):
        self.log.append(("stop", self.text))
        self._released.set()


@pytest.fixture
def fake_recognizer(monkeypatch):
    monkeypatch.setattr(recognizer_module.sr, "Microphone", FakeMicrophone)
    return FakeRecognizer()


@pytest.fixture
def engines(monkeypatch):
    """Patch pyttsx3.init; returns the list of engines created."""
    log: list[tuple[str, str]] = []
    created: list[FakeEngine] = []

    def fake_init():
        engine = FakeEngine(log)
        created.append(engine)
        return engine

    monkeypatch.setattr(synthesizer_module.pyttsx3, "init", fake_init)
    return created, log


class TestSpeechFactory:
    """Tests for the speech factory functions."""

    def test_none_backends(self):
        assert isinstance(create_speech_capture("none"), NullCapture)
        assert isinstance(create_speech_output("none"), NullOutput)

    def test_system_backends(self, fake_recognizer):
        capture = create_speech_capture("system", recognizer=fake_recognizer)
        output = create_speech_output("system", rate=1.5)

        assert isinstance(capture, MicrophoneCapture)
        assert isinstance(output, Pyttsx3Output)
        assert output.rate == 1.5

    def test_unsupported_backend_raises_error(self):
        with pytest.raises(ValueError, match="Unsupported speech capture backend"):
            create_speech_capture("whisper")
        with pytest.raises(ValueError, match="Unsupported speech output backend"):
            create_speech_output("polly")

    def test_interfaces_are_abstract(self):
        with pytest.raises(TypeError):
            SpeechCapture()  # type: ignore
        with pytest.raises(TypeError):
            SpeechOutput()  # type: ignore


class TestNullSpeech:
    def test_null_capture(self):
        capture = NullCapture()
        capture.start(lambda text: None)

        assert not capture.available
        assert not capture.is_listening
        assert capture.stop() == ""

    def test_null_output(self):
        output = NullOutput()
        output.speak("hello")
        output.cancel()
        assert not output.is_speaking


class TestMicrophoneCapture:
    """Tests for MicrophoneCapture with a fake recognizer."""

    def test_available_with_devices(self, fake_recognizer):
        assert MicrophoneCapture(recognizer=fake_recognizer).available

    def test_unavailable_without_devices(self, fake_recognizer, monkeypatch):
        monkeypatch.setattr(FakeMicrophone, "names", [])
        assert not MicrophoneCapture(recognizer=fake_recognizer).available

    def test_unavailable_without_pyaudio(self, fake_recognizer, monkeypatch):
        def missing():
            raise AttributeError("Could not find PyAudio; check installation")

        monkeypatch.setattr(FakeMicrophone, "list_microphone_names", staticmethod(missing))
        assert not MicrophoneCapture(recognizer=fake_recognizer).available

    def test_phrases_accumulate_into_transcript(self, fake_recognizer):
        seen: list[str] = []
        capture = MicrophoneCapture(recognizer=fake_recognizer, phrase_time_limit=8)

        capture.start(seen.append)
        fake_recognizer.hear("what is")
        fake_recognizer.hear("noise")
        fake_recognizer.hear("the capital of France")

        assert capture.is_listening
        assert fake_recognizer.adjusted
        assert fake_recognizer.listen_kwargs == {"phrase_time_limit": 8}
        assert seen == ["what is", "what is the capital of France"]

    def test_request_error_is_skipped(self, fake_recognizer):
        seen: list[str] = []
        capture = MicrophoneCapture(recognizer=fake_recognizer)

        capture.start(seen.append)
        fake_recognizer.hear("offline")

        assert seen == []
        assert capture.transcript == ""

    def test_stop_returns_final_transcript(self, fake_recognizer):
        capture = MicrophoneCapture(recognizer=fake_recognizer)
        capture.start(lambda text: None)
        fake_recognizer.hear("hello there")

        transcript = capture.stop()

        assert transcript == "hello there"
        assert not capture.is_listening
        assert fake_recognizer.stopped_with == [True]

    def test_reset_clears_transcript(self, fake_recognizer):
        capture = MicrophoneCapture(recognizer=fake_recognizer)
        capture.start(lambda text: None)
        fake_recognizer.hear("old words")
        capture.stop()

        capture.reset()

        assert capture.stop() == ""

    def test_start_twice_keeps_one_session(self, fake_recognizer):
        capture = MicrophoneCapture(recognizer=fake_recognizer)
        capture.start(lambda text: None)
        first_callback = fake_recognizer.callback

        capture.start(lambda text: None)

        assert fake_recognizer.callback is first_callback


class TestPyttsx3Output:
    """Tests for Pyttsx3Output with a fake engine."""

    def test_speak_sets_rate(self, engines):
        created, log = engines
        output = Pyttsx3Output(rate=1.5)

        output.speak("Paris")
        assert _wait_for(lambda: created and created[0].started.is_set())

        assert log == [("say", "Paris")]
        assert created[0].properties["rate"] == 300
        assert output.is_speaking
        output.cancel()

    def test_new_utterance_cancels_previous(self, engines):
        created, log = engines
        output = Pyttsx3Output()

        output.speak("first answer")
        assert _wait_for(lambda: created and created[0].started.is_set())
        output.speak("second answer")
        assert _wait_for(lambda: len(created) == 2 and created[1].started.is_set())

        assert log == [
            ("say", "first answer"),
            ("stop", "first answer"),
            ("say", "second answer"),
        ]
        output.cancel()
        assert not output.is_speaking

    def test_slow_superseded_utterance_keeps_newer_engine(self, monkeypatch):
        """An utterance abandoned during engine start-up never silences its successor."""
        log: list[tuple[str, str]] = []
        created: list[FakeEngine] = []

        def slow_first_init():
            if not created:
                created.append(None)
                time.sleep(0.3)
            engine = FakeEngine(log)
            created.append(engine)
            return engine

        monkeypatch.setattr(synthesizer_module.pyttsx3, "init", slow_first_init)
        output = Pyttsx3Output(cancel_timeout=0.05)

        output.speak("first")
        assert _wait_for(lambda: created)
        output.speak("second")
        assert _wait_for(lambda: len(created) >= 2 and created[1].started.is_set())
        time.sleep(0.5)
        output.speak("third")
        assert _wait_for(lambda: created[-1].text == "third" and created[-1].started.is_set())

        assert log == [
            ("say", "second"),
            ("stop", "second"),
            ("say", "third"),
        ]
        output.cancel()

    def test_blank_text_only_cancels(self, engines):
        created, _ = engines
        output = Pyttsx3Output()

        output.speak("   ")

        assert created == []
        assert not output.is_speaking

    def test_cancel_when_idle(self, engines):
        Pyttsx3Output().cancel()

    def test_engine_failure_is_logged(self, monkeypatch, caplog):
        def broken_init():
            raise RuntimeError("no speech driver")

        monkeypatch.setattr(synthesizer_module.pyttsx3, "init", broken_init)
        output = Pyttsx3Output()

        output.speak("hello")
        assert _wait_for(lambda: not output.is_speaking)

        assert "no speech driver" in caplog.text


def _wait_for(condition, timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(0.01)
    return bool(condition())
