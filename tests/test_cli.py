"""Tests for the console chat command."""
import importlib

import pytest
from typer.testing import CliRunner

from conftest import FakeRelayClient
# ``querybot.cli`` re-exports the Typer ``app``, shadowing the submodule name.
cli_app = importlib.import_module("querybot.cli.app")

runner = CliRunner()


class ContextRelayClient(FakeRelayClient):
    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return None


@pytest.fixture
def chat_relay(monkeypatch):
    relay = ContextRelayClient()
    urls: list[str] = []

    def make_client(url):
        urls.append(url)
        return relay

    monkeypatch.setattr(cli_app, "RelayClient", make_client)
    relay.urls = urls
    return relay


class TestChatCommand:
    """Tests for `querybot chat`."""

    def test_image_option_attaches_to_first_question(self, chat_relay, sample_image):
        result = runner.invoke(
            cli_app.app,
            ["chat", "--image", str(sample_image)],
            input="Describe this\nWhat else?\nq\n",
        )

        assert result.exit_code == 0, result.output
        assert "Attached photo.png" in result.output
        assert "Paris" in result.output
        first, second = chat_relay.calls
        assert first[1].filename == "photo.png"
        assert first[1].content == sample_image.read_bytes()
        assert second[1] is None

    def test_image_command_attaches_mid_session(self, chat_relay, sample_image):
        result = runner.invoke(
            cli_app.app,
            ["chat"],
            input=f"/image {sample_image}\nDescribe this\nquit\n",
        )

        assert result.exit_code == 0, result.output
        assert chat_relay.calls[0][1].filename == "photo.png"

    def test_non_image_option_exits(self, chat_relay, tmp_path):
        notes = tmp_path / "notes.txt"
        notes.write_text("hello")

        result = runner.invoke(cli_app.app, ["chat", "--image", str(notes)], input="q\n")

        assert result.exit_code == 1
        assert "Not an image" in result.output
        assert chat_relay.urls == []

    def test_missing_image_option_exits(self, chat_relay, tmp_path):
        result = runner.invoke(
            cli_app.app, ["chat", "-i", str(tmp_path / "missing.png")], input="q\n"
        )

        assert result.exit_code == 1
        assert chat_relay.calls == []
