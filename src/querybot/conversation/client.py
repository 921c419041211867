"""HTTP client for the completion relay.

Hidden design decisions:
- Multipart encoding of a turn
- Extraction of a readable failure message from error responses
"""

import json
import logging
from collections.abc import Sequence

import httpx

from ..config import (
    CHAT_ENDPOINT,
    DEFAULT_RELAY_URL,
    HEALTH_ENDPOINT,
    PROVIDER_FAILURE_ERROR,
    REQUEST_TIMEOUT_SECONDS,
    SERVER_ERROR_TEXT,
)
from ..relay.models import TurnSuccess
from .models import ImageAttachment, Message

logger = logging.getLogger(__name__)


class TurnError(Exception):
    """A turn that reached the relay but did not produce a completion."""


def _error_text(response: httpx.Response) -> str:
    """Readable failure message from a non-2xx relay response."""
    text = response.text
    if "<!DOCTYPE" in text or "<html" in text.lower():
        return SERVER_ERROR_TEXT
    try:
        data = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return text or f"HTTP {response.status_code}"
    if isinstance(data, dict):
        return str(data.get("details") or data.get("error") or text)
    return text


class RelayClient:
    """Sends conversation turns to the relay's chat endpoint.

    Example:
        async with RelayClient("http://127.0.0.1:8000") as client:
            result = await client.send_turn(history)
    """

    def __init__(
        self,
        base_url: str = DEFAULT_RELAY_URL,
        timeout: float = REQUEST_TIMEOUT_SECONDS + 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
        )

    async def send_turn(
        self,
        history: Sequence[Message],
        image: ImageAttachment | None = None,
    ) -> TurnSuccess:
        """Send the history (ending with the new user message) and optional image.

        Returns:
            The successful turn result

        Raises:
            TurnError: If the relay reports a failure
            httpx.HTTPError: If the relay cannot be reached
        """
        # A part without filename is a plain form field; this keeps the
        # request multipart even when no image is attached
        parts: list[tuple[str, tuple]] = [
            ("messages", (None, json.dumps([msg.to_wire() for msg in history]))),
        ]
        if image is not None:
            parts.append(("image", (image.filename, image.content, image.content_type)))

        response = await self._client.post(CHAT_ENDPOINT, files=parts)

        if not response.is_success:
            raise TurnError(_error_text(response))

        payload = response.json()
        if not payload.get("success"):
            raise TurnError(payload.get("error") or PROVIDER_FAILURE_ERROR)

        return TurnSuccess.model_validate(payload)

    async def health(self) -> dict:
        """Fetch the relay health report."""
        response = await self._client.get(HEALTH_ENDPOINT)
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "RelayClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
