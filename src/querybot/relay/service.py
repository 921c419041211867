"""Stateless completion relay.

Hidden design decisions:
- Where the provider credential comes from and when it is checked
- Which provider, model, temperature and timeout answer a turn
- How provider outcomes map onto the fixed result shape and status codes
"""

import asyncio
import logging
from collections.abc import Callable

from ..config import (
    CONFIGURATION_ERROR,
    CONFIGURATION_ERROR_DETAILS,
    DEFAULT_MODEL,
    DEFAULT_TEMPERATURE,
    NO_RESPONSE_PLACEHOLDER,
    PROVIDER_FAILURE_ERROR,
    REQUEST_TIMEOUT_SECONDS,
    STATUS_CONFIGURATION_ERROR,
    STATUS_PROVIDER_FAILURE,
    get_api_key,
)
from ..llm import LLMProvider, LLMResponse, create_llm_provider
from .models import RelayReply, TurnFailure, TurnSuccess, parse_turn_messages

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[str], LLMProvider]


def groq_provider_factory(api_key: str) -> LLMProvider:
    """Create the default Groq provider for a single relay call."""
    return create_llm_provider("groq", api_key=api_key)


class CompletionRelay:
    """Relays one conversation turn to the completion provider per call.

    Holds no per-turn state: no retries, no caching. The credential is read
    on every call so a misconfigured server reports it on each attempt.

    Example:
        relay = CompletionRelay()
        reply = await relay.handle('[{"role": "user", "content": "Hi"}]')
        reply.status_code, reply.body
    """

    def __init__(
        self,
        provider_factory: ProviderFactory = groq_provider_factory,
        credential_loader: Callable[[], str | None] = get_api_key,
        model: str = DEFAULT_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        self._provider_factory = provider_factory
        self._credential_loader = credential_loader
        self._model = model
        self._temperature = temperature
        self._timeout = timeout

    @property
    def model(self) -> str:
        return self._model

    @property
    def timeout(self) -> float:
        return self._timeout

    def is_configured(self) -> bool:
        """Whether a provider credential is currently available."""
        return bool(self._credential_loader())

    async def handle(
        self,
        messages_payload: str | None,
        image: bytes | None = None,
    ) -> RelayReply:
        """Process one turn request.

        Args:
            messages_payload: JSON array of {role, content} objects
            image: Optional image bytes (buffered, not forwarded to the model)

        Returns:
            RelayReply with status 200 on success, 500 when the credential
            is missing, 502 when parsing or the provider call fails
        """
        api_key = self._credential_loader()
        if not api_key:
            logger.error("Provider credential is not configured")
            return RelayReply(
                status_code=STATUS_CONFIGURATION_ERROR,
                result=TurnFailure(
                    error=CONFIGURATION_ERROR,
                    details=CONFIGURATION_ERROR_DETAILS,
                ),
            )

        try:
            response = await self._complete(api_key, messages_payload, image)
        except Exception as e:
            details = self._describe_failure(e)
            logger.error("Provider call failed: %s", details)
            return RelayReply(
                status_code=STATUS_PROVIDER_FAILURE,
                result=TurnFailure(error=PROVIDER_FAILURE_ERROR, details=details),
            )

        return RelayReply(
            status_code=200,
            result=TurnSuccess(
                content=response.content or NO_RESPONSE_PLACEHOLDER,
                tokens_used=response.total_tokens,
                model=response.model,
            ),
        )

    async def _complete(
        self,
        api_key: str,
        messages_payload: str | None,
        image: bytes | None,
    ) -> LLMResponse:
        messages = parse_turn_messages(messages_payload)

        if image is not None:
            # Buffered only; no vision-capable model is wired in yet
            logger.info("Received image attachment (%d bytes), not forwarded", len(image))

        provider = self._provider_factory(api_key)
        async with provider:
            return await asyncio.wait_for(
                provider.chat_completion(
                    list(messages),
                    model=self._model,
                    temperature=self._temperature,
                    timeout=self._timeout,
                ),
                timeout=self._timeout,
            )

    def _describe_failure(self, error: Exception) -> str:
        if isinstance(error, asyncio.TimeoutError):
            return f"Request timed out after {self._timeout:g} seconds"
        return str(error) or type(error).__name__
