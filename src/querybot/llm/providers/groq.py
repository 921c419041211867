from typing import Any

from ...config import DEFAULT_MODEL, GROQ_BASE_URL, REQUEST_TIMEOUT_SECONDS
from .openai import OpenAIProvider


class GroqProvider(OpenAIProvider):
    """Groq LLM provider implementation using the OpenAI-compatible API.

    Hidden design decisions:
    - Groq endpoint and default model
    - Everything else is shared with the OpenAI client
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        base_url: str = GROQ_BASE_URL,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        **client_kwargs: Any
    ):
        """Initialize Groq provider.

        Args:
            api_key: Groq API key
            model: Default model to use
            base_url: Groq API base URL
            timeout: Default request timeout in seconds
            **client_kwargs: Additional kwargs for AsyncOpenAI client
        """
        super().__init__(
            api_key=api_key,
            model=model,
            base_url=base_url,
            timeout=timeout,
            **client_kwargs
        )
