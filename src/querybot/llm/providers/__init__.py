from .groq import GroqProvider
from .openai import OpenAIProvider

__all__ = ["GroqProvider", "OpenAIProvider"]
