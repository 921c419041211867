"""
QueryBot: a voice-capable chat assistant.

A conversation controller owns the transcript and relays each turn to a
completion relay service, which forwards it to a hosted LLM provider.
Each subpackage hides a single design decision.
"""

__version__ = "0.1.0"

from .conversation import ConversationController, Message
from .relay import CompletionRelay, create_app

__all__ = [
    "CompletionRelay",
    "ConversationController",
    "Message",
    "create_app",
]
