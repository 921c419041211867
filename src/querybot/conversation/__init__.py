"""Conversation module for querybot.

Owns the visible transcript and the single-flight turn pipeline.

Module structure:
- models.py: Transcript message and image attachment
- client.py: How a turn reaches the relay (multipart over HTTP)
- controller.py: Turn orchestration, input merging and speech wiring
"""

from .client import RelayClient, TurnError
from .controller import ConversationController, TurnState
from .models import ImageAttachment, Message

__all__ = [
    "ConversationController",
    "ImageAttachment",
    "Message",
    "RelayClient",
    "TurnError",
    "TurnState",
]
