"""Completion relay module for querybot.

Receives an assembled turn, injects the provider credential, calls the
completion provider and normalizes the outcome into a fixed result shape.
"""

from .app import create_app
from .models import RelayReply, TurnFailure, TurnSuccess, parse_turn_messages
from .service import CompletionRelay

__all__ = [
    "CompletionRelay",
    "RelayReply",
    "TurnFailure",
    "TurnSuccess",
    "create_app",
    "parse_turn_messages",
]
