"""Data models for the relay boundary.

These models define the wire shape of a turn result, shared by the relay
that produces it and the client that consumes it.
"""

from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from ..llm import ChatMessage


class TurnMessage(ChatMessage):
    """A transcript message as accepted by the relay (no system role)."""

    role: Literal["user", "assistant"]


_TURN_MESSAGES = TypeAdapter(list[TurnMessage])


def parse_turn_messages(payload: str | None) -> list[TurnMessage]:
    """Parse the serialized message sequence of a turn request.

    Raises:
        ValueError: If the payload is missing, is not JSON, or has the wrong shape
    """
    if payload is None:
        raise ValueError("Missing 'messages' field")
    return _TURN_MESSAGES.validate_json(payload)


class TurnSuccess(BaseModel):
    """Successful turn result."""

    model_config = ConfigDict(frozen=True)

    success: Literal[True] = True
    content: str
    tokens_used: int = Field(default=0, ge=0)
    model: str


class TurnFailure(BaseModel):
    """Failed turn result."""

    model_config = ConfigDict(frozen=True)

    success: Literal[False] = False
    error: str
    details: str


@dataclass(frozen=True)
class RelayReply:
    """HTTP status code paired with the turn result body."""

    status_code: int
    result: TurnSuccess | TurnFailure

    @property
    def body(self) -> dict[str, Any]:
        return self.result.model_dump()
