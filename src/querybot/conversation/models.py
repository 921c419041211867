"""Data models for the conversation transcript.

Hides the internal representation of transcript messages and attachments.
"""

import mimetypes
from datetime import datetime
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class Message(BaseModel):
    """A transcript message. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str
    error: bool = Field(default=False, description="Assistant message describing a failed turn")
    timestamp: datetime = Field(default_factory=datetime.now)

    def to_wire(self) -> dict[str, str]:
        """Role/content pair as sent to the relay."""
        return {"role": self.role, "content": self.content}


class ImageAttachment(BaseModel):
    """An image attached to the next turn."""

    model_config = ConfigDict(frozen=True)

    filename: str
    content: bytes = Field(repr=False)
    content_type: str = "application/octet-stream"

    @classmethod
    def from_path(cls, path: str | Path) -> "ImageAttachment":
        """Load an attachment from disk.

        Raises:
            FileNotFoundError: If the path does not exist
            ValueError: If the file is not an image
        """
        file_path = Path(path).expanduser()
        content_type, _ = mimetypes.guess_type(file_path.name)
        if content_type is None or not content_type.startswith("image/"):
            raise ValueError(f"Not an image file: {file_path.name}")
        return cls(
            filename=file_path.name,
            content=file_path.read_bytes(),
            content_type=content_type,
        )
