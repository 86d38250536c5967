"""Domain models for messages."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class ChatMessageType(Enum):
    """Role tag stored in the ``type`` column."""
    HUMAN = "human"
    AI = "ai"
    SYSTEM = "system"

    @classmethod
    def parse(cls, value: Any) -> Optional["ChatMessageType"]:
        """Return the matching member, or None for anything outside the set."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass
class ChatMessage:
    """Domain model for a single chat turn."""
    content: str = ""
    type: ChatMessageType = ChatMessageType.HUMAN

    def __post_init__(self):
        if not isinstance(self.type, ChatMessageType):
            parsed = ChatMessageType.parse(self.type)
            if parsed is None:
                raise ValueError(f"Unknown chat message type: {self.type!r}")
            self.type = parsed

    @classmethod
    def human(cls, content: str) -> "ChatMessage":
        return cls(content=content, type=ChatMessageType.HUMAN)

    @classmethod
    def ai(cls, content: str) -> "ChatMessage":
        return cls(content=content, type=ChatMessageType.AI)

    @classmethod
    def system(cls, content: str) -> "ChatMessage":
        return cls(content=content, type=ChatMessageType.SYSTEM)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "type": self.type.value,
            "content": self.content,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChatMessage":
        """Create from dictionary."""
        return cls(
            content=data.get("content", ""),
            type=ChatMessageType(data.get("type", ChatMessageType.HUMAN.value)),
        )
