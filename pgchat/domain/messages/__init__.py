"""Domain models for messages."""

from .models import ChatMessage, ChatMessageType

__all__ = [
    "ChatMessage",
    "ChatMessageType",
]
