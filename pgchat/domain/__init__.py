"""Domain layer - pure message models and error types."""

from .errors import (
    ChatHistoryError,
    ConfigurationError,
    ConnectionCheckError,
    DomainError,
    MissingColumnError,
    SchemaValidationError,
    TableNotFoundError,
)
from .messages.models import ChatMessage, ChatMessageType

__all__ = [
    # Errors
    "DomainError",
    "ConfigurationError",
    "ChatHistoryError",
    "ConnectionCheckError",
    "SchemaValidationError",
    "TableNotFoundError",
    "MissingColumnError",
    # Messages
    "ChatMessage",
    "ChatMessageType",
]
