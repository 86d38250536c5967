"""Chat message history persistence using SQLAlchemy with PostgreSQL."""

from .chat_message_history import ChatMessageHistory
from .database import check_connection, create_chat_history_engine, get_engine, reset_engine
from .schema import (
    REQUIRED_COLUMNS,
    chat_history_table,
    init_chat_history_table,
    validate_chat_history_table,
)

__all__ = [
    "ChatMessageHistory",
    "check_connection",
    "create_chat_history_engine",
    "get_engine",
    "reset_engine",
    "REQUIRED_COLUMNS",
    "chat_history_table",
    "init_chat_history_table",
    "validate_chat_history_table",
]
