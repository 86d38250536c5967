"""
pgchat - chat message history stored in PostgreSQL (AlloyDB, Cloud SQL).

Example usage:
    from pgchat import ChatMessageHistory, ChatMessage, get_engine

    history = ChatMessageHistory(get_engine(), "message_store", "session-1", create_table=True)
    history.add_user_message("Hello")
    history.add_ai_message("Hi! How can I help?")
    print(history.messages)

CLI tool (after pip install):
    pgchat-history --session-id session-1 list
"""

from pgchat.version import VERSION

__version__ = VERSION
__all__ = [
    "ChatMessage",
    "ChatMessageHistory",
    "ChatMessageType",
    "get_engine",
    "VERSION",
    "__version__",
]


def __getattr__(name: str):
    """Lazy import to avoid creating database machinery at package import time."""
    if name == "ChatMessageHistory":
        from pgchat.modules.chat_history import ChatMessageHistory
        globals()["ChatMessageHistory"] = ChatMessageHistory
        return ChatMessageHistory
    if name == "get_engine":
        from pgchat.modules.chat_history import get_engine
        globals()["get_engine"] = get_engine
        return get_engine
    if name in ("ChatMessage", "ChatMessageType"):
        from pgchat.domain import messages
        value = getattr(messages, name)
        globals()[name] = value
        return value
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
