"""Shared fixtures for the chat history tests.

Store, schema and CLI tests run against a temporary on-disk DuckDB database,
which understands the schema, sequence and information_schema statements the
store issues against PostgreSQL.
"""

import pytest

from pgchat.modules.chat_history.database import create_chat_history_engine, reset_engine
from pgchat.modules.config.config_manager import ChatHistorySettings, reset_settings

TEST_SCHEMA = "cmh"
TEST_TABLE = "message_store"

_ENV_VARS = (
    "CHAT_HISTORY_DB_URL",
    "CHAT_HISTORY_SCHEMA",
    "CHAT_HISTORY_TABLE",
    "PG_HOST",
    "PG_PORT",
    "PG_USER",
    "PG_PASSWORD",
    "PG_DATABASE",
    "PG_DB",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_state(monkeypatch):
    """Isolate tests from the caller's environment and cached globals."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    reset_engine()
    yield
    reset_engine()
    reset_settings()


@pytest.fixture
def db_url(tmp_path):
    """Provide a temporary DuckDB database URL."""
    return f"duckdb:///{tmp_path / 'test_chat_history.db'}"


@pytest.fixture
def engine(db_url):
    """A SQLAlchemy engine bound to the temporary DuckDB file."""
    eng = create_chat_history_engine(db_url, ChatHistorySettings(_env_file=None))
    yield eng
    eng.dispose()
