"""Tests for chat history settings."""

import pytest
from pydantic import ValidationError

from pgchat.modules.config.config_manager import (
    DEFAULT_SCHEMA_NAME,
    DEFAULT_TABLE_NAME,
    ChatHistorySettings,
    get_settings,
    reset_settings,
)


def test_defaults():
    settings = ChatHistorySettings(_env_file=None)
    assert settings.chat_history_db_url is None
    assert settings.chat_history_schema == DEFAULT_SCHEMA_NAME == "public"
    assert settings.chat_history_table == DEFAULT_TABLE_NAME
    assert settings.db_pool_size == 5
    assert settings.db_max_overflow == 10
    assert settings.log_level == "INFO"


def test_explicit_url_wins(monkeypatch):
    monkeypatch.setenv("CHAT_HISTORY_DB_URL", "postgresql://a:b@host/db")
    monkeypatch.setenv("PG_HOST", "ignored")
    settings = ChatHistorySettings(_env_file=None)
    assert settings.database_url() == "postgresql://a:b@host/db"


def test_url_from_env_parts(monkeypatch):
    monkeypatch.setenv("PG_HOST", "alloydb.internal")
    monkeypatch.setenv("PG_PORT", "6432")
    monkeypatch.setenv("PG_USER", "chat")
    monkeypatch.setenv("PG_PASSWORD", "pw")
    monkeypatch.setenv("PG_DB", "conversations")
    settings = ChatHistorySettings(_env_file=None)
    assert settings.database_url() == "postgresql+psycopg2://chat:pw@alloydb.internal:6432/conversations"


def test_env_file_is_read(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("CHAT_HISTORY_TABLE=turns\nCHAT_HISTORY_SCHEMA=cmh\nLOG_LEVEL=debug\n")
    settings = ChatHistorySettings(_env_file=str(env_file))
    assert settings.chat_history_table == "turns"
    assert settings.chat_history_schema == "cmh"
    assert settings.log_level == "DEBUG"


def test_invalid_log_level(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "chatty")
    with pytest.raises(ValidationError):
        ChatHistorySettings(_env_file=None)


def test_blank_table_name_rejected(monkeypatch):
    monkeypatch.setenv("CHAT_HISTORY_TABLE", "  ")
    with pytest.raises(ValidationError):
        ChatHistorySettings(_env_file=None)


def test_get_settings_is_cached(monkeypatch):
    first = get_settings()
    monkeypatch.setenv("CHAT_HISTORY_TABLE", "changed")
    assert get_settings() is first
    reset_settings()
    assert get_settings().chat_history_table == "changed"
