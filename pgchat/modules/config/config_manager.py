"""
Configuration for the chat history store using Pydantic settings.

Values come from environment variables (optionally loaded from a .env file).
A complete ``CHAT_HISTORY_DB_URL`` wins; otherwise the PostgreSQL URL is
assembled from the individual ``PG_*`` parts.
"""

import logging
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL

from pgchat.domain.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_NAME = "public"
DEFAULT_TABLE_NAME = "message_store"
DEFAULT_DRIVERNAME = "postgresql+psycopg2"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ChatHistorySettings(BaseSettings):
    """Chat history settings loaded from environment variables."""

    # Database location
    chat_history_db_url: Optional[str] = Field(
        default=None,
        description="Full database URL. Takes priority over the PG_* parts when set.",
        validation_alias="CHAT_HISTORY_DB_URL",
    )
    pg_host: str = Field("localhost", validation_alias="PG_HOST")
    pg_port: int = Field(5432, validation_alias="PG_PORT")
    pg_user: str = Field("postgres", validation_alias="PG_USER")
    pg_password: str = Field("", validation_alias="PG_PASSWORD")
    pg_database: str = Field(
        "postgres",
        validation_alias=AliasChoices("PG_DATABASE", "PG_DB"),
    )

    # Table location
    chat_history_schema: str = Field(DEFAULT_SCHEMA_NAME, validation_alias="CHAT_HISTORY_SCHEMA")
    chat_history_table: str = Field(DEFAULT_TABLE_NAME, validation_alias="CHAT_HISTORY_TABLE")

    # Connection pool
    db_pool_size: int = Field(5, validation_alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(10, validation_alias="DB_MAX_OVERFLOW")
    db_pool_timeout: int = Field(30, validation_alias="DB_POOL_TIMEOUT")  # seconds to wait for a pooled connection
    db_connect_timeout: int = Field(10, validation_alias="DB_CONNECT_TIMEOUT")

    # Logging settings
    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}")
        return level

    @field_validator("chat_history_schema", "chat_history_table")
    @classmethod
    def validate_identifier(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("schema and table names must not be empty")
        return v.strip()

    def database_url(self) -> str:
        """Return the database URL, building one from the PG_* parts if needed."""
        if self.chat_history_db_url:
            return self.chat_history_db_url
        if not self.pg_host or not self.pg_database:
            raise ConfigurationError(
                "Either CHAT_HISTORY_DB_URL or PG_HOST and PG_DATABASE must be set"
            )
        url = URL.create(
            drivername=DEFAULT_DRIVERNAME,
            username=self.pg_user or None,
            password=self.pg_password or None,
            host=self.pg_host,
            port=self.pg_port,
            database=self.pg_database,
        )
        return url.render_as_string(hide_password=False)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "populate_by_name": True,
    }


_settings: Optional[ChatHistorySettings] = None


def get_settings() -> ChatHistorySettings:
    """Get or create the process-wide settings."""
    global _settings
    if _settings is None:
        _settings = ChatHistorySettings()
        logger.debug(
            "Chat history settings loaded (schema=%s, table=%s)",
            _settings.chat_history_schema,
            _settings.chat_history_table,
        )
    return _settings


def reset_settings() -> None:
    """Drop the cached settings (for testing and after env changes)."""
    global _settings
    _settings = None
