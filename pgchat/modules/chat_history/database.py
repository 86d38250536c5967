"""Database engine factory for chat history persistence.

Targets PostgreSQL (AlloyDB, Cloud SQL or self-hosted) via SQLAlchemy.
DuckDB URLs are accepted for local development and tests.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import ArgumentError, SQLAlchemyError

from pgchat.domain.errors import ConfigurationError, ConnectionCheckError
from pgchat.modules.config.config_manager import ChatHistorySettings, get_settings

logger = logging.getLogger(__name__)

_engine: Optional[Engine] = None


def _resolve_db_url(db_url: str) -> str:
    """Resolve the database URL, creating directories for DuckDB if needed."""
    if db_url.startswith("duckdb:///"):
        db_path = db_url.replace("duckdb:///", "")
        if db_path and db_path != ":memory:":
            full_path = Path(db_path)
            if not os.path.isabs(db_path):
                full_path = Path.cwd() / db_path
            full_path.parent.mkdir(parents=True, exist_ok=True)
            db_url = f"duckdb:///{full_path}"
            logger.info("DuckDB path resolved to: %s", full_path)
    return db_url


def _redact(db_url: str) -> str:
    """Strip credentials from a URL before it is logged."""
    return db_url.split("@")[-1] if "@" in db_url else db_url


def create_chat_history_engine(
    db_url: Optional[str] = None,
    settings: Optional[ChatHistorySettings] = None,
) -> Engine:
    """Build a new, uncached SQLAlchemy engine.

    Args:
        db_url: Database URL. If None, it is taken from ``settings``.
        settings: Settings supplying the URL and pool options. Defaults to
                  the process-wide settings.
    """
    settings = settings or get_settings()
    if db_url is None:
        db_url = settings.database_url()
    if not db_url:
        raise ConfigurationError("A database URL is required to create an engine")

    db_url = _resolve_db_url(db_url)

    try:
        if db_url.startswith("duckdb"):
            engine = create_engine(db_url, echo=False)
        elif db_url.startswith("postgresql"):
            connect_args = {}
            if db_url.startswith(("postgresql://", "postgresql+psycopg2://")):
                connect_args["connect_timeout"] = settings.db_connect_timeout
            engine = create_engine(
                db_url,
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_timeout=settings.db_pool_timeout,
                pool_pre_ping=True,
                connect_args=connect_args,
                echo=False,
            )
        else:
            engine = create_engine(db_url, echo=False)
    except ArgumentError as e:
        raise ConfigurationError(f"invalid database URL {_redact(db_url)}: {e}") from e
    except ImportError as e:
        raise ConfigurationError(f"database driver for {_redact(db_url)} is not installed: {e}") from e

    logger.info("Chat history database engine created: %s", _redact(db_url))
    return engine


def get_engine(db_url: Optional[str] = None, settings: Optional[ChatHistorySettings] = None) -> Engine:
    """Get or create the shared SQLAlchemy engine.

    Args:
        db_url: Database URL. If None, uses CHAT_HISTORY_DB_URL or the PG_*
                settings.
    """
    global _engine
    if _engine is not None:
        return _engine

    _engine = create_chat_history_engine(db_url, settings)
    return _engine


def check_connection(engine: Engine) -> str:
    """Ping the database and return the name of the connected database."""
    try:
        with engine.connect() as conn:
            name = conn.execute(text("SELECT current_database()")).scalar()
    except SQLAlchemyError as e:
        raise ConnectionCheckError(f"error testing connection: {e}") from e
    logger.info("Connected to database %s", name)
    return name


def reset_engine():
    """Reset the global engine (for testing)."""
    global _engine
    if _engine is not None:
        _engine.dispose()
    _engine = None
