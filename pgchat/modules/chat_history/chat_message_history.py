"""Chat message history backed by a PostgreSQL table.

One instance is bound to one session id. Rows are appended per message and
read back ordered by the table's id sequence. Destructive operations
(``clear`` and ``set_messages``) only take effect when the history was built
with ``overwrite=True``.
"""

import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy import delete, insert, select
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from pgchat.core.log_sanitizer import preview_for_logging, sanitize_for_logging
from pgchat.domain.errors import ChatHistoryError, ConfigurationError
from pgchat.domain.messages import ChatMessage, ChatMessageType

from .schema import (
    chat_history_clause,
    init_chat_history_table,
    validate_chat_history_table,
)

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_NAME = "public"


class ChatMessageHistory:
    """Stores and retrieves the messages of one chat session."""

    def __init__(
        self,
        engine: Engine,
        table_name: str,
        session_id: str,
        schema_name: str = DEFAULT_SCHEMA_NAME,
        overwrite: bool = False,
        create_table: bool = False,
    ):
        """Bind to a table and session, then validate or create the table.

        Args:
            engine: Pooled SQLAlchemy engine, owned by the caller.
            table_name: Chat history table name.
            session_id: Conversation the history reads and writes.
            schema_name: Schema holding the table.
            overwrite: Allow ``clear`` and ``set_messages`` to delete rows.
            create_table: Create schema and table when missing instead of
                          requiring a pre-provisioned table.

        Raises:
            ConfigurationError: engine, table name or session id missing.
            SchemaValidationError: the table is absent or misses columns.
        """
        if engine is None:
            raise ConfigurationError("missing chat message history engine")
        if not table_name:
            raise ConfigurationError("table name must be provided")
        if not session_id:
            raise ConfigurationError("session ID must be provided")

        self._engine = engine
        self.table_name = table_name
        self.session_id = session_id
        self.schema_name = schema_name or DEFAULT_SCHEMA_NAME
        self.overwrite = overwrite
        self._table = chat_history_clause(self.table_name, self.schema_name)

        if create_table:
            init_chat_history_table(self._engine, self.table_name, self.schema_name)
        validate_chat_history_table(self._engine, self.table_name, self.schema_name)

    def __repr__(self) -> str:
        return (
            f"ChatMessageHistory(table={self.schema_name}.{self.table_name}, "
            f"session_id={self.session_id!r}, overwrite={self.overwrite})"
        )

    @property
    def messages(self) -> List[ChatMessage]:
        """All messages of the session, oldest first."""
        return self.get_messages()

    def add_message(self, message: ChatMessage) -> None:
        """Insert a single message."""
        try:
            with self._engine.begin() as conn:
                conn.execute(insert(self._table).values(**self._row(message)))
        except SQLAlchemyError as e:
            raise ChatHistoryError(f"failed to add message to database: {e}", "add") from e
        logger.debug(
            "Added %s message to session %s: %s",
            message.type.value,
            sanitize_for_logging(self.session_id),
            preview_for_logging(message.content),
        )

    def add_user_message(self, content: str) -> None:
        self.add_message(ChatMessage.human(content))

    def add_ai_message(self, content: str) -> None:
        self.add_message(ChatMessage.ai(content))

    def add_system_message(self, content: str) -> None:
        self.add_message(ChatMessage.system(content))

    def add_messages(self, messages: Iterable[ChatMessage]) -> None:
        """Insert several messages in one batch.

        The batch runs in a single transaction; if any row fails nothing is
        stored.
        """
        rows = [self._row(m) for m in messages]
        if not rows:
            return
        try:
            with self._engine.begin() as conn:
                self._insert_rows(conn, rows)
        except SQLAlchemyError as e:
            raise ChatHistoryError(f"failed to add messages to database: {e}", "add") from e
        logger.debug("Added %d messages to session %s", len(rows), sanitize_for_logging(self.session_id))

    def get_messages(self) -> List[ChatMessage]:
        """Return the session's messages ordered by id.

        Rows whose type is not a known role are skipped.
        """
        stmt = (
            select(self._table.c.id, self._table.c.data, self._table.c.type)
            .where(self._table.c.session_id == self.session_id)
            .order_by(self._table.c.id)
        )
        try:
            with self._engine.connect() as conn:
                rows = conn.execute(stmt).all()
        except SQLAlchemyError as e:
            raise ChatHistoryError(f"failed to retrieve messages: {e}", "get") from e

        messages: List[ChatMessage] = []
        for row_id, data, message_type in rows:
            parsed = ChatMessageType.parse(message_type)
            if parsed is None:
                logger.debug(
                    "Skipping row %s with unknown message type %s",
                    row_id,
                    sanitize_for_logging(message_type),
                )
                continue
            messages.append(ChatMessage(content=data, type=parsed))
        return messages

    def clear(self) -> None:
        """Delete every message of the session.

        Does nothing unless the history was created with ``overwrite=True``.
        """
        if not self._check_overwrite("clear"):
            return
        try:
            with self._engine.begin() as conn:
                deleted = self._delete_session(conn)
        except SQLAlchemyError as e:
            raise ChatHistoryError(f"failed to clear session {self.session_id}: {e}", "clear") from e
        logger.info("Cleared session %s (%s rows)", sanitize_for_logging(self.session_id), deleted)

    def set_messages(self, messages: Iterable[ChatMessage]) -> None:
        """Replace the session's messages with ``messages``.

        Same overwrite gate as :meth:`clear`. Delete and insert share one
        transaction.
        """
        if not self._check_overwrite("set_messages"):
            return
        rows = [self._row(m) for m in messages]
        try:
            with self._engine.begin() as conn:
                self._delete_session(conn)
                if rows:
                    self._insert_rows(conn, rows)
        except SQLAlchemyError as e:
            raise ChatHistoryError(f"failed to set messages for session {self.session_id}: {e}", "set") from e
        logger.info("Replaced messages of session %s with %d rows", sanitize_for_logging(self.session_id), len(rows))

    def _row(self, message: ChatMessage) -> Dict[str, str]:
        return {
            "session_id": self.session_id,
            "data": message.content,
            "type": message.type.value,
        }

    def _insert_rows(self, conn: Connection, rows: List[Dict[str, str]]) -> None:
        conn.execute(insert(self._table), rows)

    def _delete_session(self, conn: Connection) -> Optional[int]:
        result = conn.execute(delete(self._table).where(self._table.c.session_id == self.session_id))
        return result.rowcount

    def _check_overwrite(self, operation: str) -> bool:
        if self.overwrite:
            return True
        logger.warning(
            "Ignoring %s on session %s: overwrite is not enabled",
            operation,
            sanitize_for_logging(self.session_id),
        )
        return False
