"""Table definition, creation and validation for chat message history.

The table name and schema are chosen at runtime, so the definition is built
per call instead of being declared once on a ``DeclarativeBase``. On
PostgreSQL the id is a ``SERIAL`` column. DuckDB has no ``SERIAL``, so there
the id is drawn from an explicit ``<table>_id_seq`` sequence, the same name
PostgreSQL gives the sequence it owns.
"""

import logging
from typing import List, Sequence as SequenceType

from sqlalchemy import (
    Column,
    DateTime,
    Integer,
    MetaData,
    Sequence,
    Table,
    Text,
    column,
    func,
    table,
    text,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.schema import CreateSchema, CreateSequence, CreateTable
from sqlalchemy.sql.expression import TableClause

from pgchat.domain.errors import (
    ChatHistoryError,
    MissingColumnError,
    SchemaValidationError,
    TableNotFoundError,
)

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("id", "session_id", "data", "type")

_TABLE_EXISTS_SQL = text(
    "SELECT table_name FROM information_schema.tables "
    "WHERE table_schema = :schema_name AND table_name = :table_name"
)
_TABLE_COLUMNS_SQL = text(
    "SELECT column_name FROM information_schema.columns "
    "WHERE table_schema = :schema_name AND table_name = :table_name"
)


def _id_sequence(table_name: str, schema_name: str) -> Sequence:
    return Sequence(f"{table_name}_id_seq", schema=schema_name)


def _uses_serial(engine: Engine) -> bool:
    return engine.dialect.name == "postgresql"


def chat_history_table(table_name: str, schema_name: str, serial_id: bool = True) -> Table:
    """Full table definition, used for DDL.

    With ``serial_id`` the id renders as ``SERIAL`` on PostgreSQL; otherwise it
    defaults to ``nextval`` of the explicit ``<table>_id_seq`` sequence.
    """
    if serial_id:
        id_column = Column("id", Integer, primary_key=True)
    else:
        id_seq = _id_sequence(table_name, schema_name)
        id_column = Column("id", Integer, server_default=id_seq.next_value(), primary_key=True, autoincrement=False)
    return Table(
        table_name,
        MetaData(),
        id_column,
        Column("session_id", Text, nullable=False),
        Column("data", Text, nullable=False),
        Column("type", Text, nullable=False),
        Column("timestamp", DateTime(timezone=True), server_default=func.now()),
        schema=schema_name,
    )


def chat_history_clause(table_name: str, schema_name: str) -> TableClause:
    """Lightweight table reference for DML.

    Only the required columns are listed, so statements built from it work
    against any table that passes validation and never set ``id`` themselves.
    """
    return table(
        table_name,
        column("id"),
        column("session_id"),
        column("data"),
        column("type"),
        schema=schema_name,
    )


def init_chat_history_table(engine: Engine, table_name: str, schema_name: str = "public") -> None:
    """Create the schema and chat history table if they do not exist.

    Idempotent; safe to call on every start-up.
    """
    serial_id = _uses_serial(engine)
    history_table = chat_history_table(table_name, schema_name, serial_id=serial_id)
    try:
        with engine.begin() as conn:
            conn.execute(CreateSchema(schema_name, if_not_exists=True))
            if not serial_id:
                conn.execute(CreateSequence(_id_sequence(table_name, schema_name), if_not_exists=True))
            conn.execute(CreateTable(history_table, if_not_exists=True))
    except SQLAlchemyError as e:
        raise ChatHistoryError(
            f"failed to create the table {schema_name}.{table_name}: {e}", "init"
        ) from e
    logger.info("Chat history table %s.%s created/verified", schema_name, table_name)


def get_table_columns(engine: Engine, table_name: str, schema_name: str = "public") -> List[str]:
    """Return the column names of the table, raising if it does not exist."""
    params = {"schema_name": schema_name, "table_name": table_name}
    try:
        with engine.connect() as conn:
            exists = conn.execute(_TABLE_EXISTS_SQL, params).first() is not None
            if not exists:
                raise TableNotFoundError(table_name, schema_name)
            return [row[0] for row in conn.execute(_TABLE_COLUMNS_SQL, params)]
    except SQLAlchemyError as e:
        raise SchemaValidationError(
            f"error validating table {table_name}: {e}", table_name, schema_name
        ) from e


def validate_chat_history_table(
    engine: Engine,
    table_name: str,
    schema_name: str = "public",
    required_columns: SequenceType[str] = REQUIRED_COLUMNS,
) -> None:
    """Check the table exists and has every required column.

    Raises:
        TableNotFoundError: the table is not in the schema.
        MissingColumnError: the first required column that is absent.
        SchemaValidationError: the catalogue lookup itself failed.
    """
    columns = set(get_table_columns(engine, table_name, schema_name))
    for required in required_columns:
        if required not in columns:
            raise MissingColumnError(required, table_name, schema_name, required_columns)
    logger.debug("Chat history table %s.%s validated", schema_name, table_name)
