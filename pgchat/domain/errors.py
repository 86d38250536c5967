"""Domain-level errors and exceptions."""

from typing import Optional, Sequence


class DomainError(Exception):
    """Base domain error."""
    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code


class ConfigurationError(DomainError):
    """Configuration error."""
    pass


class ChatHistoryError(DomainError):
    """A chat history operation failed.

    ``operation`` names the failing step: ``init``, ``validate``, ``add``,
    ``get``, ``clear`` or ``set``.
    """
    def __init__(self, message: str, operation: str, code: Optional[str] = None):
        super().__init__(message, code or f"CHAT_HISTORY_{operation.upper()}")
        self.operation = operation


class ConnectionCheckError(ChatHistoryError):
    """Raised when the database does not answer a ping."""
    def __init__(self, message: str):
        super().__init__(message, "ping")


class SchemaValidationError(ChatHistoryError):
    """The chat history table does not have the expected shape."""
    def __init__(self, message: str, table_name: str, schema_name: str):
        super().__init__(message, "validate")
        self.table_name = table_name
        self.schema_name = schema_name


class TableNotFoundError(SchemaValidationError):
    """Raised when the chat history table does not exist."""
    def __init__(self, table_name: str, schema_name: str):
        super().__init__(
            f"table '{table_name}' does not exist in schema '{schema_name}'",
            table_name,
            schema_name,
        )


class MissingColumnError(SchemaValidationError):
    """Raised when a required column is missing from the chat history table."""
    def __init__(
        self,
        column_name: str,
        table_name: str,
        schema_name: str,
        expected_columns: Sequence[str],
    ):
        super().__init__(
            f"column '{column_name}' is missing in table '{table_name}'. "
            f"Expected columns: {list(expected_columns)}",
            table_name,
            schema_name,
        )
        self.column_name = column_name
        self.expected_columns = list(expected_columns)
