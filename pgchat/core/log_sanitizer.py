"""
Helpers for putting user-supplied values into log records.
"""

import re
from typing import Any, Optional

# C0/C1 control characters, CR/LF and the Unicode line/paragraph separators
_UNSAFE_CHARS_RE = re.compile(r'[\x00-\x1f\x7f-\x9f\u2028\u2029]')

DEFAULT_PREVIEW_LENGTH = 80


def sanitize_for_logging(value: Any, max_length: Optional[int] = None) -> str:
    """
    Make a value safe to interpolate into a single log line.

    Session ids and message text come from callers, so newlines and escape
    sequences are stripped to keep them from forging extra log entries.

    Args:
        value: Any value. Non-strings are converted with ``str()`` first.
        max_length: If given, the result is cut to this many characters and
                    an ellipsis is appended when something was removed.

    Returns:
        str: The cleaned string ('' for None).

    Examples:
        >>> sanitize_for_logging("session\\n42")
        'session42'
        >>> sanitize_for_logging("abcdef", max_length=3)
        'abc...'
    """
    if value is None:
        return ''
    if not isinstance(value, str):
        value = str(value)
    value = _UNSAFE_CHARS_RE.sub('', value)
    if max_length is not None and len(value) > max_length:
        value = value[:max_length] + '...'
    return value


def preview_for_logging(content: Any) -> str:
    """Short, sanitized preview of message content for debug logs."""
    return sanitize_for_logging(content, max_length=DEFAULT_PREVIEW_LENGTH)
