"""Tests for log sanitizing helpers."""

from pgchat.core.log_sanitizer import (
    DEFAULT_PREVIEW_LENGTH,
    preview_for_logging,
    sanitize_for_logging,
)


def test_strips_newlines_and_escapes():
    assert sanitize_for_logging("session\r\n42") == "session42"
    assert sanitize_for_logging("a\x1b[31mb") == "a[31mb"
    assert sanitize_for_logging("fake\u2028entry\u2029") == "fakeentry"


def test_keeps_spaces():
    assert sanitize_for_logging("hello world") == "hello world"


def test_none_and_non_strings():
    assert sanitize_for_logging(None) == ""
    assert sanitize_for_logging(42) == "42"


def test_truncation():
    assert sanitize_for_logging("abcdef", max_length=3) == "abc..."
    assert sanitize_for_logging("abc", max_length=3) == "abc"


def test_preview_length():
    preview = preview_for_logging("x" * 500)
    assert preview == "x" * DEFAULT_PREVIEW_LENGTH + "..."
