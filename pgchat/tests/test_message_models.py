"""Tests for chat message domain models."""

import pytest

from pgchat.domain.messages import ChatMessage, ChatMessageType


class TestChatMessageType:
    @pytest.mark.parametrize("value,expected", [
        ("human", ChatMessageType.HUMAN),
        ("ai", ChatMessageType.AI),
        ("system", ChatMessageType.SYSTEM),
        (ChatMessageType.AI, ChatMessageType.AI),
    ])
    def test_parse_known(self, value, expected):
        assert ChatMessageType.parse(value) is expected

    @pytest.mark.parametrize("value", ["tool", "HUMAN", "", None, 3])
    def test_parse_unknown_returns_none(self, value):
        assert ChatMessageType.parse(value) is None


class TestChatMessage:
    def test_defaults(self):
        msg = ChatMessage()
        assert msg.content == ""
        assert msg.type is ChatMessageType.HUMAN

    def test_constructors(self):
        assert ChatMessage.human("hi").type is ChatMessageType.HUMAN
        assert ChatMessage.ai("hi").type is ChatMessageType.AI
        assert ChatMessage.system("hi").type is ChatMessageType.SYSTEM

    def test_string_type_is_coerced(self):
        assert ChatMessage("hi", "ai") == ChatMessage.ai("hi")

    def test_unknown_type_rejected(self):
        with pytest.raises(ValueError, match="Unknown chat message type"):
            ChatMessage("hi", "tool")

    def test_to_dict(self):
        assert ChatMessage.system("rules").to_dict() == {"type": "system", "content": "rules"}

    def test_from_dict(self):
        msg = ChatMessage.from_dict({"type": "ai", "content": "answer"})
        assert msg == ChatMessage.ai("answer")

    def test_from_dict_defaults_to_human(self):
        assert ChatMessage.from_dict({"content": "q"}) == ChatMessage.human("q")
