"""Unit tests for the pydantic data models."""

import pytest
from fabricui.models import (
    ASSISTANT_ROLE,
    USER_ROLE,
    ChatMessage,
    ChatSession,
    CommandSpec,
    ContentType,
    Invocation,
    Stage,
)
from pydantic import ValidationError


class TestChatMessage:
    def test_roles_are_limited_to_user_and_assistant(self):
        ChatMessage(role=USER_ROLE, content="hi")
        ChatMessage(role=ASSISTANT_ROLE, content="hello")
        with pytest.raises(ValidationError):
            ChatMessage(role="system", content="nope")

    def test_message_is_immutable(self):
        message = ChatMessage(role=USER_ROLE, content="hi")
        with pytest.raises(ValidationError):
            message.content = "changed"

    def test_failed_flag(self):
        assert not ChatMessage(role=ASSISTANT_ROLE, content="ok").failed
        assert ChatMessage(role=ASSISTANT_ROLE, content="Error", status="failed").failed

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            ChatMessage(role=ASSISTANT_ROLE, content="x", status="pending")


class TestChatSession:
    def test_defaults_to_empty_transcript(self):
        session = ChatSession(id="abc", title="Chat 1")
        assert session.messages == []

    def test_messages_keep_order(self, sample_messages):
        session = ChatSession(id="abc", title="Chat 1", messages=sample_messages)
        assert [m.content for m in session.messages] == [
            m.content for m in sample_messages
        ]


class TestCommandModels:
    def test_command_spec_defaults(self):
        spec = CommandSpec(raw_input="hello")
        assert spec.content_type == ContentType.PLAIN_TEXT
        assert spec.pattern == ""
        assert spec.model == ""

    def test_content_type_values(self):
        assert ContentType.PLAIN_TEXT.value == "plainText"
        assert ContentType.VIDEO_URL.value == "videoUrl"

    def test_stage_argv(self):
        stage = Stage(program="fabric", args=["-m", "gpt-4o", "-p", "summarize"])
        assert stage.argv == ["fabric", "-m", "gpt-4o", "-p", "summarize"]

    def test_invocation_describe(self):
        invocation = Invocation(
            stages=[
                Stage(program="yt", args=["https://youtu.be/x"]),
                Stage(program="fabric", args=["-p", "summarize"]),
            ]
        )
        assert invocation.describe() == "yt https://youtu.be/x | fabric -p summarize"
