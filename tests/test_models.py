"""Tests for data models and configuration."""

import json
import logging
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from agent_chat.config import ClientConfig
from agent_chat.models.messages import (
    FileBlock,
    ImageBlock,
    Message,
    PassthroughBlock,
    TextBlock,
    ToolCall,
    is_hidden_message,
)
from agent_chat.models.snapshot import ConversationSnapshot, SubmitInput, UIPayload
from agent_chat.utils.logging import LogConfig, get_logger


class TestMessageModels:
    """Tests for messages in the LangGraph wire format."""

    def test_string_content(self):
        """Test a message with plain string content."""
        message = Message.model_validate({"id": "a1", "type": "ai", "content": "Hello"})
        assert message.text == "Hello"
        assert message.tool_calls == []

    def test_content_blocks_from_json(self):
        """Test parsing mixed content blocks from server JSON."""
        raw = json.loads(
            """
            {
                "id": "a1",
                "type": "ai",
                "content": [
                    {"type": "text", "text": "Drawing ", "citations": null},
                    {"type": "tool_use", "id": "toolu_01", "name": "draw", "input": {"subject": "cat"}},
                    {"type": "text", "text": "now."}
                ],
                "tool_calls": [{"id": "toolu_01", "name": "draw", "args": {"subject": "cat"}, "type": "tool_call"}],
                "usage_metadata": {"input_tokens": 10}
            }
            """
        )

        message = Message.model_validate(raw)

        assert isinstance(message.content[0], TextBlock)
        assert isinstance(message.content[1], PassthroughBlock)
        assert message.content[1].model_dump()["input"] == {"subject": "cat"}
        assert message.text == "Drawing now."
        assert message.tool_calls == [ToolCall(id="toolu_01", name="draw", args={"subject": "cat"})]

    def test_bare_strings_in_content_list(self):
        """Test that plain strings mixed into a content list are read as text blocks."""
        message = Message.model_validate(
            {"id": "a1", "type": "ai", "content": ["Drawing ", {"type": "text", "text": "now."}]}
        )

        assert message.content[0] == TextBlock(text="Drawing ")
        assert message.text == "Drawing now."

        snapshot = ConversationSnapshot.from_values({"messages": [{"type": "ai", "content": ["hi"]}]})
        assert snapshot.messages[0].text == "hi"

    def test_attachment_blocks(self):
        """Test image and file attachment blocks."""
        message = Message.model_validate(
            {
                "type": "human",
                "content": [
                    {"type": "image", "source_type": "base64", "mime_type": "image/png", "data": "AAAA"},
                    {
                        "type": "file",
                        "source_type": "base64",
                        "mime_type": "application/pdf",
                        "data": "BBBB",
                        "metadata": {"filename": "report.pdf"},
                    },
                ],
            }
        )

        image, pdf = message.attachments
        assert isinstance(image, ImageBlock)
        assert isinstance(pdf, FileBlock)
        assert pdf.metadata["filename"] == "report.pdf"
        assert message.text == ""

    def test_invalid_type(self):
        """Test that unknown roles are rejected."""
        with pytest.raises(ValidationError):
            Message(type="robot", content="beep")  # type: ignore

    def test_messages_are_immutable(self):
        """Test that messages cannot be modified once created."""
        message = Message(id="h1", type="human", content="hi")
        with pytest.raises(ValidationError):
            message.content = "changed"  # type: ignore

    def test_to_wire_drops_empty_fields(self):
        """Test the serialized shape sent to the server."""
        message = Message(id="h1", type="human", content=[TextBlock(text="hi")])
        assert message.to_wire() == {"id": "h1", "type": "human", "content": [{"type": "text", "text": "hi"}]}

    def test_to_wire_keeps_tool_calls(self):
        """Test that ai tool calls are serialized."""
        message = Message(id="a1", type="ai", tool_calls=[ToolCall(id="c1", name="draw")])
        assert message.to_wire()["tool_calls"] == [{"id": "c1", "name": "draw", "args": {}}]

    def test_hidden_messages(self):
        """Test detection of locally synthesized messages."""
        assert is_hidden_message(Message(id="do-not-render-123", type="tool", tool_call_id="c1"))
        assert not is_hidden_message(Message(id="t1", type="tool", tool_call_id="c1"))
        assert not is_hidden_message(Message(type="human", content="hi"))


class TestSnapshotModels:
    """Tests for snapshot and submission models."""

    def test_from_values(self):
        """Test building a snapshot from a graph state mapping."""
        snapshot = ConversationSnapshot.from_values(
            {
                "messages": [{"id": "h1", "type": "human", "content": "hi"}],
                "ui": [{"type": "ui", "id": "u1", "name": "llm-ui", "props": {"html": "<p/>"}, "metadata": {}}],
                "other_key": 1,
            },
            is_loading=True,
        )

        assert snapshot.messages[0].id == "h1"
        assert snapshot.ui == [UIPayload(id="u1", name="llm-ui", props={"html": "<p/>"})]
        assert snapshot.is_loading is True
        assert snapshot.error is None

    def test_from_empty_values(self):
        """Test that missing keys produce an empty snapshot."""
        assert ConversationSnapshot.from_values(None) == ConversationSnapshot()
        assert ConversationSnapshot.from_values({"messages": None}).messages == []

    def test_submit_input_wire_format(self):
        """Test the graph input built for a submission."""
        payload = SubmitInput(messages=[Message(id="h1", type="human", content="hi")])
        assert payload.to_wire() == {"messages": [{"id": "h1", "type": "human", "content": "hi"}]}

        with_context = SubmitInput(messages=[], context={"k": "v"})
        assert with_context.to_wire() == {"messages": [], "context": {"k": "v"}}


class TestClientConfig:
    """Tests for environment configuration."""

    def test_defaults(self):
        """Test configuration without environment variables."""
        with patch.dict("os.environ", {}, clear=True):
            config = ClientConfig.from_env()
        assert config.api_url == "http://localhost:2024"
        assert config.assistant_id == "agent"
        assert config.api_key is None
        assert config.full_screen_ui_name == "llm-ui"
        assert config.cors_origins == ["*"]

    def test_from_environment(self):
        """Test configuration from environment variables."""
        env = {
            "LANGGRAPH_API_URL": "https://agents.example.com",
            "LANGGRAPH_ASSISTANT_ID": "painter",
            "LANGSMITH_API_KEY": "lsv2-test",
            "FULL_SCREEN_UI_NAME": "canvas",
            "LOG_LEVEL": "debug",
            "CORS_ORIGINS": "https://chat.example.com, http://localhost:3000",
        }
        with patch.dict("os.environ", env, clear=True):
            config = ClientConfig.from_env()

        assert config.api_url == "https://agents.example.com"
        assert config.assistant_id == "painter"
        assert config.api_key == "lsv2-test"
        assert config.full_screen_ui_name == "canvas"
        assert config.log_config().level == "debug"
        assert config.cors_origins == ["https://chat.example.com", "http://localhost:3000"]


class TestLogging:
    """Tests for logging helpers."""

    def test_get_logger_honors_log_level(self):
        """Test that LOG_LEVEL applies to module loggers only when set."""
        with patch.dict("os.environ", {"LOG_LEVEL": "debug"}):
            assert get_logger("agent_chat.test.debug").level == logging.DEBUG
        with patch.dict("os.environ", {}, clear=True):
            assert get_logger("agent_chat.test.unset").level == logging.NOTSET

    def test_log_config_quiets_transport_loggers(self):
        """Test the default list of quieted loggers."""
        assert LogConfig().quiet_loggers == ["httpx", "langgraph_sdk", "uvicorn.access"]
        assert ClientConfig(log_level="debug").log_config().level == "debug"
