"""Synthesis of tool results for tool calls left unanswered in a thread."""

import uuid
from collections.abc import Sequence

from agent_chat.models.messages import HIDDEN_MESSAGE_ID_PREFIX, Message, ToolCall
from agent_chat.utils.logging import get_logger

logger = get_logger(__name__)

SKIPPED_TOOL_CALL_CONTENT = "Tool call skipped: the run ended before a result was produced."

# Fixed namespace so a given call id always maps to the same synthetic message id
_SYNTHETIC_ID_NAMESPACE = uuid.UUID("5b0c7a52-3d4e-4f1a-9a8e-6f0d2c1b7e93")


def synthetic_tool_message_id(tool_call_id: str) -> str:
    """Id of the synthetic result for `tool_call_id`."""
    return f"{HIDDEN_MESSAGE_ID_PREFIX}{uuid.uuid5(_SYNTHETIC_ID_NAMESPACE, tool_call_id)}"


def find_unanswered_tool_calls(messages: Sequence[Message]) -> list[ToolCall]:
    """Return tool calls from ai messages that no later tool message answers.

    Calls are returned in the order they were emitted. Each tool message
    answers at most one outstanding call with a matching id.
    """
    outstanding: list[ToolCall] = []

    for message in messages:
        if message.type == "ai":
            outstanding.extend(message.tool_calls)
        elif message.type == "tool" and message.tool_call_id:
            for index, tool_call in enumerate(outstanding):
                if tool_call.id == message.tool_call_id:
                    del outstanding[index]
                    break

    return outstanding


def ensure_tool_calls_have_responses(messages: Sequence[Message]) -> list[Message]:
    """Build placeholder tool results for every unanswered tool call.

    The returned messages must be placed before the next human message so
    that every tool call in the thread is followed by its result.

    Args:
        messages: Current confirmed thread messages

    Returns:
        Synthetic tool messages in call order (empty if nothing is pending)
    """
    unanswered = find_unanswered_tool_calls(messages)
    if unanswered:
        logger.info(f"Synthesizing results for {len(unanswered)} unanswered tool call(s)")

    return [
        Message(
            id=synthetic_tool_message_id(tool_call.id),
            type="tool",
            name=tool_call.name,
            tool_call_id=tool_call.id,
            content=SKIPPED_TOOL_CALL_CONTENT,
        )
        for tool_call in unanswered
    ]
