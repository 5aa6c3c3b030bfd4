"""Channel that runs a compiled LangGraph graph in-process."""

import uuid
from collections.abc import AsyncIterator
from typing import Any

from langchain_core.messages import BaseMessage
from langgraph.graph.state import CompiledStateGraph

from agent_chat.clients.channel import StreamChannel
from agent_chat.models.snapshot import SubmitInput, SubmitOptions
from agent_chat.utils.logging import get_logger

logger = get_logger(__name__)


def serialize_state(state: dict[str, Any]) -> dict[str, Any]:
    """Convert LangChain messages in a graph state into wire dicts."""
    values = dict(state)
    values["messages"] = [
        message.model_dump() if isinstance(message, BaseMessage) else message
        for message in state.get("messages") or []
    ]
    return values


class LocalGraphChannel(StreamChannel):
    """Streams runs of a graph compiled in this process.

    Only "values" streaming is supported. The graph should be compiled with a
    checkpointer so that turns accumulate on the thread.
    """

    def __init__(self, graph: CompiledStateGraph, thread_id: str | None = None):
        super().__init__(thread_id=thread_id)
        self.graph = graph

    async def _stream(self, payload: SubmitInput, options: SubmitOptions) -> AsyncIterator[dict[str, Any]]:
        if "values" not in options.stream_mode:
            logger.warning(f"Unsupported stream modes {options.stream_mode}, streaming values instead")

        if not self.thread_id:
            self.thread_id = str(uuid.uuid4())
            logger.info(f"Started local thread {self.thread_id}")

        config = {"configurable": {"thread_id": self.thread_id}}
        async for state in self.graph.astream(payload.to_wire(), config, stream_mode="values"):
            yield serialize_state(state)

    async def _fetch_state(self, thread_id: str) -> dict[str, Any]:
        state = await self.graph.aget_state({"configurable": {"thread_id": thread_id}})
        return serialize_state(state.values or {})
