"""Shared fixtures and fakes."""

import asyncio
from typing import Any

import pytest

from agent_chat.clients.channel import StreamChannel
from agent_chat.models.snapshot import ConversationSnapshot, StreamError, SubmitInput, SubmitOptions


class ScriptedChannel(StreamChannel):
    """Channel whose runs replay a fixed script of state mappings.

    Items that are exceptions are raised at that point of the run. The run
    blocks on `gate` before streaming, which lets tests inspect the
    optimistic state. `threads` maps thread ids to the state returned when
    an existing thread is loaded.
    """

    def __init__(
        self,
        script: list[Any] | None = None,
        thread_id: str | None = None,
        threads: dict[str, Any] | None = None,
    ):
        super().__init__(thread_id=thread_id)
        self.script = list(script or [])
        self.threads = dict(threads or {})
        self.submissions: list[tuple[SubmitInput, SubmitOptions]] = []
        self.gate = asyncio.Event()
        self.gate.set()

    def submit(self, payload: SubmitInput, options: SubmitOptions) -> None:
        super().submit(payload, options)
        self.submissions.append((payload, options))

    def deliver(
        self, values: dict[str, Any], is_loading: bool = False, error: StreamError | None = None
    ) -> ConversationSnapshot:
        """Publish a server-confirmed snapshot directly."""
        snapshot = ConversationSnapshot.from_values(values, is_loading=is_loading, error=error)
        self._confirm(snapshot)
        return snapshot

    async def _fetch_state(self, thread_id):
        state = self.threads.get(thread_id)
        if isinstance(state, Exception):
            raise state
        return state

    async def _stream(self, payload, options):
        await self.gate.wait()
        for item in self.script:
            if isinstance(item, Exception):
                raise item
            yield item


@pytest.fixture
def channel():
    """Scripted channel with an empty script."""
    return ScriptedChannel()


def human(message_id: str, text: str) -> dict[str, Any]:
    return {"id": message_id, "type": "human", "content": [{"type": "text", "text": text}]}


def ai(message_id: str, text: str = "", tool_calls: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    return {"id": message_id, "type": "ai", "content": text, "tool_calls": tool_calls or []}


def tool(message_id: str, tool_call_id: str, content: str = "done") -> dict[str, Any]:
    return {"id": message_id, "type": "tool", "tool_call_id": tool_call_id, "content": content}


def ui(payload_id: str, name: str = "llm-ui", **props: Any) -> dict[str, Any]:
    return {"type": "ui", "id": payload_id, "name": name, "props": props, "metadata": {}}
