"""Channel backed by a LangGraph server."""

from collections.abc import AsyncIterator, Callable
from typing import Any

from langgraph_sdk import get_client

from agent_chat.clients.channel import StreamChannel
from agent_chat.config import ClientConfig
from agent_chat.errors import StreamRunError
from agent_chat.models.snapshot import SubmitInput, SubmitOptions
from agent_chat.utils.logging import get_logger

logger = get_logger(__name__)


class LangGraphStreamChannel(StreamChannel):
    """Streams runs of a deployed assistant over the LangGraph API."""

    def __init__(
        self,
        config: ClientConfig,
        client: Any = None,
        thread_id: str | None = None,
        on_thread_id: Callable[[str], Any] | None = None,
    ):
        """Initialize the channel.

        Args:
            config: Client configuration (URL, assistant, API key)
            client: Optional preconfigured SDK client
            thread_id: Existing thread to continue, or None for a new one
            on_thread_id: Called when a new thread is created on first submit
        """
        super().__init__(thread_id=thread_id)
        self.config = config
        self.client = client or get_client(url=config.api_url, api_key=config.api_key)
        self.on_thread_id = on_thread_id
        self.run_id: str | None = None

    async def _fetch_state(self, thread_id: str) -> dict[str, Any]:
        state = await self.client.threads.get_state(thread_id)
        return state.get("values") or {}

    async def _ensure_thread(self) -> str:
        if self.thread_id:
            return self.thread_id

        thread = await self.client.threads.create()
        self.thread_id = thread["thread_id"]
        logger.info(f"Created thread {self.thread_id}")
        if self.on_thread_id:
            self.on_thread_id(self.thread_id)
        return self.thread_id

    async def _stream(self, payload: SubmitInput, options: SubmitOptions) -> AsyncIterator[dict[str, Any]]:
        thread_id = await self._ensure_thread()
        self.run_id = None

        async for part in self.client.runs.stream(
            thread_id,
            self.config.assistant_id,
            input=payload.to_wire(),
            stream_mode=options.stream_mode,
        ):
            if part.event == "metadata":
                self.run_id = (part.data or {}).get("run_id")
                logger.debug(f"Run {self.run_id} started on thread {thread_id}")
            elif part.event == "values":
                yield part.data
            elif part.event == "error":
                data = part.data if isinstance(part.data, dict) else {"message": str(part.data)}
                raise StreamRunError(
                    message=data.get("message") or str(data.get("error") or "Unknown error"),
                    error_type=data.get("error"),
                )

    async def _on_cancelled(self) -> None:
        if not (self.thread_id and self.run_id):
            return
        try:
            await self.client.runs.cancel(self.thread_id, self.run_id)
        except Exception as e:
            logger.warning(f"Failed to cancel run {self.run_id} on the server: {e}")
