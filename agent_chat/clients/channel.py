"""Base streaming channel: optimistic updates, ordered snapshots, cancellation."""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Callable
from typing import Any

from agent_chat.errors import ChannelBusyError, StreamRunError
from agent_chat.models.snapshot import ConversationSnapshot, StreamError, SubmitInput, SubmitOptions
from agent_chat.utils.logging import get_logger

logger = get_logger(__name__)

SnapshotListener = Callable[[ConversationSnapshot], Any]


class StreamChannel(ABC):
    """Duplex channel to an agent thread.

    Subclasses implement `_stream`, yielding graph state mappings for one
    run, and optionally `_fetch_state` for loading an existing thread. The
    base class keeps two snapshots: the last one confirmed by the server and
    the published one, which overlays the in-flight optimistic projection on
    the confirmed state. Snapshots reach listeners in arrival order; a run
    settles on completion, failure or cancellation.
    """

    def __init__(self, thread_id: str | None = None):
        self.thread_id = thread_id
        self._snapshot = ConversationSnapshot()
        self._confirmed = ConversationSnapshot()
        self._listeners: list[SnapshotListener] = []
        self._task: asyncio.Task | None = None

    @property
    def snapshot(self) -> ConversationSnapshot:
        """Latest published snapshot, including optimistic content."""
        return self._snapshot

    @property
    def confirmed(self) -> ConversationSnapshot:
        """Latest snapshot received from the server."""
        return self._confirmed

    @property
    def is_loading(self) -> bool:
        """Whether the published snapshot is marked as loading."""
        return self._snapshot.is_loading

    @property
    def is_running(self) -> bool:
        """Whether a run task is in flight."""
        return self._task is not None and not self._task.done()

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register a snapshot listener and return a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def submit(self, payload: SubmitInput, options: SubmitOptions) -> None:
        """Start a run for `payload` without waiting for it.

        The optimistic projection, if any, is applied to the confirmed state
        and published before this returns. Must be called from a running
        event loop.

        Raises:
            ChannelBusyError: If a run is already in flight
        """
        if self.is_loading:
            raise ChannelBusyError(self.thread_id)

        loop = asyncio.get_running_loop()

        projected = self._confirmed
        if options.optimistic_values is not None:
            projected = options.optimistic_values(self._confirmed)

        self._task = loop.create_task(self._run(payload, options))
        self._task.add_done_callback(self._settle)
        self._publish(projected.model_copy(update={"is_loading": True, "error": None}))

    def stop(self) -> None:
        """Cancel the in-flight run, keeping whatever state was already published."""
        if self.is_running:
            logger.info(f"Stopping run on thread {self.thread_id}")
            self._task.cancel()

    def reset(self, thread_id: str | None = None) -> None:
        """Switch to another thread (or a new one when `thread_id` is None) without loading it."""
        self.stop()
        self._task = None
        self.thread_id = thread_id
        self._confirmed = ConversationSnapshot()
        self._publish(self._confirmed)

    async def switch(self, thread_id: str | None = None) -> None:
        """Switch threads and load the confirmed state of an existing one.

        A failed load is published as the snapshot error rather than raised.
        """
        self.reset(thread_id)
        try:
            await self.load()
        except Exception as e:
            logger.error(f"Failed to load thread {thread_id}: {e}", exc_info=True)
            if thread_id == self.thread_id:
                error = StreamError(message=str(e) or type(e).__name__, error_type=type(e).__name__)
                self._publish(self._snapshot.model_copy(update={"error": error}))

    async def load(self) -> ConversationSnapshot:
        """Fetch and publish the confirmed state of the active thread."""
        thread_id = self.thread_id
        if not thread_id:
            return self.snapshot

        values = await self._fetch_state(thread_id)
        if values is None:
            return self.snapshot
        if thread_id != self.thread_id or self.is_loading:
            logger.debug(f"Discarding loaded state of thread {thread_id}")
            return self.snapshot

        snapshot = ConversationSnapshot.from_values(values)
        logger.info(f"Loaded {len(snapshot.messages)} message(s) from thread {thread_id}")
        self._confirm(snapshot)
        return snapshot

    async def wait(self) -> None:
        """Wait until the in-flight run, if any, has settled."""
        if self._task is not None:
            await asyncio.gather(self._task, return_exceptions=True)

    def _publish(self, snapshot: ConversationSnapshot) -> None:
        self._snapshot = snapshot
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.error(f"Snapshot listener failed: {e}", exc_info=True)

    def _confirm(self, snapshot: ConversationSnapshot) -> None:
        self._confirmed = snapshot
        self._publish(snapshot)

    def _apply_values(self, values: dict[str, Any]) -> None:
        snapshot = ConversationSnapshot.from_values(values, is_loading=True)
        if snapshot.context is None:
            snapshot = snapshot.model_copy(update={"context": self._snapshot.context})
        self._confirm(snapshot)

    def _owns_channel(self) -> bool:
        # A run abandoned by reset() must not publish over the new thread
        return self._task is not None and self._task is asyncio.current_task()

    async def _run(self, payload: SubmitInput, options: SubmitOptions) -> StreamError | None:
        try:
            async for values in self._stream(payload, options):
                if self._owns_channel():
                    self._apply_values(values)
        except asyncio.CancelledError:
            logger.info(f"Run on thread {self.thread_id} cancelled")
            await self._on_cancelled()
            raise
        except StreamRunError as e:
            logger.error(f"Run on thread {self.thread_id} reported an error: {e.message}")
            return StreamError(message=e.message, error_type=e.error_type)
        except Exception as e:
            logger.error(f"Stream failed on thread {self.thread_id}: {e}", exc_info=True)
            return StreamError(message=str(e) or type(e).__name__, error_type=type(e).__name__)
        return None

    def _settle(self, task: asyncio.Task) -> None:
        # Runs as a done callback so a run cancelled before its first step still settles
        if task is not self._task:
            return
        error = None if task.cancelled() else task.result()
        if error is None:
            self._publish(self._snapshot.model_copy(update={"is_loading": False, "error": None}))
        else:
            # Unconfirmed optimistic messages are dropped on failure
            self._publish(self._confirmed.model_copy(update={"is_loading": False, "error": error}))

    async def _fetch_state(self, thread_id: str) -> dict[str, Any] | None:
        """Graph state of `thread_id`, or None when this channel has no history to load."""
        return None

    async def _on_cancelled(self) -> None:
        """Hook for subclasses that must tell the server to stop."""

    @abstractmethod
    def _stream(self, payload: SubmitInput, options: SubmitOptions) -> AsyncIterator[dict[str, Any]]:
        """Yield graph state mappings for one run."""
