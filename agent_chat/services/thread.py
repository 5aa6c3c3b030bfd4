"""Thread controller: the per-conversation state behind the chat view."""

from collections.abc import Callable, Sequence
from typing import Any

from agent_chat.clients.channel import StreamChannel
from agent_chat.config import FULL_SCREEN_UI_NAME
from agent_chat.models.messages import Message, is_hidden_message
from agent_chat.models.snapshot import ArtifactContext, ConversationSnapshot, SubmitInput
from agent_chat.services.error_reporting import ErrorDeduplicator, ErrorNotifier, LoggingNotifier
from agent_chat.services.submission import Attachment, SubmissionController
from agent_chat.services.view_state import ViewState, resolve_view_state
from agent_chat.utils.logging import get_logger

logger = get_logger(__name__)

ViewListener = Callable[[ViewState], Any]


class ThreadController:
    """Owns everything scoped to the active thread.

    Snapshots from the channel are processed in arrival order: errors go
    through the deduplicator and the view state is recomputed and pushed to
    view listeners. Switching threads resets the artifact context, the
    reported-error cell and the view state.
    """

    def __init__(
        self,
        channel: StreamChannel,
        notifier: ErrorNotifier | None = None,
        full_screen_ui_name: str = FULL_SCREEN_UI_NAME,
    ):
        """Initialize the controller and subscribe to the channel.

        Args:
            channel: Streaming channel for the thread
            notifier: Receives each distinct stream error message
            full_screen_ui_name: UI payload name that takes over the main view
        """
        self.channel = channel
        self.full_screen_ui_name = full_screen_ui_name
        self.submission = SubmissionController(channel)
        self.errors = ErrorDeduplicator(notifier or LoggingNotifier())

        self.artifact_context: ArtifactContext = {}
        self.artifact_open = False
        self.hide_tool_calls = False

        self.view_state = ViewState()
        self._previous_snapshot: ConversationSnapshot | None = None
        self._view_listeners: list[ViewListener] = []

        self._unsubscribe = channel.subscribe(self.on_snapshot)

    @property
    def thread_id(self) -> str | None:
        return self.channel.thread_id

    @property
    def snapshot(self) -> ConversationSnapshot:
        return self.channel.snapshot

    @property
    def messages(self) -> list[Message]:
        return self.channel.snapshot.messages

    @property
    def is_loading(self) -> bool:
        return self.channel.is_loading

    @property
    def chat_started(self) -> bool:
        return bool(self.thread_id) or bool(self.messages)

    # Input buffer

    @property
    def input_text(self) -> str:
        return self.submission.input_text

    @input_text.setter
    def input_text(self, value: str) -> None:
        self.submission.input_text = value

    @property
    def content_blocks(self) -> list[Attachment]:
        return self.submission.content_blocks

    def add_content_block(self, block: Attachment) -> None:
        self.submission.add_content_block(block)

    def remove_content_block(self, index: int) -> None:
        self.submission.remove_content_block(index)

    # Artifact side panel

    def set_artifact_context(self, context: ArtifactContext) -> None:
        self.artifact_context = dict(context)

    def open_artifact(self) -> None:
        self.artifact_open = True

    def close_artifact(self) -> None:
        self.artifact_open = False

    # Inbound events

    def submit(
        self,
        text: str | None = None,
        attachments: Sequence[Attachment] | None = None,
        context: ArtifactContext | None = None,
    ) -> SubmitInput | None:
        """Submit a human turn.

        Defaults to the input buffer, queued attachments and the current
        artifact context.

        Returns:
            The dispatched increment, or None if nothing was sent
        """
        text = self.submission.input_text if text is None else text
        attachments = self.submission.content_blocks if attachments is None else attachments
        if not self.submission.can_submit(text, attachments):
            return None

        # Must precede dispatch, the optimistic snapshot is published synchronously
        self.view_state = self.view_state.submitted()

        return self.submission.submit(
            text,
            attachments,
            self.artifact_context if context is None else context,
        )

    def request_cancel(self) -> bool:
        """Stop the in-flight run.

        Returns:
            False if there was nothing to cancel
        """
        if not self.channel.is_running:
            return False
        self.channel.stop()
        return True

    def on_snapshot(self, snapshot: ConversationSnapshot) -> None:
        """Handle a snapshot published by the channel."""
        self.errors.on_snapshot(snapshot)

        self.view_state = resolve_view_state(
            self.view_state,
            self._previous_snapshot,
            snapshot,
            chat_started=bool(self.thread_id) or bool(snapshot.messages),
            marker=self.full_screen_ui_name,
        )
        self._previous_snapshot = snapshot

        for listener in list(self._view_listeners):
            try:
                listener(self.view_state)
            except Exception as e:
                logger.error(f"View listener failed: {e}", exc_info=True)

    async def new_thread(self, thread_id: str | None = None) -> None:
        """Switch to another thread, or start a fresh one when `thread_id` is None.

        An existing thread is loaded before this returns, so the next
        submission reconciles against its confirmed messages.
        """
        logger.info(f"Switching to thread {thread_id or '<new>'}")
        self.close_artifact()
        self.artifact_context = {}
        self.errors.reset()
        self.view_state = ViewState()
        self._previous_snapshot = None
        await self.channel.switch(thread_id)

    # View

    def add_view_listener(self, listener: ViewListener) -> Callable[[], None]:
        """Register a view-mode listener, called after every snapshot."""
        self._view_listeners.append(listener)

        def remove() -> None:
            if listener in self._view_listeners:
                self._view_listeners.remove(listener)

        return remove

    def visible_messages(self) -> list[Message]:
        """Messages a renderer should show."""
        visible = []
        for message in self.messages:
            if is_hidden_message(message):
                continue
            if self.hide_tool_calls:
                if message.type == "tool":
                    continue
                if message.type == "ai" and message.tool_calls:
                    if not message.text:
                        continue
                    message = message.model_copy(update={"tool_calls": []})
            visible.append(message)
        return visible

    def close(self) -> None:
        """Detach from the channel."""
        self._unsubscribe()
