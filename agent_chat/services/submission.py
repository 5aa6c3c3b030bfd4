"""Building and dispatching human turns with an optimistic projection."""

from collections.abc import Sequence

from cuid2 import cuid_wrapper

from agent_chat.clients.channel import StreamChannel
from agent_chat.models.messages import ContentBlock, FileBlock, ImageBlock, Message, TextBlock
from agent_chat.models.snapshot import (
    ArtifactContext,
    ConversationSnapshot,
    OptimisticProjection,
    SubmitInput,
    SubmitOptions,
)
from agent_chat.services.tool_responses import ensure_tool_calls_have_responses
from agent_chat.utils.logging import get_logger

logger = get_logger(__name__)

cuid = cuid_wrapper()

Attachment = ImageBlock | FileBlock


def build_human_message(text: str, attachments: Sequence[Attachment] = ()) -> Message:
    """Create a human message with a fresh id.

    The text block is only included when the text has non-whitespace
    content; attachments follow it in order.
    """
    content: list[ContentBlock] = []
    if text.strip():
        content.append(TextBlock(text=text))
    content.extend(attachments)
    return Message(id=cuid(), type="human", content=content)


def project_submission(payload: SubmitInput) -> OptimisticProjection:
    """Return the optimistic update for `payload`.

    The projection appends the outgoing messages to the confirmed state the
    channel passes in and never touches earlier messages.
    """

    def optimistic_values(previous: ConversationSnapshot) -> ConversationSnapshot:
        return previous.model_copy(
            update={
                "context": payload.context,
                "messages": [*previous.messages, *payload.messages],
            }
        )

    return optimistic_values


class SubmissionController:
    """Owns the input buffer and turns it into channel submissions."""

    def __init__(self, channel: StreamChannel):
        """Initialize the controller.

        Args:
            channel: Streaming channel the turns are dispatched to
        """
        self.channel = channel
        self.input_text = ""
        self.content_blocks: list[Attachment] = []

    def add_content_block(self, block: Attachment) -> None:
        """Queue an attachment for the next submission."""
        self.content_blocks.append(block)

    def remove_content_block(self, index: int) -> None:
        """Drop a queued attachment by position."""
        del self.content_blocks[index]

    def can_submit(self, text: str, attachments: Sequence[Attachment]) -> bool:
        """Whether a submission with this input would be dispatched."""
        if not text.strip() and not attachments:
            return False
        return not self.channel.is_loading

    def submit(
        self,
        text: str | None = None,
        attachments: Sequence[Attachment] | None = None,
        context: ArtifactContext | None = None,
    ) -> SubmitInput | None:
        """Send a human turn, answering any pending tool calls first.

        Args:
            text: Message text (defaults to the input buffer)
            attachments: Attachments (defaults to the queued content blocks)
            context: Artifact context; only sent when non-empty

        Returns:
            The dispatched increment, or None if the submission was rejected
        """
        text = self.input_text if text is None else text
        attachments = list(self.content_blocks if attachments is None else attachments)

        if not self.can_submit(text, attachments):
            logger.debug("Ignoring submission: empty input or run in progress")
            return None

        human_message = build_human_message(text, attachments)
        # Unconfirmed optimistic messages are not part of the server thread
        tool_messages = ensure_tool_calls_have_responses(self.channel.confirmed.messages)

        payload = SubmitInput(
            messages=[*tool_messages, human_message],
            context=context if context else None,
        )

        logger.info(
            f"Submitting message {human_message.id} with {len(tool_messages)} synthetic tool result(s) "
            f"to thread {self.channel.thread_id or '<new>'}"
        )
        self.channel.submit(
            payload,
            SubmitOptions(stream_mode=["values"], optimistic_values=project_submission(payload)),
        )

        self.input_text = ""
        self.content_blocks = []
        return payload
