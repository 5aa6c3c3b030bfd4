"""Request and response models for the HTTP surface."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from agent_chat.models.messages import FileBlock, ImageBlock, Message
from agent_chat.models.snapshot import StreamError, UIPayload
from agent_chat.services.view_state import ViewMode, ViewState


class SubmitRequest(BaseModel):
    """Request model for submitting a human turn."""

    text: str = ""
    attachments: list[ImageBlock | FileBlock] = Field(default_factory=list)
    context: dict[str, Any] | None = None


class NewThreadRequest(BaseModel):
    """Request model for switching threads."""

    thread_id: str | None = None


class ViewResponse(BaseModel):
    """Resolved main view."""

    mode: ViewMode
    first_token_received: bool
    full_screen: UIPayload | None = None

    @classmethod
    def from_state(cls, state: ViewState) -> "ViewResponse":
        return cls(mode=state.mode, first_token_received=state.first_token_received, full_screen=state.full_screen)


class SubmitResponse(BaseModel):
    """Response model for a submission."""

    accepted: bool
    view: ViewResponse


class CancelResponse(BaseModel):
    """Response model for a cancellation request."""

    cancelled: bool
    view: ViewResponse


class NewThreadResponse(BaseModel):
    """Response model for a thread switch."""

    thread_id: str | None
    view: ViewResponse


class ThreadStateResponse(BaseModel):
    """Current thread state as the view sees it."""

    thread_id: str | None
    messages: list[Message]
    ui: list[UIPayload]
    is_loading: bool
    error: StreamError | None
    view: ViewResponse


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str
    timestamp: datetime
    version: str
