"""Conversation snapshot and channel submission models."""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, Field

from agent_chat.models.messages import Message

ArtifactContext = dict[str, Any]


class UIPayload(BaseModel):
    """Out-of-band UI instruction pushed by the agent alongside messages."""

    type: Literal["ui"] = "ui"
    id: str
    name: str
    props: dict[str, Any] = Field(default_factory=dict)
    metadata: dict[str, Any] = Field(default_factory=dict)

    class Config:
        frozen = True
        extra = "ignore"


class StreamError(BaseModel):
    """Error reported by the streaming channel."""

    message: str | None = None
    error_type: str | None = None

    class Config:
        frozen = True


class ConversationSnapshot(BaseModel):
    """State of a thread at a point in time, as published by a channel."""

    messages: list[Message] = Field(default_factory=list)
    ui: list[UIPayload] = Field(default_factory=list)
    context: ArtifactContext | None = None
    is_loading: bool = False
    error: StreamError | None = None

    class Config:
        frozen = True

    @classmethod
    def from_values(
        cls,
        values: dict[str, Any] | None,
        is_loading: bool = False,
        error: StreamError | None = None,
    ) -> "ConversationSnapshot":
        """Build a snapshot from a graph state ("values") mapping."""
        values = values or {}
        return cls(
            messages=values.get("messages") or [],
            ui=values.get("ui") or [],
            context=values.get("context"),
            is_loading=is_loading,
            error=error,
        )


class SubmitInput(BaseModel):
    """The increment sent to the agent for one turn."""

    messages: list[Message]
    context: ArtifactContext | None = None

    def to_wire(self) -> dict[str, Any]:
        """Serialize as graph input."""
        data: dict[str, Any] = {"messages": [message.to_wire() for message in self.messages]}
        if self.context is not None:
            data["context"] = self.context
        return data


OptimisticProjection = Callable[[ConversationSnapshot], ConversationSnapshot]


@dataclass
class SubmitOptions:
    """How a channel should run a submission."""

    optimistic_values: OptimisticProjection | None = None
    stream_mode: list[str] = field(default_factory=lambda: ["values"])
