"""Message and content block models (LangGraph wire format)."""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Discriminator, Field, Tag, model_validator

HIDDEN_MESSAGE_ID_PREFIX = "do-not-render-"

MessageType = Literal["human", "ai", "tool", "system"]


class TextBlock(BaseModel):
    """Text content block."""

    type: Literal["text"] = "text"
    text: str

    @model_validator(mode="before")
    @classmethod
    def from_plain_string(cls, data: Any) -> Any:
        # LangChain allows bare strings inside a content list
        if isinstance(data, str):
            return {"type": "text", "text": data}
        return data

    class Config:
        frozen = True
        extra = "ignore"


class ImageBlock(BaseModel):
    """Base64 image attachment."""

    type: Literal["image"] = "image"
    source_type: str = "base64"
    mime_type: str
    data: str
    metadata: dict[str, Any] = Field(default_factory=dict)

    class Config:
        frozen = True
        extra = "ignore"


class FileBlock(BaseModel):
    """Base64 file attachment (PDF and similar)."""

    type: Literal["file"] = "file"
    source_type: str = "base64"
    mime_type: str
    data: str
    metadata: dict[str, Any] = Field(default_factory=dict)

    class Config:
        frozen = True
        extra = "ignore"


class PassthroughBlock(BaseModel):
    """Any other block the server sends (tool_use, image_url, ...), kept as-is."""

    type: str

    class Config:
        frozen = True
        extra = "allow"


def _block_kind(value: Any) -> str:
    if isinstance(value, str):
        return "text"
    kind = value.get("type") if isinstance(value, dict) else getattr(value, "type", None)
    if kind in ("text", "image", "file"):
        return kind
    return "other"


ContentBlock = Annotated[
    Annotated[TextBlock, Tag("text")]
    | Annotated[ImageBlock, Tag("image")]
    | Annotated[FileBlock, Tag("file")]
    | Annotated[PassthroughBlock, Tag("other")],
    Discriminator(_block_kind),
]


class ToolCall(BaseModel):
    """A tool invocation requested by an ai message."""

    id: str
    name: str
    args: dict[str, Any] = Field(default_factory=dict)

    class Config:
        frozen = True
        extra = "ignore"


class Message(BaseModel):
    """A single conversation turn.

    `type` is the role of the turn. `tool_calls` is only meaningful on ai
    messages and `tool_call_id` only on tool messages.
    """

    id: str | None = None
    type: MessageType
    content: str | list[ContentBlock] = ""
    name: str | None = None
    tool_calls: list[ToolCall] = Field(default_factory=list)
    tool_call_id: str | None = None

    class Config:
        frozen = True
        extra = "ignore"

    @property
    def text(self) -> str:
        """Concatenated text of all text blocks."""
        if isinstance(self.content, str):
            return self.content
        return "".join(block.text for block in self.content if isinstance(block, TextBlock))

    @property
    def attachments(self) -> list[ImageBlock | FileBlock]:
        """Image and file blocks carried by this message."""
        if isinstance(self.content, str):
            return []
        return [block for block in self.content if isinstance(block, ImageBlock | FileBlock)]

    def to_wire(self) -> dict[str, Any]:
        """Serialize for the LangGraph API."""
        data = self.model_dump(exclude_none=True)
        if not self.tool_calls:
            data.pop("tool_calls", None)
        return data


def is_hidden_message(message: Message) -> bool:
    """Whether a message was synthesized locally and should not be rendered."""
    return bool(message.id and message.id.startswith(HIDDEN_MESSAGE_ID_PREFIX))
