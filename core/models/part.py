"""Part models."""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field

from .tool_state import ToolState


class TextPart(BaseModel):
    type: Literal["text"] = "text"
    text: str = ""


class ReasoningPart(BaseModel):
    type: Literal["reasoning"] = "reasoning"
    text: str
    step: str | None = None


class ToolPart(BaseModel):
    type: Literal["tool"] = "tool"
    toolName: str
    toolCallId: str
    state: ToolState
    input: dict[str, Any] = Field(default_factory=dict)
    output: Any = None
    errorText: str | None = None


class FilePart(BaseModel):
    type: Literal["file"] = "file"
    url: str
    mediaType: str
    filename: str | None = None


Part = Annotated[
    TextPart | ReasoningPart | ToolPart | FilePart,
    Field(discriminator="type"),
]
