"""RendererDescriptor model."""

from typing import Any

from pydantic import BaseModel, Field

from .tool_state import ToolState


class RendererDescriptor(BaseModel):
    """Which presentational component to draw for a tool part, and with what."""

    renderer: str
    toolName: str
    toolCallId: str | None = None
    state: ToolState
    props: dict[str, Any] = Field(default_factory=dict)
