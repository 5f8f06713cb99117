"""RenderToolRequest model."""

from typing import Any

from pydantic import BaseModel, Field

from core.models import ToolState


class RenderToolRequest(BaseModel):
    toolName: str = Field(min_length=1)
    state: ToolState
    toolCallId: str | None = None
    input: dict[str, Any] = Field(default_factory=dict)
    output: Any = None
    errorText: str | None = None
