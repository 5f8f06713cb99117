"""ReplaceMessageRequest model."""

from typing import Literal

from pydantic import BaseModel, Field

from core.models import Part


class ReplaceMessageRequest(BaseModel):
    role: Literal["user", "assistant"] = "user"
    parts: list[Part] = Field(default_factory=list)
