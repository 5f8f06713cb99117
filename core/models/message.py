"""Message model."""

import time
from typing import Literal

from pydantic import BaseModel, Field

from .part import Part


class Message(BaseModel):
    id: str
    role: Literal["user", "assistant"]
    parts: list[Part] = Field(default_factory=list)
    createdAt: float = Field(default_factory=time.time)
