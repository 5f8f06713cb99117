"""StreamPart model."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class StreamPart(BaseModel):
    """One frame of a generation stream.

    Only `type` is required. Producers attach whatever else they need, so
    unknown keys are preserved rather than rejected.
    """

    model_config = ConfigDict(extra="allow")

    type: str = Field(min_length=1)
    content: Any = None
    language: str | None = None
