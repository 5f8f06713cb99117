"""StreamFramesRequest model."""

from typing import Any, Literal

from pydantic import BaseModel, Field


class StreamFramesRequest(BaseModel):
    """A batch of stream frames to fold into a session."""

    messageID: str | None = Field(
        default=None,
        description="Assistant message to extend; a new one is started when omitted",
    )
    target: Literal["mixed", "message", "artifact"] = Field(
        default="mixed",
        description="mixed routes data-* frames to the artifact and the rest to the message",
    )
    frames: list[dict[str, Any]] = Field(default_factory=list)
