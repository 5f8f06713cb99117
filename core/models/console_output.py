"""ConsoleOutput models."""

from typing import Literal

from pydantic import BaseModel, Field

ConsoleStatus = Literal["in_progress", "loading_packages", "completed", "failed"]


class ConsoleOutputContent(BaseModel):
    type: Literal["text", "image"]
    value: str


class ConsoleOutput(BaseModel):
    """Output of a single code run, keyed by its run id."""

    id: str
    contents: list[ConsoleOutputContent] = Field(default_factory=list)
    status: ConsoleStatus = "in_progress"
