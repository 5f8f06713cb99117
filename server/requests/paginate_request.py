"""PaginateRequest model."""

from pydantic import BaseModel, Field


class PaginateRequest(BaseModel):
    content: str = ""
    linesPerPage: int | None = Field(default=None, ge=1)
    charsPerLine: int | None = Field(default=None, ge=1)
