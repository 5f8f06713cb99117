"""Suggestion model."""

from pydantic import BaseModel


class Suggestion(BaseModel):
    id: str
    documentId: str | None = None
    originalText: str = ""
    suggestedText: str = ""
    description: str | None = None
    isResolved: bool = False
