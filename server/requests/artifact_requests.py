"""Artifact request models."""

from typing import Literal

from pydantic import BaseModel, Field

from core.models import ArtifactKind


class OpenArtifactRequest(BaseModel):
    documentId: str = "init"
    kind: ArtifactKind = "text"
    title: str = ""
    content: str = ""
    contentType: str = "text/markdown"


class ChapterNavigationRequest(BaseModel):
    action: Literal["next", "previous", "select"]
    chapterNumber: int | None = Field(default=None, ge=1)


class SpreadNavigationRequest(BaseModel):
    action: Literal["next", "previous", "current"] = "current"
    viewMode: Literal["two-column", "single"] = "two-column"


class RunCodeRequest(BaseModel):
    timeout: int | None = Field(default=None, gt=0)


class EditArtifactRequest(BaseModel):
    content: str
    debounce: bool = True
