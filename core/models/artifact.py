"""Artifact model."""

from typing import Literal

from pydantic import BaseModel

ArtifactKind = Literal["text", "code", "book"]
ArtifactStatus = Literal["streaming", "idle"]


class Artifact(BaseModel):
    """A document-like side panel rendered next to the chat."""

    documentId: str = "init"
    kind: ArtifactKind = "text"
    title: str = ""
    content: str = ""
    contentType: str = "text/markdown"
    status: ArtifactStatus = "idle"
    isVisible: bool = False
