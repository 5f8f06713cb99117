"""Per-kind artifact metadata models."""

from pydantic import BaseModel, Field

from .console_output import ConsoleOutput
from .suggestion import Suggestion


class TextArtifactMetadata(BaseModel):
    suggestions: list[Suggestion] = Field(default_factory=list)


class CodeArtifactMetadata(BaseModel):
    outputs: list[ConsoleOutput] = Field(default_factory=list)
    previewMode: bool = False


class Chapter(BaseModel):
    id: str
    bookId: str | None = None
    title: str = ""
    content: str = ""
    wordCount: int = 0
    chapterNumber: int = 1


class BookArtifactMetadata(BaseModel):
    suggestions: list[Suggestion] = Field(default_factory=list)
    chapters: list[Chapter] = Field(default_factory=list)
    currentChapter: int = Field(
        default=1,
        ge=1,
        description="1-based position of the chapter being shown",
    )
    bookTitle: str = "Untitled Book"
    author: str = ""
    genre: str = ""
    totalWords: int = 0


ArtifactMetadata = TextArtifactMetadata | CodeArtifactMetadata | BookArtifactMetadata
