"""
Book artifact: chapter-based writing with navigation and word counts.

Chapter positions are 1-based everywhere outside this module, matching what
the persistence layer stores. to_array_index() is the only place a chapter
number becomes a list index; nothing else should subtract one.
"""

import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from ..accumulator import apply_suggestion, parse_suggestion
from ..content import ContentEnvelope, read_book_reference
from ..exceptions import InvalidOperationError, TransportError
from ..models import (
    Artifact,
    ArtifactMetadata,
    BookArtifactMetadata,
    Chapter,
    StreamPart,
)
from ..stream_parser import StreamEventKind, classify
from .base import ArtifactDefinition, register_artifact

if TYPE_CHECKING:
    from client.api_client import ApiClient

logger = logging.getLogger(__name__)


def to_array_index(chapter_number: int) -> int:
    """Convert a 1-based chapter position to a list index."""
    if chapter_number < 1:
        raise ValueError(f"Chapter numbers start at 1, got {chapter_number}")
    return chapter_number - 1


def to_chapter_number(index: int) -> int:
    """Convert a list index back to a 1-based chapter position."""
    if index < 0:
        raise ValueError(f"Chapter index cannot be negative, got {index}")
    return index + 1


def count_words(text: str) -> int:
    return len(text.split())


def current_chapter(metadata: BookArtifactMetadata) -> Chapter | None:
    """Return the chapter being shown, or None for a book with no chapters."""
    if not metadata.chapters:
        return None
    index = to_array_index(metadata.currentChapter)
    if index >= len(metadata.chapters):
        return metadata.chapters[0]
    return metadata.chapters[index]


def with_word_count(metadata: BookArtifactMetadata, content: str) -> BookArtifactMetadata:
    """Record the streamed content's word count on the current chapter."""
    words = count_words(content)
    if not metadata.chapters:
        return metadata.model_copy(update={"totalWords": words})

    index = to_array_index(metadata.currentChapter)
    if index >= len(metadata.chapters):
        logger.warning(
            "Current chapter %d is past the last of %d chapters",
            metadata.currentChapter,
            len(metadata.chapters),
        )
        return metadata
    chapters = list(metadata.chapters)
    chapters[index] = chapters[index].model_copy(update={"wordCount": words})
    return metadata.model_copy(
        update={"chapters": chapters, "totalWords": sum(c.wordCount for c in chapters)}
    )


def select_chapter(metadata: BookArtifactMetadata, chapter_number: int) -> BookArtifactMetadata:
    """
    Show a specific chapter.

    Raises:
        InvalidOperationError: If the chapter does not exist
    """
    if not 1 <= chapter_number <= len(metadata.chapters):
        raise InvalidOperationError(
            f"Chapter {chapter_number} does not exist (book has {len(metadata.chapters)})"
        )
    if chapter_number == metadata.currentChapter:
        return metadata
    return metadata.model_copy(update={"currentChapter": chapter_number})


def next_chapter(metadata: BookArtifactMetadata) -> BookArtifactMetadata:
    """Advance one chapter; a no-op on the last chapter."""
    if metadata.currentChapter >= len(metadata.chapters):
        return metadata
    return metadata.model_copy(update={"currentChapter": metadata.currentChapter + 1})


def previous_chapter(metadata: BookArtifactMetadata) -> BookArtifactMetadata:
    """Go back one chapter; a no-op on chapter 1."""
    if metadata.currentChapter <= 1:
        return metadata
    return metadata.model_copy(update={"currentChapter": metadata.currentChapter - 1})


def build_chapters(raw_chapters: list[dict[str, Any]]) -> list[Chapter]:
    """Normalise chapter rows from the books endpoint, ordered by chapter number."""
    chapters = []
    for index, row in enumerate(raw_chapters):
        content = row.get("content") or ""
        try:
            chapters.append(
                Chapter(
                    id=str(row.get("id") or f"chapter-{index}"),
                    bookId=row.get("bookId"),
                    title=row.get("chapterTitle") or row.get("title") or f"Chapter {index + 1}",
                    content=content,
                    wordCount=count_words(content),
                    chapterNumber=row.get("chapterNumber") or 1,
                )
            )
        except ValidationError as e:
            logger.warning("Skipping malformed chapter row %d: %s", index, e)
    return sorted(chapters, key=lambda c: c.chapterNumber)


def load_chapters(
    metadata: BookArtifactMetadata,
    chapters: list[Chapter],
    book_title: str | None = None,
    target_chapter_number: int | None = None,
) -> BookArtifactMetadata:
    """
    Replace the book's chapters.

    Opens the chapter whose stored chapterNumber matches
    `target_chapter_number`; otherwise the newest (last) chapter.
    """
    update: dict[str, Any] = {}
    if book_title:
        update["bookTitle"] = book_title
    if chapters:
        position = len(chapters)
        if target_chapter_number is not None:
            for index, chapter in enumerate(chapters):
                if chapter.chapterNumber == target_chapter_number:
                    position = to_chapter_number(index)
                    break
        update.update(
            chapters=chapters,
            totalWords=sum(c.wordCount for c in chapters),
            currentChapter=position,
        )
    return metadata.model_copy(update=update)


class BookArtifact(ArtifactDefinition):
    kind = "book"
    description = (
        "Specialized for book writing with chapter navigation, table of contents, "
        "and book-like styling."
    )

    def initial_metadata(self) -> BookArtifactMetadata:
        return BookArtifactMetadata()

    async def initialize(
        self, artifact: Artifact, api: "ApiClient | None" = None
    ) -> tuple[Artifact, ArtifactMetadata]:
        metadata = self.initial_metadata()
        if api is None:
            return artifact, metadata

        if artifact.documentId != "init":
            try:
                suggestions = await api.get_suggestions(artifact.documentId)
            except TransportError as e:
                logger.warning("Could not load suggestions for %s: %s", artifact.documentId, e)
            else:
                metadata = metadata.model_copy(update={"suggestions": suggestions})

        if artifact.content:
            metadata = await self.load_book(artifact, metadata, api)
        return artifact, metadata

    async def load_book(
        self, artifact: Artifact, metadata: BookArtifactMetadata, api: "ApiClient"
    ) -> BookArtifactMetadata:
        """Fetch the chapters of the book the artifact's content refers to."""
        reference = read_book_reference(ContentEnvelope.from_artifact(artifact))
        try:
            if reference.bookId:
                rows = await api.get_book_chapters(book_id=reference.bookId)
            else:
                rows = await api.get_book_chapters(book_title=reference.bookTitle)
        except TransportError as e:
            logger.warning("Failed to fetch chapters for %r: %s", reference.bookTitle, e)
            rows = []
        return load_chapters(
            metadata,
            build_chapters(rows),
            book_title=reference.bookTitle,
            target_chapter_number=reference.chapterNumber,
        )

    def on_stream_part(
        self, artifact: Artifact, metadata: ArtifactMetadata, frame: StreamPart
    ) -> tuple[Artifact, ArtifactMetadata]:
        kind = classify(frame.type)
        if kind is StreamEventKind.SUGGESTION:
            return artifact, apply_suggestion(metadata, parse_suggestion(frame))
        if kind is StreamEventKind.TEXT_DELTA:
            artifact, metadata = super().on_stream_part(artifact, metadata, frame)
            return artifact, with_word_count(metadata, artifact.content)
        return artifact, metadata


book_artifact = register_artifact(BookArtifact())
