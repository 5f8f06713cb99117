"""
Tests for the book artifact: chapter numbering, navigation and loading.
"""

import httpx
import pytest

from client.api_client import ApiClient
from core.artifacts import ArtifactState, reduce_state
from core.artifacts.book import (
    book_artifact,
    build_chapters,
    current_chapter,
    load_chapters,
    next_chapter,
    previous_chapter,
    select_chapter,
    to_array_index,
    to_chapter_number,
    with_word_count,
)
from core.exceptions import InvalidOperationError
from core.models import Artifact, BookArtifactMetadata, Chapter, StreamPart


@pytest.fixture
def book(chapter_rows) -> BookArtifactMetadata:
    return load_chapters(BookArtifactMetadata(), build_chapters(chapter_rows), target_chapter_number=1)


class TestChapterNumbers:
    """Test conversion between chapter numbers and list indices."""

    @pytest.mark.parametrize("number", [1, 2, 7])
    def test_round_trip(self, number):
        assert to_chapter_number(to_array_index(number)) == number

    def test_zero_is_not_a_chapter(self):
        with pytest.raises(ValueError):
            to_array_index(0)

    def test_negative_index(self):
        with pytest.raises(ValueError):
            to_chapter_number(-1)

    def test_metadata_rejects_zero(self):
        with pytest.raises(ValueError):
            BookArtifactMetadata(currentChapter=0)


class TestBuildChapters:
    """Test normalising chapter rows."""

    def test_sorted_by_chapter_number(self, chapter_rows):
        chapters = build_chapters(chapter_rows)
        assert [c.chapterNumber for c in chapters] == [1, 2, 3]
        assert chapters[0].title == "The Harbour"
        assert chapters[0].wordCount == 5

    def test_fallback_title_and_id(self):
        chapters = build_chapters([{"content": "one two"}])
        assert chapters[0].id == "chapter-0"
        assert chapters[0].title == "Chapter 1"

    def test_malformed_row_is_skipped(self):
        chapters = build_chapters([{"id": "a", "chapterNumber": "first"}, {"id": "b"}])
        assert [c.id for c in chapters] == ["b"]


class TestLoadChapters:
    """Test choosing the chapter to open."""

    def test_target_chapter(self, chapter_rows):
        metadata = load_chapters(
            BookArtifactMetadata(), build_chapters(chapter_rows), "Tides", target_chapter_number=2
        )
        assert metadata.currentChapter == 2
        assert current_chapter(metadata).title == "The Storm"
        assert metadata.bookTitle == "Tides"

    def test_defaults_to_last_chapter(self, chapter_rows):
        metadata = load_chapters(BookArtifactMetadata(), build_chapters(chapter_rows))
        assert metadata.currentChapter == 3

    def test_total_words(self, book):
        assert book.totalWords == 5 + 5 + 3

    def test_no_chapters(self):
        metadata = load_chapters(BookArtifactMetadata(), [], "Empty")
        assert metadata.chapters == []
        assert current_chapter(metadata) is None


class TestNavigation:
    """Test chapter navigation."""

    def test_next_and_previous(self, book):
        forward = next_chapter(book)
        assert forward.currentChapter == 2
        assert previous_chapter(forward).currentChapter == 1

    def test_previous_on_first_is_noop(self, book):
        assert previous_chapter(book) is book

    def test_next_on_last_is_noop(self, book):
        last = select_chapter(book, 3)
        assert next_chapter(last) is last

    def test_select_out_of_range(self, book):
        with pytest.raises(InvalidOperationError):
            select_chapter(book, 4)
        with pytest.raises(InvalidOperationError):
            select_chapter(book, 0)

    def test_select_current_is_noop(self, book):
        assert select_chapter(book, 1) is book

    def test_current_chapter_out_of_range_falls_back(self, book):
        stale = book.model_copy(update={"currentChapter": 9})
        assert current_chapter(stale).chapterNumber == 1


class TestWordCount:
    """Test word counting while streaming."""

    def test_updates_current_chapter(self, book):
        metadata = with_word_count(select_chapter(book, 2), "one two three four five six")
        assert metadata.chapters[1].wordCount == 6
        assert metadata.totalWords == 5 + 6 + 3

    def test_no_chapters_counts_total(self):
        metadata = with_word_count(BookArtifactMetadata(), "a b c")
        assert metadata.totalWords == 3

    def test_stream_updates_word_count(self, book):
        state = ArtifactState(artifact=Artifact(kind="book", status="streaming"), metadata=book)
        state = reduce_state(state, StreamPart(type="text-delta", content="One two"))
        assert state.metadata.chapters[0].wordCount == 2


class TestInitialize:
    """Test loading a book through the API."""

    @pytest.mark.asyncio
    async def test_loads_chapters_by_id(self, chapter_rows):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if request.url.path == "/api/suggestions":
                return httpx.Response(200, json=[{"id": "s1"}])
            return httpx.Response(200, json=chapter_rows)

        artifact = Artifact(
            documentId="doc_1",
            kind="book",
            contentType="application/json",
            content='{"bookId": "b1", "bookTitle": "Tides", "chapterNumber": 2}',
        )
        async with ApiClient(transport=httpx.MockTransport(handler)) as api:
            _, metadata = await book_artifact.initialize(artifact, api)

        assert metadata.currentChapter == 2
        assert metadata.bookTitle == "Tides"
        assert [s.id for s in metadata.suggestions] == ["s1"]
        assert requests[-1].url.params["bookId"] == "b1"

    @pytest.mark.asyncio
    async def test_failed_fetch_leaves_book_empty(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="down")

        artifact = Artifact(kind="book", content="# Tides")
        async with ApiClient(transport=httpx.MockTransport(handler)) as api:
            _, metadata = await book_artifact.initialize(artifact, api)

        assert metadata.chapters == []
        assert metadata.bookTitle == "Tides"

    @pytest.mark.asyncio
    async def test_without_api(self):
        artifact, metadata = await book_artifact.initialize(Artifact(kind="book", content="# T"))
        assert metadata == BookArtifactMetadata()


def test_chapter_defaults():
    chapter = Chapter(id="c1")
    assert chapter.chapterNumber == 1
    assert chapter.wordCount == 0
