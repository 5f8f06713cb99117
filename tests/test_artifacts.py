"""
Tests for the artifact reducer and the text artifact.
"""

import pytest

from core.artifacts import (
    ArtifactState,
    get_artifact_definition,
    reduce_artifact,
    reduce_state,
)
from core.content import ContentEnvelope, extract_title, read_book_reference
from core.exceptions import MalformedEventError
from core.models import (
    Artifact,
    BookArtifactMetadata,
    CodeArtifactMetadata,
    StreamPart,
    TextArtifactMetadata,
)


def frame(type: str, content=None) -> StreamPart:
    return StreamPart(type=type, content=content)


class TestRegistry:
    """Test artifact kind registration."""

    @pytest.mark.parametrize(
        "kind,metadata_type",
        [
            ("text", TextArtifactMetadata),
            ("code", CodeArtifactMetadata),
            ("book", BookArtifactMetadata),
        ],
    )
    def test_kinds_registered(self, kind, metadata_type):
        definition = get_artifact_definition(kind)
        assert definition.kind == kind
        assert isinstance(definition.initial_metadata(), metadata_type)

    def test_unknown_kind(self):
        with pytest.raises(KeyError):
            get_artifact_definition("spreadsheet")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("kind", ["text", "code"])
    async def test_initialize_leaves_visibility(self, kind):
        artifact, metadata = await get_artifact_definition(kind).initialize(
            Artifact(kind=kind, content="print(1)")
        )
        assert artifact.isVisible is False
        assert metadata == get_artifact_definition(kind).initial_metadata()


class TestControlFrames:
    """Test frames that apply to every artifact kind."""

    def test_id_starts_streaming(self):
        artifact = reduce_artifact(Artifact(), frame("id", "doc_1"))
        assert artifact.documentId == "doc_1"
        assert artifact.status == "streaming"

    def test_clear_empties_content(self):
        artifact = reduce_artifact(Artifact(content="old"), frame("clear"))
        assert artifact.content == ""

    def test_finish_goes_idle(self):
        artifact = reduce_artifact(Artifact(status="streaming"), frame("finish"))
        assert artifact.status == "idle"

    def test_error_shows_panel(self):
        artifact = reduce_artifact(Artifact(status="streaming"), frame("error", "oops"))
        assert artifact.status == "idle"
        assert artifact.isVisible is True

    def test_unknown_kind_is_malformed(self):
        with pytest.raises(MalformedEventError):
            reduce_artifact(Artifact(), frame("kind", "spreadsheet"))

    def test_content_type(self):
        artifact = reduce_artifact(Artifact(), frame("content-type", "application/json"))
        assert artifact.contentType == "application/json"

    def test_non_control_frame_is_unchanged(self):
        artifact = Artifact()
        assert reduce_artifact(artifact, frame("text-delta", "x")) is artifact


class TestReduceState:
    """Test the combined artifact and metadata reducer."""

    def test_kind_switch_resets_metadata(self):
        state = ArtifactState.for_kind("text")
        state = reduce_state(state, frame("kind", "code"))
        assert state.artifact.kind == "code"
        assert isinstance(state.metadata, CodeArtifactMetadata)

    def test_unchanged_state_is_same_object(self):
        state = ArtifactState.for_kind("text")
        assert reduce_state(state, frame("sparkle", "x")) is state

    def test_text_delta_appends(self):
        state = ArtifactState.for_kind("text")
        state = reduce_state(state, frame("text-delta", "Hello "))
        state = reduce_state(state, frame("text-delta", "there"))
        assert state.artifact.content == "Hello there"

    def test_text_suggestions_deduplicate(self):
        state = ArtifactState.for_kind("text")
        suggestion = {"id": "s1", "originalText": "teh", "suggestedText": "the"}
        state = reduce_state(state, frame("suggestion", suggestion))
        again = reduce_state(state, frame("suggestion", suggestion))

        assert again is state
        assert [s.id for s in state.metadata.suggestions] == ["s1"]

    def test_malformed_suggestion(self):
        state = ArtifactState.for_kind("text")
        with pytest.raises(MalformedEventError):
            reduce_state(state, frame("suggestion", "not an object"))


class TestContentEnvelope:
    """Test explicit content typing for artifact bodies."""

    def test_json_reference(self):
        envelope = ContentEnvelope(
            content_type="application/json",
            body='{"bookId": "b1", "bookTitle": "Tides", "chapterNumber": 2}',
        )
        reference = read_book_reference(envelope)
        assert reference.bookId == "b1"
        assert reference.chapterNumber == 2

    def test_plain_text_starting_with_brace_is_not_parsed(self):
        envelope = ContentEnvelope(content_type="text/plain", body='{"bookId": "b1"}')
        reference = read_book_reference(envelope)
        assert reference.bookId is None
        assert reference.bookTitle == "Untitled Book"

    def test_markdown_heading_title(self):
        envelope = ContentEnvelope(content_type="text/markdown", body="# Tides\n\nOnce upon a time")
        assert read_book_reference(envelope).bookTitle == "Tides"

    def test_unreadable_json_reference(self):
        envelope = ContentEnvelope(content_type="application/json", body="{not json")
        assert read_book_reference(envelope).bookTitle == "Untitled Book"

    def test_json_body_requires_json_type(self):
        with pytest.raises(MalformedEventError):
            ContentEnvelope(body="{}").json_body()

    def test_book_suffix_title(self):
        assert extract_title("The Lost Fox - A Children's Book") == "The Lost Fox"
