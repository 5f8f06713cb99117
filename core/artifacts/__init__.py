"""
Artifact kinds.

Importing this package registers the text, code and book definitions.
"""

from .base import (
    ARTIFACT_KINDS,
    CONTROL_KINDS,
    ArtifactDefinition,
    ArtifactState,
    get_artifact_definition,
    reduce_artifact,
    reduce_state,
    register_artifact,
)
from .book import (
    BookArtifact,
    book_artifact,
    build_chapters,
    current_chapter,
    load_chapters,
    next_chapter,
    previous_chapter,
    select_chapter,
    with_word_count,
    to_array_index,
    to_chapter_number,
)
from .code import (
    CodeArtifact,
    clear_outputs,
    code_artifact,
    complete_run,
    detect_language,
    execute_python,
    fail_run,
    mark_loading_packages,
    start_run,
    toggle_preview,
)
from .text import TextArtifact, text_artifact

__all__ = [
    "ARTIFACT_KINDS",
    "CONTROL_KINDS",
    "ArtifactDefinition",
    "ArtifactState",
    "get_artifact_definition",
    "reduce_artifact",
    "reduce_state",
    "register_artifact",
    "TextArtifact",
    "text_artifact",
    "CodeArtifact",
    "code_artifact",
    "detect_language",
    "execute_python",
    "start_run",
    "mark_loading_packages",
    "complete_run",
    "fail_run",
    "clear_outputs",
    "toggle_preview",
    "BookArtifact",
    "book_artifact",
    "build_chapters",
    "current_chapter",
    "load_chapters",
    "next_chapter",
    "previous_chapter",
    "select_chapter",
    "with_word_count",
    "to_array_index",
    "to_chapter_number",
]
