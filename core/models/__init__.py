"""
Domain models for the chat pipeline.

These are the core data structures used throughout the application.
"""

from .artifact import Artifact, ArtifactKind, ArtifactStatus
from .console_output import ConsoleOutput, ConsoleOutputContent, ConsoleStatus
from .memory import MemoryItem, normalize_memory
from .message import Message
from .metadata import (
    ArtifactMetadata,
    BookArtifactMetadata,
    Chapter,
    CodeArtifactMetadata,
    TextArtifactMetadata,
)
from .part import FilePart, Part, ReasoningPart, TextPart, ToolPart
from .render import RendererDescriptor
from .stream_part import StreamPart
from .suggestion import Suggestion
from .tool_state import IN_PROGRESS_STATES, TOOL_STATE_RANK, ToolState, is_forward_transition
from .utils import gen_id

__all__ = [
    # Utils
    "gen_id",
    # Message models
    "Message",
    "TextPart",
    "ReasoningPart",
    "ToolPart",
    "FilePart",
    "Part",
    "ToolState",
    "TOOL_STATE_RANK",
    "IN_PROGRESS_STATES",
    "is_forward_transition",
    # Stream models
    "StreamPart",
    # Artifact models
    "Artifact",
    "ArtifactKind",
    "ArtifactStatus",
    "Suggestion",
    "ConsoleOutput",
    "ConsoleOutputContent",
    "ConsoleStatus",
    "TextArtifactMetadata",
    "CodeArtifactMetadata",
    "BookArtifactMetadata",
    "Chapter",
    "ArtifactMetadata",
    # Rendering
    "RendererDescriptor",
    # Memory
    "MemoryItem",
    "normalize_memory",
]
