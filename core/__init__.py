"""
Core business logic package.

This package contains the transport-agnostic chat pipeline: stream parsing,
message accumulation, tool result dispatch, artifact reducers and book
pagination. The server package provides HTTP bindings around it.
"""

from .accumulator import (
    MessageAccumulator,
    apply_suggestion,
    apply_text_delta,
    apply_tool_state,
)
from .artifacts import (
    ArtifactDefinition,
    ArtifactState,
    get_artifact_definition,
    reduce_artifact,
    reduce_state,
    to_array_index,
    to_chapter_number,
)
from .autosave import Debouncer
from .content import ContentEnvelope
from .dispatcher import ToolName, dispatch, tool_label, tool_summary
from .events import Event, EventBus, NullEventBus
from .exceptions import (
    CoreError,
    InvalidOperationError,
    MalformedEventError,
    NotFoundError,
    TransportError,
    UsageLimitError,
)
from .lifecycle import LifecycleScope, ScopeClosedError
from .models import (
    Artifact,
    FilePart,
    Message,
    Part,
    ReasoningPart,
    RendererDescriptor,
    StreamPart,
    TextPart,
    ToolPart,
    ToolState,
    gen_id,
)
from .paginator import SpreadNavigator, is_image_only_page, paginate, split_segments
from .session import ChatSession
from .stream_parser import StreamEventKind, StreamEventParser, classify

__all__ = [
    # Events
    "Event",
    "EventBus",
    "NullEventBus",
    # Exceptions
    "CoreError",
    "NotFoundError",
    "InvalidOperationError",
    "MalformedEventError",
    "TransportError",
    "UsageLimitError",
    # Models
    "Artifact",
    "Message",
    "Part",
    "TextPart",
    "ReasoningPart",
    "ToolPart",
    "FilePart",
    "ToolState",
    "StreamPart",
    "RendererDescriptor",
    "gen_id",
    # Stream parsing
    "StreamEventKind",
    "StreamEventParser",
    "classify",
    # Accumulation
    "MessageAccumulator",
    "apply_text_delta",
    "apply_suggestion",
    "apply_tool_state",
    # Dispatch
    "ToolName",
    "dispatch",
    "tool_label",
    "tool_summary",
    # Artifacts
    "ArtifactDefinition",
    "ArtifactState",
    "ContentEnvelope",
    "get_artifact_definition",
    "reduce_artifact",
    "reduce_state",
    "to_array_index",
    "to_chapter_number",
    # Pagination
    "paginate",
    "split_segments",
    "is_image_only_page",
    "SpreadNavigator",
    # Session
    "ChatSession",
    "Debouncer",
    "LifecycleScope",
    "ScopeClosedError",
]
