"""
HTTP request models for the API.

These are Pydantic models for validating and parsing API requests.
"""

from .artifact_requests import (
    ChapterNavigationRequest,
    EditArtifactRequest,
    OpenArtifactRequest,
    RunCodeRequest,
    SpreadNavigationRequest,
)
from .chat_request import ChatRequest
from .create_session_request import CreateSessionRequest
from .paginate_request import PaginateRequest
from .render_tool_request import RenderToolRequest
from .replace_message_request import ReplaceMessageRequest
from .stream_request import StreamFramesRequest

__all__ = [
    # Session requests
    "CreateSessionRequest",
    # Message requests
    "ChatRequest",
    "StreamFramesRequest",
    "ReplaceMessageRequest",
    # Artifact requests
    "OpenArtifactRequest",
    "EditArtifactRequest",
    "ChapterNavigationRequest",
    "SpreadNavigationRequest",
    "RunCodeRequest",
    # Stateless requests
    "PaginateRequest",
    "RenderToolRequest",
]
