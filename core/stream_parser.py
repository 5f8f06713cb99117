"""
Stream event parsing.

Classifies incoming stream frames by their `type` tag and routes each one to
exactly one registered handler. Unknown types are ignored so that newer
producers can add frame kinds without breaking older consumers. Malformed
frames and handler failures are logged and dropped; they never propagate to
the caller, since one bad frame must not abort the rest of the stream.
"""

import logging
from enum import Enum
from typing import Any, Callable

from pydantic import ValidationError

from .exceptions import MalformedEventError
from .models import StreamPart, ToolPart

logger = logging.getLogger(__name__)

TOOL_TYPE_PREFIX = "tool-"
# Frames addressed to the artifact panel rather than the message
DATA_TYPE_PREFIX = "data-"


class StreamEventKind(str, Enum):
    """Recognised frame kinds."""

    TEXT_DELTA = "text-delta"
    CODE_DELTA = "code-delta"
    SUGGESTION = "suggestion"
    REASONING = "reasoning"
    TOOL = "tool"
    ID = "id"
    TITLE = "title"
    KIND = "kind"
    CONTENT_TYPE = "content-type"
    CLEAR = "clear"
    STATUS = "status"
    FINISH = "finish"
    ERROR = "error"
    UNKNOWN = "unknown"


_KINDS_BY_TYPE = {
    kind.value: kind
    for kind in StreamEventKind
    if kind not in (StreamEventKind.TOOL, StreamEventKind.UNKNOWN)
}

StreamHandler = Callable[[StreamPart], None]


def classify(frame_type: str) -> StreamEventKind:
    """Map a frame's `type` tag to its kind."""
    if frame_type.startswith(TOOL_TYPE_PREFIX) and len(frame_type) > len(TOOL_TYPE_PREFIX):
        return StreamEventKind.TOOL
    return _KINDS_BY_TYPE.get(frame_type, StreamEventKind.UNKNOWN)


def parse_frame(raw: StreamPart | dict[str, Any]) -> StreamPart:
    """
    Validate a raw frame.

    Raises:
        MalformedEventError: If the frame has no usable `type`
    """
    if isinstance(raw, StreamPart):
        return raw
    if not isinstance(raw, dict):
        raise MalformedEventError("unknown", f"expected an object, got {type(raw).__name__}")
    try:
        return StreamPart.model_validate(raw)
    except ValidationError as e:
        raise MalformedEventError(str(raw.get("type", "unknown")), str(e)) from e


def artifact_frame(raw: StreamPart | dict[str, Any]) -> StreamPart | None:
    """
    Return the artifact frame carried by a `data-<type>` frame.

    The prefix is stripped, so `data-title` becomes a `title` frame. Frames
    without the prefix belong to the message and yield None.

    Raises:
        MalformedEventError: If the frame has no usable `type`
    """
    frame = parse_frame(raw)
    if not frame.type.startswith(DATA_TYPE_PREFIX) or len(frame.type) == len(DATA_TYPE_PREFIX):
        return None
    return frame.model_copy(update={"type": frame.type[len(DATA_TYPE_PREFIX):]})


def parse_tool_frame(frame: StreamPart) -> ToolPart:
    """
    Build a ToolPart from a `tool-<name>` frame.

    Raises:
        MalformedEventError: If the payload is not a valid tool part
    """
    tool_name = frame.type[len(TOOL_TYPE_PREFIX):]
    if not isinstance(frame.content, dict):
        raise MalformedEventError(frame.type, "tool payload must be an object")
    try:
        return ToolPart.model_validate({**frame.content, "toolName": tool_name})
    except ValidationError as e:
        raise MalformedEventError(frame.type, str(e)) from e


class StreamEventParser:
    """Routes frames to one handler per kind."""

    def __init__(self) -> None:
        self._handlers: dict[StreamEventKind, StreamHandler] = {}

    def on(self, kind: StreamEventKind, handler: StreamHandler) -> None:
        """Register the handler for a frame kind, replacing any previous one."""
        if kind is StreamEventKind.UNKNOWN:
            raise ValueError("Cannot register a handler for unknown frames")
        self._handlers[kind] = handler

    def handles(self, kind: StreamEventKind) -> bool:
        return kind in self._handlers

    def route(self, raw: StreamPart | dict[str, Any]) -> bool:
        """
        Route one frame to its handler.

        Args:
            raw: The frame, validated or not

        Returns:
            True if a handler ran to completion, False if the frame was
            ignored or dropped
        """
        try:
            frame = parse_frame(raw)
        except MalformedEventError as e:
            logger.warning("Dropping frame: %s", e)
            return False

        kind = classify(frame.type)
        handler = self._handlers.get(kind)
        if handler is None:
            logger.debug("Ignoring %s frame", frame.type)
            return False

        try:
            handler(frame)
        except MalformedEventError as e:
            logger.warning("Dropping frame: %s", e)
            return False
        except Exception:
            logger.exception("Handler for %s frame failed", frame.type)
            return False
        return True
