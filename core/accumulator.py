"""
Message accumulation.

Folds stream frames into immutable message and artifact snapshots. Every
operation returns a new object (or the unchanged input), so callers can tell
whether anything changed by identity comparison.
"""

import logging
from typing import Any, TypeVar

from pydantic import ValidationError

from .constants import VISIBILITY_WINDOW_MAX, VISIBILITY_WINDOW_MIN
from .exceptions import MalformedEventError
from .models import (
    Artifact,
    Message,
    Part,
    ReasoningPart,
    StreamPart,
    Suggestion,
    TextPart,
    ToolPart,
    is_forward_transition,
)
from .stream_parser import StreamEventKind, StreamEventParser, parse_tool_frame

logger = logging.getLogger(__name__)

M = TypeVar("M")


def apply_text_delta(artifact: Artifact, delta: str) -> Artifact:
    """
    Append a text delta to an artifact's content.

    The panel is revealed once, while a streaming artifact's content is
    inside the visibility window, so very short fragments never flash it
    open. Outside the window visibility is left as it was.
    """
    content = artifact.content + delta
    is_visible = artifact.isVisible
    if (
        artifact.status == "streaming"
        and VISIBILITY_WINDOW_MIN < len(content) < VISIBILITY_WINDOW_MAX
    ):
        is_visible = True
    return artifact.model_copy(
        update={"content": content, "isVisible": is_visible, "status": "streaming"}
    )


def apply_suggestion(metadata: M, suggestion: Suggestion) -> M:
    """Append a suggestion unless one with the same id is already present."""
    existing = metadata.suggestions  # type: ignore[attr-defined]
    if any(s.id == suggestion.id for s in existing):
        return metadata
    return metadata.model_copy(  # type: ignore[attr-defined]
        update={"suggestions": [*existing, suggestion]}
    )


def parse_suggestion(frame: StreamPart) -> Suggestion:
    """
    Validate the payload of a `suggestion` frame.

    Raises:
        MalformedEventError: If the payload is not a suggestion
    """
    if isinstance(frame.content, Suggestion):
        return frame.content
    if not isinstance(frame.content, dict):
        raise MalformedEventError(frame.type, "suggestion payload must be an object")
    try:
        return Suggestion.model_validate(frame.content)
    except ValidationError as e:
        raise MalformedEventError(frame.type, str(e)) from e


def apply_tool_state(parts: list[Part], update: ToolPart) -> list[Part]:
    """
    Merge a tool part into a parts list by its toolCallId.

    A new call id is appended. A known call id is replaced in place, keeping
    its position. A transition that would move the call backwards (e.g. from
    output-available to input-streaming) is ignored and the input list is
    returned unchanged.
    """
    for index, part in enumerate(parts):
        if not isinstance(part, ToolPart) or part.toolCallId != update.toolCallId:
            continue
        if not is_forward_transition(part.state, update.state):
            logger.warning(
                "Ignoring %s -> %s for tool call %s",
                part.state.value,
                update.state.value,
                update.toolCallId,
            )
            return parts
        merged = update
        if not update.input and part.input:
            merged = update.model_copy(update={"input": part.input})
        return [*parts[:index], merged, *parts[index + 1:]]
    return [*parts, update]


class MessageAccumulator:
    """
    Folds the frames of one assistant message into its parts list.

    Text deltas extend the trailing text part; a tool or reasoning part in
    between starts a new one. Reasoning fragments repeated for the same step
    are dropped. If handling a frame fails, the message keeps its last good
    state and later frames still apply.
    """

    def __init__(self, message: Message) -> None:
        self._message = message
        self._seen_reasoning: set[tuple[str | None, str]] = {
            (p.step, p.text) for p in message.parts if isinstance(p, ReasoningPart)
        }
        self._parser = StreamEventParser()
        self._parser.on(StreamEventKind.TEXT_DELTA, self._on_text_delta)
        self._parser.on(StreamEventKind.REASONING, self._on_reasoning)
        self._parser.on(StreamEventKind.TOOL, self._on_tool)

    @property
    def message(self) -> Message:
        return self._message

    def apply(self, frame: StreamPart | dict[str, Any]) -> Message:
        """Apply one frame and return the resulting message."""
        self._parser.route(frame)
        return self._message

    def apply_all(self, frames: list[StreamPart | dict[str, Any]]) -> Message:
        for frame in frames:
            self._parser.route(frame)
        return self._message

    def _set_parts(self, parts: list[Part]) -> None:
        if parts is not self._message.parts:
            self._message = self._message.model_copy(update={"parts": parts})

    def _on_text_delta(self, frame: StreamPart) -> None:
        if not isinstance(frame.content, str):
            raise MalformedEventError(frame.type, "text delta must be a string")
        parts = self._message.parts
        if parts and isinstance(parts[-1], TextPart):
            last = parts[-1]
            self._set_parts([*parts[:-1], last.model_copy(update={"text": last.text + frame.content})])
        else:
            self._set_parts([*parts, TextPart(text=frame.content)])

    def _on_reasoning(self, frame: StreamPart) -> None:
        content = frame.content
        if isinstance(content, str):
            text, step = content, None
        elif isinstance(content, dict) and isinstance(content.get("text"), str):
            text, step = content["text"], content.get("step")
        else:
            raise MalformedEventError(frame.type, "reasoning needs text")

        key = (step, text)
        if key in self._seen_reasoning:
            logger.debug("Skipping duplicate reasoning for step %s", step)
            return
        self._set_parts([*self._message.parts, ReasoningPart(text=text, step=step)])
        self._seen_reasoning.add(key)

    def _on_tool(self, frame: StreamPart) -> None:
        self._set_parts(apply_tool_state(self._message.parts, parse_tool_frame(frame)))
