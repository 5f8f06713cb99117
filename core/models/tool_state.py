"""ToolState model."""

from enum import Enum


class ToolState(str, Enum):
    """Lifecycle of a tool invocation as reflected on its part."""

    INPUT_STREAMING = "input-streaming"
    INPUT_AVAILABLE = "input-available"
    OUTPUT_AVAILABLE = "output-available"
    OUTPUT_ERROR = "output-error"


# Both output states are terminal and share a rank, so an error may replace a
# result (and vice versa) but nothing moves back to an input state.
TOOL_STATE_RANK: dict[ToolState, int] = {
    ToolState.INPUT_STREAMING: 0,
    ToolState.INPUT_AVAILABLE: 1,
    ToolState.OUTPUT_AVAILABLE: 2,
    ToolState.OUTPUT_ERROR: 2,
}

IN_PROGRESS_STATES = frozenset({ToolState.INPUT_STREAMING, ToolState.INPUT_AVAILABLE})


def is_forward_transition(current: ToolState, new: ToolState) -> bool:
    """Return True if moving from `current` to `new` does not regress."""
    return TOOL_STATE_RANK[new] >= TOOL_STATE_RANK[current]
