"""
Tool catalogue.

Describes the tools the dispatcher can draw, for clients that want to know
which calls get a dedicated card and which fall back to the generic view.
"""

from core.dispatcher import PROGRESS_RENDERERS, RESULT_RENDERERS, ToolName, tool_label


def get_tool_info() -> list[dict]:
    """Get information about every tool the dispatcher knows."""
    return [
        {
            "id": tool.value,
            "name": tool.name,
            "label": tool_label(tool.value),
            "hasResultRenderer": tool in RESULT_RENDERERS,
            "hasProgressRenderer": tool in PROGRESS_RENDERERS,
        }
        for tool in ToolName
    ]
