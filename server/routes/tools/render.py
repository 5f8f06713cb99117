"""
Render tool endpoint.
"""

from fastapi import APIRouter

from core import ToolState, dispatch, tool_summary

from ...requests import RenderToolRequest


router = APIRouter()


@router.post("/tool/render")
async def render_tool(request: RenderToolRequest) -> dict:
    """Choose the renderer for one tool call, plus its status line when finished."""
    descriptor = dispatch(
        request.toolName,
        request.state,
        input=request.input,
        output=request.output,
        tool_call_id=request.toolCallId,
        error_text=request.errorText,
    )
    summary = None
    if request.state is ToolState.OUTPUT_AVAILABLE:
        summary = tool_summary(request.toolName, request.output)
    return {"descriptor": descriptor.model_dump(mode="json"), "summary": summary}
