"""
Get tool endpoint.
"""

from fastapi import APIRouter, HTTPException

from .schemas import get_tool_info


router = APIRouter()


@router.get("/tools/{toolId}")
async def get_tool(toolId: str) -> dict:
    """Get one tool's catalogue entry."""
    for tool in get_tool_info():
        if tool["id"] == toolId:
            return tool
    raise HTTPException(status_code=404, detail="Tool not found")
