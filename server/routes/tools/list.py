"""
List tools endpoint.
"""

from fastapi import APIRouter

from .schemas import get_tool_info


router = APIRouter()


@router.get("/tools")
async def list_tools() -> list[dict]:
    """List all tools the dispatcher can render."""
    return get_tool_info()
