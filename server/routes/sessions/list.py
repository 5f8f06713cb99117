"""
List sessions endpoint.
"""

from fastapi import APIRouter

from ...state import sessions


router = APIRouter()


@router.get("/session")
async def list_sessions_route() -> list[dict]:
    """List sessions with their message counts."""
    return [
        {"id": s.id, "title": s.title, "messageCount": len(s.messages)}
        for s in sessions.values()
    ]
