"""
Message tool rendering endpoint.
"""

from fastapi import APIRouter, HTTPException, Query

from core import NotFoundError, RendererDescriptor

from ...state import get_session


router = APIRouter()


@router.get("/session/{sessionID}/message/{messageID}/tools")
async def render_message_tools_route(
    sessionID: str, messageID: str, claim_memory: bool = Query(False)
) -> list[RendererDescriptor]:
    """Renderer descriptors for every tool call in a message."""
    try:
        return get_session(sessionID).render_tools(messageID, claim_memory=claim_memory)
    except NotFoundError as e:
        if e.resource == "Session":
            raise HTTPException(status_code=404, detail="Session not found")
        raise HTTPException(status_code=404, detail="Message not found")
