"""
Get message endpoint.
"""

from fastapi import APIRouter, HTTPException

from core import Message, NotFoundError

from ...state import get_session


router = APIRouter()


@router.get("/session/{sessionID}/message/{messageID}")
async def get_message_route(sessionID: str, messageID: str) -> Message:
    """Get a specific message."""
    try:
        return get_session(sessionID).get_message(messageID)
    except NotFoundError as e:
        if e.resource == "Session":
            raise HTTPException(status_code=404, detail="Session not found")
        raise HTTPException(status_code=404, detail="Message not found")
