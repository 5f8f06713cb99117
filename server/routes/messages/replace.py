"""
Replace message endpoint.
"""

from fastapi import APIRouter, HTTPException

from core import Message, NotFoundError

from ...requests import ReplaceMessageRequest
from ...state import get_session


router = APIRouter()


@router.put("/session/{sessionID}/message/{messageID}")
async def replace_message_route(
    sessionID: str, messageID: str, request: ReplaceMessageRequest
) -> Message:
    """Replace an edited message. Every message after it is removed."""
    try:
        session = get_session(sessionID)
        return await session.replace_message(
            messageID, Message(id=messageID, role=request.role, parts=request.parts)
        )
    except NotFoundError as e:
        if e.resource == "Session":
            raise HTTPException(status_code=404, detail="Session not found")
        raise HTTPException(status_code=404, detail="Message not found")
