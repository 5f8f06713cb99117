"""
Delete session endpoint.
"""

import logging

from fastapi import APIRouter, HTTPException

from core import NotFoundError

from ...state import delete_session

logger = logging.getLogger(__name__)

router = APIRouter()


@router.delete("/session/{sessionID}")
async def delete_session_route(sessionID: str) -> bool:
    """Delete a session, cancelling its in-flight requests."""
    try:
        await delete_session(sessionID)
    except NotFoundError:
        logger.debug("Session not found for deletion: %s", sessionID)
        raise HTTPException(status_code=404, detail="Session not found")
    return True
