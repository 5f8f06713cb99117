"""
Get session endpoint.
"""

import logging

from fastapi import APIRouter, HTTPException

from core import NotFoundError

from ...state import get_session

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/session/{sessionID}")
async def get_session_route(sessionID: str) -> dict:
    """Get a session with its messages and open artifact."""
    try:
        return get_session(sessionID).to_dict()
    except NotFoundError:
        logger.debug("Session not found: %s", sessionID)
        raise HTTPException(status_code=404, detail="Session not found")
