"""
Create session endpoint.
"""

from fastapi import APIRouter

from ...requests import CreateSessionRequest
from ...state import create_session


router = APIRouter()


@router.post("/session")
async def create_session_route(request: CreateSessionRequest) -> dict:
    """Create a new chat session."""
    return create_session(title=request.title).to_dict()
