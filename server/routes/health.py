"""
Health check endpoint.
"""

from fastapi import APIRouter

from ..state import sessions


router = APIRouter()


@router.get("/health")
async def health() -> dict:
    """Health check endpoint."""
    return {"status": "ok", "sessions": len(sessions)}
