"""
Apply stream frames endpoint.

Lets a producer push frames it received elsewhere into a session, in
batches, and returns the resulting state.
"""

import logging

from fastapi import APIRouter, HTTPException

from core import InvalidOperationError, NotFoundError

from ...logging_config import log_timing
from ...requests import StreamFramesRequest
from ...state import get_session

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/session/{sessionID}/stream")
async def apply_stream_route(sessionID: str, request: StreamFramesRequest) -> dict:
    """Fold a batch of frames into the session's message and artifact."""
    try:
        session = get_session(sessionID)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")

    with log_timing(logger, f"Applying {len(request.frames)} frame(s) to {sessionID}"):
        if request.target == "artifact":
            state = await session.apply_artifact_frames(request.frames)
            return {
                "artifact": state.artifact.model_dump(mode="json"),
                "metadata": state.metadata.model_dump(mode="json") if state.metadata else None,
            }

        message_id = request.messageID or session.start_assistant_message().id
        try:
            if request.target == "message":
                message = await session.apply_message_frames(message_id, request.frames)
            else:
                message = await session.apply_stream(message_id, request.frames)
        except NotFoundError:
            raise HTTPException(status_code=404, detail="Message not found")
        except InvalidOperationError as e:
            raise HTTPException(status_code=400, detail=str(e))

    state = session.artifact_state
    return {
        "message": message.model_dump(mode="json"),
        "artifact": state.artifact.model_dump(mode="json"),
        "metadata": state.metadata.model_dump(mode="json") if state.metadata else None,
    }
