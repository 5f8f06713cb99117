"""
Send message endpoint with streaming.

Relays the prompt to the chat completion endpoint and folds each frame it
streams back into the session while forwarding it to the client over SSE.
"""

import json
import logging
from typing import AsyncGenerator, AsyncIterator

from fastapi import APIRouter, HTTPException
from sse_starlette.sse import EventSourceResponse

from client.notify import USAGE_LIMIT_MESSAGE
from core import ChatSession, NotFoundError, TransportError, UsageLimitError
from core.lifecycle import ScopeClosedError

from ...requests import ChatRequest
from ...state import get_api_client, get_feature_manager, get_session

logger = logging.getLogger(__name__)


router = APIRouter()


async def _next_frame(frames: AsyncIterator[dict]) -> dict | None:
    try:
        return await frames.__anext__()
    except StopAsyncIteration:
        return None


async def relay_chat_stream(
    session: ChatSession, message_id: str, frames: AsyncGenerator[dict, None]
) -> AsyncGenerator[dict, None]:
    """
    Fold upstream frames into the session and forward each as an SSE event.

    Every wait on the upstream runs in the session's scope, so deleting the
    session cancels the stream and nothing more is applied to it.
    """
    try:
        while True:
            frame = await session.scope.run(_next_frame(frames))
            if frame is None:
                break
            await session.apply_stream(message_id, [frame])
            yield {"event": "frame", "data": json.dumps(frame)}
    except ScopeClosedError:
        logger.info("Session %s closed, stopping its chat stream", session.id)
        yield {"event": "error", "data": json.dumps({"error": "Session closed"})}
        return
    except UsageLimitError as e:
        logger.warning("Usage limit reached for session %s", session.id)
        yield {
            "event": "error",
            "data": json.dumps({"error": USAGE_LIMIT_MESSAGE, "code": e.code}),
        }
        return
    except TransportError as e:
        yield {"event": "error", "data": json.dumps({"error": str(e)})}
        return
    finally:
        await frames.aclose()
    yield {"event": "done", "data": json.dumps({"messageID": message_id})}


@router.post("/session/{sessionID}/message")
async def send_message_route(sessionID: str, request: ChatRequest) -> EventSourceResponse:
    """Send a prompt and stream the response via SSE."""
    try:
        session = get_session(sessionID)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")

    session.add_user_message(request.text, request.messageID)
    assistant = session.start_assistant_message()
    features = get_feature_manager()
    payload = {
        "id": session.id,
        "messages": [m.model_dump(mode="json") for m in session.messages[:-1]],
        "selectedChatModel": request.selectedChatModel,
        "memoryEnabled": features.is_enabled("memory"),
        "webSearchEnabled": features.is_enabled("web_search"),
    }
    frames = get_api_client().stream_chat(payload)
    return EventSourceResponse(relay_chat_stream(session, assistant.id, frames))
