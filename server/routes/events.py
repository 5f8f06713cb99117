"""
Global event SSE endpoint.
"""

import json
from typing import AsyncGenerator

from fastapi import APIRouter, Query
from sse_starlette.sse import EventSourceResponse

from ..event_bus import get_event_bus


router = APIRouter()


@router.get("/global/event")
async def global_event(sessionID: str | None = Query(None)) -> EventSourceResponse:
    """Stream message and artifact updates, for one session or all of them."""
    event_bus = get_event_bus()

    async def event_generator() -> AsyncGenerator[dict, None]:
        subscription = event_bus.subscribe(sessionID)
        try:
            while True:
                event = await subscription.queue.get()
                yield {"event": event["type"], "data": json.dumps(event)}
        finally:
            event_bus.unsubscribe(subscription)

    return EventSourceResponse(event_generator())
