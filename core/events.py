"""
Session events.

Core announces state changes through the EventBus protocol and never knows
who is listening; the server plugs in an SSE fan-out.
"""

from typing import Any, Protocol

from pydantic import BaseModel

MESSAGE_UPDATED = "message.updated"
MESSAGE_REPLACED = "message.replaced"
ARTIFACT_UPDATED = "artifact.updated"


class Event(BaseModel):
    type: str
    properties: dict[str, Any]


class EventBus(Protocol):
    async def publish(self, event: Event) -> None:
        ...


class NullEventBus:
    """Drops every event; the default for sessions with no listeners."""

    async def publish(self, event: Event) -> None:
        return None
