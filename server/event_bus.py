"""
Session event fan-out over SSE.

ChatSession publishes message and artifact changes through the EventBus
protocol; this bus hands them to every `/global/event` listener, optionally
narrowed to a single session.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from core import Event

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Subscription:
    session_id: str | None = None
    queue: asyncio.Queue = field(default_factory=asyncio.Queue)

    def wants(self, event: Event) -> bool:
        return self.session_id is None or event.properties.get("sessionID") == self.session_id


class SSEEventBus:
    def __init__(self) -> None:
        self.subscriptions: list[Subscription] = []

    async def publish(self, event: Event) -> None:
        """Queue the event for every listener interested in its session."""
        payload = event.model_dump(mode="json")
        listeners = [s for s in self.subscriptions if s.wants(event)]
        logger.debug("Publishing %s to %d listener(s)", event.type, len(listeners))
        for subscription in listeners:
            await subscription.queue.put(payload)

    def subscribe(self, session_id: str | None = None) -> Subscription:
        subscription = Subscription(session_id=session_id)
        self.subscriptions.append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        if subscription in self.subscriptions:
            self.subscriptions.remove(subscription)


_event_bus: SSEEventBus | None = None


def get_event_bus() -> SSEEventBus:
    """Process-wide bus shared by all sessions."""
    global _event_bus
    if _event_bus is None:
        _event_bus = SSEEventBus()
    return _event_bus
