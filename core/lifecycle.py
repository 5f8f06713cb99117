"""
Lifecycle-bound network calls.

A LifecycleScope owns the in-flight requests of one view (an open artifact,
a session). Closing the scope cancels them, and any result that arrives
after close is discarded instead of being applied to stale state.
"""

import asyncio
import logging
from typing import Awaitable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ScopeClosedError(Exception):
    """Raised when work is started on, or finishes after, a closed scope."""


class LifecycleScope:
    def __init__(self, name: str = "scope") -> None:
        self.name = name
        self._tasks: set[asyncio.Task] = set()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def run(self, awaitable: Awaitable[T]) -> T:
        """
        Await work inside the scope.

        Raises:
            ScopeClosedError: If the scope was closed before the work
                started or while it was running
        """
        if self._closed:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise ScopeClosedError(f"{self.name} is closed")

        task = asyncio.ensure_future(awaitable)
        self._tasks.add(task)
        try:
            result = await task
        except asyncio.CancelledError:
            if self._closed:
                raise ScopeClosedError(f"{self.name} closed during request") from None
            raise
        finally:
            self._tasks.discard(task)

        if self._closed:
            logger.debug("Discarding result that finished after %s closed", self.name)
            raise ScopeClosedError(f"{self.name} closed during request")
        return result

    async def close(self) -> None:
        """Cancel everything in flight. Idempotent."""
        if self._closed:
            return
        self._closed = True
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.debug("Cancelled %d request(s) on %s close", len(tasks), self.name)

    async def __aenter__(self) -> "LifecycleScope":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
