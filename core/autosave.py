"""
Debounced saving.

Rapid edits are coalesced into one write: every schedule() cancels the
pending timer before arming a new one, so only the latest content is saved
once the edits go quiet.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Generic, TypeVar

from .constants import DEFAULT_AUTOSAVE_DELAY

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Debouncer(Generic[T]):
    def __init__(
        self,
        save: Callable[[T], Awaitable[None]],
        delay: float = DEFAULT_AUTOSAVE_DELAY,
    ) -> None:
        self._save = save
        self.delay = delay
        self._timer: asyncio.Task | None = None
        self._value: T | None = None
        self._has_value = False

    @property
    def pending(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def schedule(self, value: T) -> None:
        """Arm the timer for `value`, replacing any pending save."""
        self._cancel_timer()
        self._value = value
        self._has_value = True
        self._timer = asyncio.get_running_loop().create_task(self._fire_later())

    def cancel(self) -> None:
        """Drop the pending save without writing it."""
        self._cancel_timer()
        self._value = None
        self._has_value = False

    async def flush(self) -> None:
        """Write the pending value now, if there is one."""
        self._cancel_timer()
        await self._write()

    def _cancel_timer(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    async def _fire_later(self) -> None:
        await asyncio.sleep(self.delay)
        await self._write()

    async def _write(self) -> None:
        if not self._has_value:
            return
        value = self._value
        self._value = None
        self._has_value = False
        try:
            await self._save(value)  # type: ignore[arg-type]
        except Exception:
            logger.exception("Autosave failed")
