"""
User-facing notifications.

Network failures are surfaced as a toast at the call site that started the
action. The Notifier protocol is what a front end implements; the logging
notifier is used when there is no UI attached.
"""

import logging
from typing import Awaitable, Literal, Protocol, TypeVar

from core.exceptions import TransportError, UsageLimitError

logger = logging.getLogger(__name__)

T = TypeVar("T")

ToastLevel = Literal["success", "error", "info"]

USAGE_LIMIT_MESSAGE = (
    "You've reached your monthly usage limit. Please upgrade your plan to continue."
)


class Notifier(Protocol):
    def notify(self, level: ToastLevel, message: str) -> None:
        """Show a toast."""
        ...


class LoggingNotifier:
    """Writes toasts to the log."""

    def notify(self, level: ToastLevel, message: str) -> None:
        if level == "error":
            logger.error("%s", message)
        else:
            logger.info("%s", message)


class RecordingNotifier:
    """Keeps every toast so a response can report them back."""

    def __init__(self) -> None:
        self.toasts: list[tuple[ToastLevel, str]] = []

    def notify(self, level: ToastLevel, message: str) -> None:
        self.toasts.append((level, message))


async def run_user_action(
    action: Awaitable[T],
    notifier: Notifier,
    failure_message: str,
    success_message: str | None = None,
) -> T | None:
    """
    Run a user-triggered network action and report the outcome as a toast.

    Returns the action's result, or None if it failed with a
    TransportError. Usage-limit failures show the upgrade message instead
    of `failure_message`. Other exceptions propagate.
    """
    try:
        result = await action
    except UsageLimitError:
        notifier.notify("error", USAGE_LIMIT_MESSAGE)
        return None
    except TransportError as e:
        logger.warning("%s: %s", failure_message, e)
        notifier.notify("error", failure_message)
        return None
    if success_message:
        notifier.notify("success", success_message)
    return result
