"""
API client package.

HTTP bindings to the chat application's endpoints and the user actions
built on them.
"""

from .actions import create_book_prop, memory_metadata, save_to_memory, upload_image
from .api_client import ApiClient, error_from_response
from .notify import (
    USAGE_LIMIT_MESSAGE,
    LoggingNotifier,
    Notifier,
    RecordingNotifier,
    run_user_action,
)

__all__ = [
    "ApiClient",
    "error_from_response",
    "Notifier",
    "LoggingNotifier",
    "RecordingNotifier",
    "run_user_action",
    "USAGE_LIMIT_MESSAGE",
    "save_to_memory",
    "upload_image",
    "create_book_prop",
    "memory_metadata",
]
