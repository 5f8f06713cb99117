"""
Shared pytest fixtures for all tests.
"""
import tempfile
from pathlib import Path
from typing import Any, Iterator

import pytest

from config import PreferenceStore
from core import ChatSession, Event


class RecordingEventBus:
    """EventBus that keeps every published event."""

    def __init__(self) -> None:
        self.events: list[Event] = []

    async def publish(self, event: Event) -> None:
        self.events.append(event)

    def types(self) -> list[str]:
        return [e.type for e in self.events]


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def preferences() -> PreferenceStore:
    """In-memory preference store."""
    return PreferenceStore()


@pytest.fixture
def event_bus() -> RecordingEventBus:
    return RecordingEventBus()


@pytest.fixture
def session(event_bus: RecordingEventBus, preferences: PreferenceStore) -> ChatSession:
    """A chat session with no API client attached."""
    return ChatSession(event_bus=event_bus, preferences=preferences)


@pytest.fixture
def chapter_rows() -> list[dict[str, Any]]:
    """Chapter rows as the books endpoint returns them, out of order."""
    return [
        {"id": "c2", "bookId": "b1", "chapterTitle": "The Storm", "chapterNumber": 2,
         "content": "Rain fell on the harbour."},
        {"id": "c1", "bookId": "b1", "chapterTitle": "The Harbour", "chapterNumber": 1,
         "content": "Ships came in at dawn."},
        {"id": "c3", "bookId": "b1", "chapterTitle": "Calm", "chapterNumber": 3,
         "content": "Morning was quiet."},
    ]


@pytest.fixture
def sample_python_code() -> str:
    """Sample Python code for testing execution."""
    return """
print("Hello from Python!")
result = 2 + 2
print(f"2 + 2 = {result}")
"""
