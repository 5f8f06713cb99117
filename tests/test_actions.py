"""
Tests for user-triggered API actions and their toasts.
"""

import json

import httpx
import pytest

from client.actions import create_book_prop, memory_metadata, save_to_memory, upload_image
from client.api_client import ApiClient
from client.notify import USAGE_LIMIT_MESSAGE, RecordingNotifier, run_user_action
from core.exceptions import TransportError
from core.models import Artifact, BookArtifactMetadata


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


def client_for(handler) -> ApiClient:
    return ApiClient(base_url="http://api.test", transport=httpx.MockTransport(handler))


class TestRunUserAction:
    """Test toast reporting for network actions."""

    @pytest.mark.asyncio
    async def test_success_toast(self, notifier):
        async def action():
            return "ok"

        result = await run_user_action(action(), notifier, "Failed", success_message="Done")
        assert result == "ok"
        assert notifier.toasts == [("success", "Done")]

    @pytest.mark.asyncio
    async def test_failure_toast(self, notifier):
        async def action():
            raise TransportError("down")

        assert await run_user_action(action(), notifier, "Failed to save") is None
        assert notifier.toasts == [("error", "Failed to save")]

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self, notifier):
        async def action():
            raise KeyError("bug")

        with pytest.raises(KeyError):
            await run_user_action(action(), notifier, "Failed")
        assert notifier.toasts == []


class TestMemoryMetadata:
    """Test describing artifacts for the memory service."""

    def test_code(self):
        artifact = Artifact(kind="code", content="def f():\n    print(1)")
        assert memory_metadata(artifact) == {"kind": "code", "language": "python"}

    def test_book(self):
        metadata = BookArtifactMetadata(bookTitle="Tides", totalWords=12)
        result = memory_metadata(Artifact(kind="book"), metadata)
        assert result["bookTitle"] == "Tides"
        assert result["chapters"] == 0

    def test_text(self):
        assert memory_metadata(Artifact(title="Essay")) == {"kind": "text", "title": "Essay"}


class TestSaveToMemory:
    """Test the save-to-memory action."""

    @pytest.mark.asyncio
    async def test_success(self, notifier):
        async with client_for(lambda r: httpx.Response(200)) as api:
            saved = await save_to_memory(api, notifier, Artifact(kind="book", content="..."))
        assert saved is True
        assert notifier.toasts == [("success", "Book saved to memory!")]

    @pytest.mark.asyncio
    async def test_usage_limit(self, notifier):
        def handler(request):
            return httpx.Response(429, json={"code": "USAGE_LIMIT_EXCEEDED"})

        async with client_for(handler) as api:
            saved = await save_to_memory(api, notifier, Artifact(content="..."))
        assert saved is False
        assert notifier.toasts == [("error", USAGE_LIMIT_MESSAGE)]


class TestBookProps:
    """Test creating book props with images."""

    @pytest.mark.asyncio
    async def test_image_is_uploaded_first(self, notifier):
        saved = []

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/api/upload/image":
                return httpx.Response(200, json={"url": "https://cdn/fox.png"})
            saved.append(json.loads(request.content))
            return httpx.Response(200, json={"id": "prop_1"})

        async with client_for(handler) as api:
            result = await create_book_prop(
                api, notifier, {"type": "character", "name": "Fox"}, image=("fox.png", b"png")
            )

        assert result == {"id": "prop_1"}
        assert saved[0]["imageUrl"] == "https://cdn/fox.png"
        assert notifier.toasts == [("success", "Saved Fox")]

    @pytest.mark.asyncio
    async def test_failed_upload_still_saves(self, notifier):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/api/upload/image":
                return httpx.Response(500)
            return httpx.Response(200, json={"id": "prop_1"})

        async with client_for(handler) as api:
            assert await upload_image(api, notifier, "a.png", b"") is None
            result = await create_book_prop(
                api, notifier, {"type": "environment"}, image=("a.png", b"")
            )

        assert result == {"id": "prop_1"}
        assert ("error", "Failed to upload image") in notifier.toasts
