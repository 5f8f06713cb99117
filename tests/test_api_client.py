"""
Tests for the HTTP API client, using httpx.MockTransport as the server.
"""

import json

import httpx
import pytest

from client.api_client import ApiClient
from core.exceptions import TransportError, UsageLimitError


def client_for(handler) -> ApiClient:
    return ApiClient(base_url="http://api.test", transport=httpx.MockTransport(handler))


class TestRequests:
    """Test the JSON endpoints."""

    @pytest.mark.asyncio
    async def test_get_document(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/document"
            assert request.url.params["id"] == "doc_1"
            return httpx.Response(200, json=[{"content": "v1"}])

        async with client_for(handler) as api:
            assert await api.get_document("doc_1") == [{"content": "v1"}]

    @pytest.mark.asyncio
    async def test_book_chapters_by_title(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["bookTitle"] == "Tides"
            return httpx.Response(200, json=[])

        async with client_for(handler) as api:
            assert await api.get_book_chapters(book_title="Tides") == []

    @pytest.mark.asyncio
    async def test_book_chapters_needs_id_or_title(self):
        async with client_for(lambda r: httpx.Response(200)) as api:
            with pytest.raises(ValueError):
                await api.get_book_chapters()

    @pytest.mark.asyncio
    async def test_malformed_suggestions_are_skipped(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=[{"id": "s1"}, {"originalText": "no id"}])

        async with client_for(handler) as api:
            suggestions = await api.get_suggestions("doc_1")
        assert [s.id for s in suggestions] == ["s1"]

    @pytest.mark.asyncio
    async def test_save_memory_body(self):
        bodies = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200)

        async with client_for(handler) as api:
            assert await api.save_memory("text", {"kind": "text"}) is None
        assert bodies == [{"content": "text", "type": "document", "metadata": {"kind": "text"}}]

    @pytest.mark.asyncio
    async def test_save_document(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"id": "doc_1"})

        async with client_for(handler) as api:
            await api.save_document("doc_1", "Notes", "body", "text")
        assert requests[0].method == "POST"
        assert requests[0].url.params["id"] == "doc_1"
        assert json.loads(requests[0].content) == {"title": "Notes", "content": "body", "kind": "text"}

    @pytest.mark.asyncio
    async def test_upload_image(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert b"cat.png" in request.content
            return httpx.Response(200, json={"url": "https://cdn/cat.png"})

        async with client_for(handler) as api:
            assert await api.upload_image("cat.png", b"\x89PNG") == "https://cdn/cat.png"

    @pytest.mark.asyncio
    async def test_upload_without_url(self):
        async with client_for(lambda r: httpx.Response(200, json={})) as api:
            with pytest.raises(TransportError):
                await api.upload_image("cat.png", b"")


class TestErrors:
    """Test error mapping."""

    @pytest.mark.asyncio
    async def test_non_2xx(self):
        async with client_for(lambda r: httpx.Response(404, json={"error": "gone"})) as api:
            with pytest.raises(TransportError) as exc_info:
                await api.get_document("doc_1")
        assert exc_info.value.status_code == 404
        assert exc_info.value.body == {"error": "gone"}

    @pytest.mark.asyncio
    async def test_usage_limit_code(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(429, json={"code": "USAGE_LIMIT_EXCEEDED"})

        async with client_for(handler) as api:
            with pytest.raises(UsageLimitError):
                await api.save_book_prop({"name": "Fox"})

    @pytest.mark.asyncio
    async def test_usage_limit_in_text(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403, text="Error: USAGE_LIMIT_EXCEEDED for this month")

        async with client_for(handler) as api:
            with pytest.raises(UsageLimitError):
                await api.get_document("doc_1")

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        async with client_for(handler) as api:
            with pytest.raises(TransportError):
                await api.get_document("doc_1")


class TestStreamChat:
    """Test reading the chat SSE stream."""

    @pytest.mark.asyncio
    async def test_yields_frames_until_done(self):
        body = "\n".join([
            'data: {"type": "text-delta", "content": "Hi"}',
            "",
            ": keep-alive",
            "data: not json",
            'data: {"type": "finish"}',
            "data: [DONE]",
            'data: {"type": "text-delta", "content": "after done"}',
        ])

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/chat-simple"
            return httpx.Response(200, text=body, headers={"content-type": "text/event-stream"})

        async with client_for(handler) as api:
            frames = [frame async for frame in api.stream_chat({"id": "ses_1"})]

        assert frames == [{"type": "text-delta", "content": "Hi"}, {"type": "finish"}]

    @pytest.mark.asyncio
    async def test_usage_limit(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(429, json={"code": "USAGE_LIMIT_EXCEEDED"})

        async with client_for(handler) as api:
            with pytest.raises(UsageLimitError):
                async for _ in api.stream_chat({}):
                    pass
