"""
HTTP client for the chat application's API.

Thin async wrapper over httpx. Every non-2xx response becomes a
TransportError (a UsageLimitError when the service reports the account is
over its limit); callers decide how to surface it. Nothing is retried.
"""

import json
import logging
from typing import Any, AsyncIterator

import httpx
from pydantic import ValidationError

from config.defaults import DEFAULT_API_BASE_URL, DEFAULT_REQUEST_TIMEOUT
from core.exceptions import TransportError, UsageLimitError
from core.models import Suggestion

logger = logging.getLogger(__name__)

SSE_DATA_PREFIX = "data:"
SSE_DONE = "[DONE]"


def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def error_from_response(response: httpx.Response, action: str) -> TransportError:
    """Build the exception for a failed response."""
    body = _response_body(response)
    message = f"{action} failed with status {response.status_code}"
    code = body.get("code") if isinstance(body, dict) else None
    text = body if isinstance(body, str) else json.dumps(body)
    if code == UsageLimitError.code or UsageLimitError.code in text:
        return UsageLimitError(message, status_code=response.status_code, body=body)
    return TransportError(message, status_code=response.status_code, body=body)


class ApiClient:
    """
    Async client for the document, book, memory and chat endpoints.

    Use as an async context manager, or call aclose() when done. Pass an
    httpx transport (e.g. httpx.MockTransport) to run against a fake server.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers=headers,
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, action: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("%s failed: %s", action, e)
            raise TransportError(f"{action} failed: {e}") from e

        if not response.is_success:
            error = error_from_response(response, action)
            logger.warning("%s", error)
            raise error
        if not response.content:
            return None
        return _response_body(response)

    async def get_document(self, document_id: str) -> list[dict[str, Any]]:
        """Fetch every saved version of a document, oldest first."""
        data = await self._request(
            "GET", "/api/document", "Fetching document", params={"id": document_id}
        )
        return data if isinstance(data, list) else []

    async def get_book_chapters(
        self, book_id: str | None = None, book_title: str | None = None
    ) -> list[dict[str, Any]]:
        """
        Fetch the chapters of a book by id, or by title when no id is known.

        Raises:
            ValueError: If neither book_id nor book_title is given
        """
        if book_id:
            params = {"bookId": book_id}
        elif book_title:
            params = {"bookTitle": book_title}
        else:
            raise ValueError("book_id or book_title is required")
        data = await self._request("GET", "/api/books", "Fetching chapters", params=params)
        return data if isinstance(data, list) else []

    async def get_suggestions(self, document_id: str) -> list[Suggestion]:
        data = await self._request(
            "GET",
            "/api/suggestions",
            "Fetching suggestions",
            params={"documentId": document_id},
        )
        suggestions = []
        for raw in data if isinstance(data, list) else []:
            try:
                suggestions.append(Suggestion.model_validate(raw))
            except ValidationError as e:
                logger.warning("Skipping malformed suggestion: %s", e)
        return suggestions

    async def save_document(
        self, document_id: str, title: str, content: str, kind: str
    ) -> Any:
        """Store a new version of a document."""
        return await self._request(
            "POST",
            "/api/document",
            "Saving document",
            params={"id": document_id},
            json={"title": title, "content": content, "kind": kind},
        )

    async def save_memory(
        self, content: str, metadata: dict[str, Any], memory_type: str = "document"
    ) -> Any:
        return await self._request(
            "POST",
            "/api/memory/save",
            "Saving to memory",
            json={"content": content, "type": memory_type, "metadata": metadata},
        )

    async def save_book_prop(self, prop: dict[str, Any]) -> Any:
        return await self._request("POST", "/api/book-props", "Saving book prop", json=prop)

    async def upload_image(
        self, filename: str, data: bytes, content_type: str = "image/png"
    ) -> str:
        """Upload an image and return its public URL."""
        body = await self._request(
            "POST",
            "/api/upload/image",
            "Uploading image",
            files={"file": (filename, data, content_type)},
        )
        if not isinstance(body, dict) or not isinstance(body.get("url"), str):
            raise TransportError("Uploading image returned no url", body=body)
        return body["url"]

    async def stream_chat(self, payload: dict[str, Any]) -> AsyncIterator[dict[str, Any]]:
        """
        Send a chat request and yield its stream frames as they arrive.

        The response is a server-sent event stream of JSON frames ending
        with a `[DONE]` sentinel. Lines that are not JSON are logged and
        skipped.
        """
        action = "Chat request"
        try:
            async with self._client.stream("POST", "/api/chat-simple", json=payload) as response:
                if not response.is_success:
                    await response.aread()
                    raise error_from_response(response, action)
                async for line in response.aiter_lines():
                    if not line.startswith(SSE_DATA_PREFIX):
                        continue
                    data = line[len(SSE_DATA_PREFIX):].strip()
                    if data == SSE_DONE:
                        return
                    try:
                        frame = json.loads(data)
                    except json.JSONDecodeError:
                        logger.warning("Skipping non-JSON stream line: %r", data[:80])
                        continue
                    if isinstance(frame, dict):
                        yield frame
        except httpx.HTTPError as e:
            logger.warning("%s failed: %s", action, e)
            raise TransportError(f"{action} failed: {e}") from e
