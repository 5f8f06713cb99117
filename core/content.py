"""
Typed content envelopes.

Producers tag what they send with an explicit content type. Consumers decide
how to read a body from that tag alone and never guess by trying to parse
it: a plain-text chapter that happens to start with `{` is still plain text.
"""

import json
import logging
import re
from typing import Any

from pydantic import BaseModel, ValidationError

from .exceptions import MalformedEventError
from .models import Artifact

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
MARKDOWN_CONTENT_TYPE = "text/markdown"
PLAIN_CONTENT_TYPE = "text/plain"

_TITLE_PATTERNS = (
    re.compile(r"^#\s*(.+)$", re.MULTILINE),
    re.compile(r"^(.+)\s*-\s*(?:A\s+)?(?:Children's\s+)?Book", re.MULTILINE),
)


class ContentEnvelope(BaseModel):
    content_type: str = PLAIN_CONTENT_TYPE
    body: str = ""

    @property
    def is_json(self) -> bool:
        return self.content_type == JSON_CONTENT_TYPE

    @classmethod
    def from_artifact(cls, artifact: Artifact) -> "ContentEnvelope":
        return cls(content_type=artifact.contentType, body=artifact.content)

    def json_body(self) -> dict[str, Any]:
        """
        Decode a JSON body.

        Raises:
            MalformedEventError: If the envelope is not JSON or the body is
                not a JSON object
        """
        if not self.is_json:
            raise MalformedEventError(self.content_type, "body is not tagged as JSON")
        try:
            data = json.loads(self.body)
        except json.JSONDecodeError as e:
            raise MalformedEventError(self.content_type, str(e)) from e
        if not isinstance(data, dict):
            raise MalformedEventError(self.content_type, "expected a JSON object")
        return data


class BookReference(BaseModel):
    """What a book artifact's content says about which book to load."""

    bookId: str | None = None
    bookTitle: str = "Untitled Book"
    chapterNumber: int | None = None


def extract_title(text: str) -> str | None:
    """Find a book title in markdown or free text."""
    for pattern in _TITLE_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1).strip()
    return None


def read_book_reference(envelope: ContentEnvelope) -> BookReference:
    """
    Resolve the book an artifact points at.

    JSON envelopes carry bookId / bookTitle / chapterNumber directly. Text
    envelopes only yield a title, pulled from the first heading.
    """
    if envelope.is_json:
        try:
            return BookReference.model_validate(envelope.json_body())
        except (MalformedEventError, ValidationError) as e:
            logger.warning("Unreadable book reference: %s", e)
            return BookReference()
    return BookReference(bookTitle=extract_title(envelope.body) or "Untitled Book")
