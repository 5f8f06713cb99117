"""MemoryItem model."""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel


class MemoryItem(BaseModel):
    content: str
    id: str | None = None
    timestamp: str
    createdAt: str
    emoji_tags: list[str] | None = None
    topics: list[str] | None = None
    hierarchical_structure: str | None = None
    category: str | None = None


def normalize_memory(raw: dict[str, Any]) -> MemoryItem:
    """Coerce a memory search hit from any of the service's shapes."""
    now = datetime.now(timezone.utc).isoformat()
    custom = raw.get("customMetadata") or {}
    return MemoryItem(
        content=raw.get("content") or raw.get("text") or "",
        id=raw.get("id") or raw.get("_id"),
        timestamp=raw.get("timestamp") or raw.get("created_at") or raw.get("createdAt") or now,
        createdAt=raw.get("createdAt") or raw.get("created_at") or raw.get("timestamp") or now,
        emoji_tags=raw.get("emoji tags") or raw.get("emoji_tags"),
        topics=raw.get("topics"),
        hierarchical_structure=raw.get("hierarchical_structures") or raw.get("hierarchical_structure"),
        category=raw.get("category") or custom.get("category"),
    )
