"""User actions on artifacts that call the API."""

from typing import Any

from core.artifacts.code import detect_language
from core.models import Artifact, BookArtifactMetadata

from .api_client import ApiClient
from .notify import Notifier, run_user_action


def code_memory_metadata(content: str) -> dict[str, Any]:
    return {"kind": "code", "language": detect_language(content)}


def book_memory_metadata(metadata: BookArtifactMetadata) -> dict[str, Any]:
    return {
        "kind": "book",
        "bookTitle": metadata.bookTitle,
        "author": metadata.author,
        "genre": metadata.genre,
        "totalWords": metadata.totalWords,
        "chapters": len(metadata.chapters),
    }


def memory_metadata(artifact: Artifact, metadata: Any = None) -> dict[str, Any]:
    """Describe an artifact for the memory service."""
    if artifact.kind == "code":
        return code_memory_metadata(artifact.content)
    if artifact.kind == "book" and isinstance(metadata, BookArtifactMetadata):
        return book_memory_metadata(metadata)
    return {"kind": artifact.kind, "title": artifact.title}


async def save_to_memory(
    api: ApiClient, notifier: Notifier, artifact: Artifact, metadata: Any = None
) -> bool:
    noun = "Book" if artifact.kind == "book" else "Document"

    async def save() -> bool:
        await api.save_memory(artifact.content, memory_metadata(artifact, metadata))
        return True

    result = await run_user_action(
        save(),
        notifier,
        failure_message=f"Failed to save {noun.lower()} to memory",
        success_message=f"{noun} saved to memory!",
    )
    return result is not None


async def upload_image(
    api: ApiClient, notifier: Notifier, filename: str, data: bytes, content_type: str = "image/png"
) -> str | None:
    return await run_user_action(
        api.upload_image(filename, data, content_type),
        notifier,
        failure_message="Failed to upload image",
    )


async def create_book_prop(
    api: ApiClient,
    notifier: Notifier,
    prop: dict[str, Any],
    image: tuple[str, bytes] | None = None,
) -> Any:
    """
    Save a book prop (character, environment, object).

    An attached image is uploaded first and its URL stored on the prop. If
    the upload fails the prop is still saved, without an image.
    """
    if image is not None:
        filename, data = image
        image_url = await upload_image(api, notifier, filename, data)
        prop = {**prop, "imageUrl": image_url}
    return await run_user_action(
        api.save_book_prop(prop),
        notifier,
        failure_message=f"Failed to save {prop.get('type', 'prop')}",
        success_message=f"Saved {prop.get('name') or prop.get('type', 'prop')}",
    )
