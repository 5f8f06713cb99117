"""Text artifact: essays, emails and other prose with inline suggestions."""

import logging
from typing import TYPE_CHECKING

from ..accumulator import apply_suggestion, parse_suggestion
from ..exceptions import TransportError
from ..models import Artifact, ArtifactMetadata, StreamPart, TextArtifactMetadata
from ..stream_parser import StreamEventKind, classify
from .base import ArtifactDefinition, register_artifact

if TYPE_CHECKING:
    from client.api_client import ApiClient

logger = logging.getLogger(__name__)


class TextArtifact(ArtifactDefinition):
    kind = "text"
    description = "Useful for text content, like drafting essays and emails."

    def initial_metadata(self) -> TextArtifactMetadata:
        return TextArtifactMetadata()

    async def initialize(
        self, artifact: Artifact, api: "ApiClient | None" = None
    ) -> tuple[Artifact, ArtifactMetadata]:
        artifact, metadata = await super().initialize(artifact, api)
        if api is not None and artifact.documentId != "init":
            try:
                suggestions = await api.get_suggestions(artifact.documentId)
            except TransportError as e:
                logger.warning("Could not load suggestions for %s: %s", artifact.documentId, e)
            else:
                metadata = TextArtifactMetadata(suggestions=suggestions)
        return artifact, metadata

    def on_stream_part(
        self, artifact: Artifact, metadata: ArtifactMetadata, frame: StreamPart
    ) -> tuple[Artifact, ArtifactMetadata]:
        kind = classify(frame.type)
        if kind is StreamEventKind.SUGGESTION:
            return artifact, apply_suggestion(metadata, parse_suggestion(frame))
        return super().on_stream_part(artifact, metadata, frame)


text_artifact = register_artifact(TextArtifact())
