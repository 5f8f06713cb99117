"""
Artifact definitions and the shared artifact reducer.

An artifact's state is the document being shown (Artifact) plus per-kind
metadata. Control frames (id, title, kind, clear, status, finish, error)
update the Artifact for every kind; everything else is handed to the
definition registered for the artifact's kind.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, get_args

from ..accumulator import apply_text_delta
from ..exceptions import MalformedEventError
from ..models import Artifact, ArtifactKind, ArtifactMetadata, StreamPart
from ..stream_parser import StreamEventKind, classify

if TYPE_CHECKING:
    from client.api_client import ApiClient

logger = logging.getLogger(__name__)

ARTIFACT_KINDS: tuple[str, ...] = get_args(ArtifactKind)


class ArtifactDefinition:
    """Behaviour of one artifact kind."""

    kind: ArtifactKind
    description: str = ""

    def initial_metadata(self) -> ArtifactMetadata:
        raise NotImplementedError

    async def initialize(
        self, artifact: Artifact, api: "ApiClient | None" = None
    ) -> tuple[Artifact, ArtifactMetadata]:
        """Load what the kind needs when the artifact is opened. Visibility is left to the caller."""
        return artifact, self.initial_metadata()

    def on_stream_part(
        self, artifact: Artifact, metadata: ArtifactMetadata, frame: StreamPart
    ) -> tuple[Artifact, ArtifactMetadata]:
        """Apply a non-control frame. The default appends text deltas."""
        if classify(frame.type) is StreamEventKind.TEXT_DELTA:
            return apply_text_delta(artifact, _text(frame)), metadata
        return artifact, metadata


def _text(frame: StreamPart) -> str:
    if not isinstance(frame.content, str):
        raise MalformedEventError(frame.type, "content must be a string")
    return frame.content


_registry: dict[str, ArtifactDefinition] = {}


def register_artifact(definition: ArtifactDefinition) -> ArtifactDefinition:
    _registry[definition.kind] = definition
    return definition


def get_artifact_definition(kind: str) -> ArtifactDefinition:
    """
    Look up the definition for an artifact kind.

    Raises:
        KeyError: If no definition is registered for the kind
    """
    return _registry[kind]


@dataclass(frozen=True)
class ArtifactState:
    artifact: Artifact = field(default_factory=Artifact)
    metadata: ArtifactMetadata | None = None

    @classmethod
    def for_kind(cls, kind: ArtifactKind, **artifact_fields: Any) -> "ArtifactState":
        definition = get_artifact_definition(kind)
        return cls(
            artifact=Artifact(kind=kind, **artifact_fields),
            metadata=definition.initial_metadata(),
        )


def reduce_artifact(artifact: Artifact, frame: StreamPart) -> Artifact:
    """Apply a control frame to the artifact. Other frames return it unchanged."""
    kind = classify(frame.type)
    if kind is StreamEventKind.ID:
        return artifact.model_copy(update={"documentId": _text(frame), "status": "streaming"})
    if kind is StreamEventKind.TITLE:
        return artifact.model_copy(update={"title": _text(frame), "status": "streaming"})
    if kind is StreamEventKind.KIND:
        new_kind = _text(frame)
        if new_kind not in ARTIFACT_KINDS:
            raise MalformedEventError(frame.type, f"unknown artifact kind {new_kind!r}")
        return artifact.model_copy(update={"kind": new_kind, "status": "streaming"})
    if kind is StreamEventKind.CONTENT_TYPE:
        return artifact.model_copy(update={"contentType": _text(frame)})
    if kind is StreamEventKind.CLEAR:
        return artifact.model_copy(update={"content": "", "status": "streaming"})
    if kind is StreamEventKind.STATUS:
        status = _text(frame)
        if status not in ("streaming", "idle"):
            raise MalformedEventError(frame.type, f"unknown status {status!r}")
        return artifact.model_copy(update={"status": status})
    if kind is StreamEventKind.FINISH:
        return artifact.model_copy(update={"status": "idle"})
    if kind is StreamEventKind.ERROR:
        return artifact.model_copy(update={"status": "idle", "isVisible": True})
    return artifact


CONTROL_KINDS = frozenset({
    StreamEventKind.ID,
    StreamEventKind.TITLE,
    StreamEventKind.KIND,
    StreamEventKind.CONTENT_TYPE,
    StreamEventKind.CLEAR,
    StreamEventKind.STATUS,
    StreamEventKind.FINISH,
    StreamEventKind.ERROR,
})


def reduce_state(state: ArtifactState, frame: StreamPart) -> ArtifactState:
    """
    Apply one frame to an artifact state.

    Always returns a new ArtifactState when anything changed, and the same
    object when nothing did. A `kind` frame that switches kinds resets the
    metadata to the new kind's initial metadata.
    """
    if classify(frame.type) in CONTROL_KINDS:
        artifact = reduce_artifact(state.artifact, frame)
        if artifact is state.artifact:
            return state
        metadata = state.metadata
        if artifact.kind != state.artifact.kind or metadata is None:
            metadata = get_artifact_definition(artifact.kind).initial_metadata()
        return replace(state, artifact=artifact, metadata=metadata)

    definition = get_artifact_definition(state.artifact.kind)
    metadata = state.metadata if state.metadata is not None else definition.initial_metadata()
    artifact, new_metadata = definition.on_stream_part(state.artifact, metadata, frame)
    if artifact is state.artifact and new_metadata is state.metadata:
        return state
    return replace(state, artifact=artifact, metadata=new_metadata)
