"""
Chat session state.

A ChatSession owns one conversation: its messages, the accumulator of each
streaming assistant message, the open artifact and the per-session caches
that keep memory results from being rendered or fetched twice. All changes
go through the reducers and are announced on the event bus.
"""

import logging
from typing import TYPE_CHECKING, Any, Literal

from config.preferences import memory_cache_key

from .accumulator import MessageAccumulator
from .artifacts import (
    ArtifactState,
    code_artifact,
    current_chapter,
    get_artifact_definition,
    next_chapter,
    previous_chapter,
    reduce_state,
    select_chapter,
    with_word_count,
)
from .autosave import Debouncer
from .constants import DEFAULT_AUTOSAVE_DELAY, DEFAULT_CHARS_PER_LINE, DEFAULT_LINES_PER_PAGE
from .dispatcher import ToolName, dispatch
from .events import ARTIFACT_UPDATED, MESSAGE_REPLACED, MESSAGE_UPDATED, Event, EventBus, NullEventBus
from .exceptions import InvalidOperationError, MalformedEventError, NotFoundError
from .lifecycle import LifecycleScope, ScopeClosedError
from .models import (
    Artifact,
    BookArtifactMetadata,
    Chapter,
    CodeArtifactMetadata,
    MemoryItem,
    Message,
    RendererDescriptor,
    StreamPart,
    TextPart,
    ToolPart,
    gen_id,
    normalize_memory,
)
from .paginator import Spread, SpreadNavigator, ViewMode
from .stream_parser import artifact_frame, parse_frame

if TYPE_CHECKING:
    from client.api_client import ApiClient
    from config.preferences import PreferenceStore

logger = logging.getLogger(__name__)

MEMORY_RENDERER = "memory-results"

ChapterAction = Literal["next", "previous", "select"]
SpreadAction = Literal["next", "previous", "current"]


class ChatSession:
    def __init__(
        self,
        session_id: str | None = None,
        event_bus: EventBus | None = None,
        preferences: "PreferenceStore | None" = None,
        api: "ApiClient | None" = None,
        autosave_delay: float = DEFAULT_AUTOSAVE_DELAY,
    ) -> None:
        self.id = session_id or gen_id("ses_")
        self.title = "New chat"
        self.messages: list[Message] = []
        self.artifact_state = ArtifactState()
        self.no_memory_messages: set[str] = set()
        self._rendered_memory_components: set[str] = set()
        self._accumulators: dict[str, MessageAccumulator] = {}
        self._event_bus = event_bus or NullEventBus()
        self._preferences = preferences
        self._api = api
        self.scope = LifecycleScope(f"session {self.id}")
        self.artifact_scope = LifecycleScope(f"artifact in session {self.id}")
        self._navigator: SpreadNavigator | None = None
        self._navigator_chapters: list[Chapter] | None = None
        self.autosave: Debouncer[Artifact] = Debouncer(self._save_document, autosave_delay)

    # -------------------------------------------------------------------------
    # Messages
    # -------------------------------------------------------------------------

    def get_message(self, message_id: str) -> Message:
        for message in self.messages:
            if message.id == message_id:
                return message
        raise NotFoundError("Message", message_id)

    def _index_of(self, message_id: str) -> int:
        for index, message in enumerate(self.messages):
            if message.id == message_id:
                return index
        raise NotFoundError("Message", message_id)

    def add_user_message(self, text: str, message_id: str | None = None) -> Message:
        message = Message(
            id=message_id or gen_id("msg_"),
            role="user",
            parts=[TextPart(text=text)],
        )
        self.messages.append(message)
        return message

    def start_assistant_message(self, message_id: str | None = None) -> Message:
        """Open a new assistant message that stream frames will fill in."""
        message = Message(id=message_id or gen_id("msg_"), role="assistant")
        self.messages.append(message)
        self._accumulators[message.id] = MessageAccumulator(message)
        return message

    async def apply_message_frames(
        self, message_id: str, frames: list[StreamPart | dict[str, Any]]
    ) -> Message:
        """
        Fold frames into an assistant message.

        Raises:
            NotFoundError: If the message does not exist
            InvalidOperationError: If the message is not an assistant message
        """
        index = self._index_of(message_id)
        accumulator = self._accumulators.get(message_id)
        if accumulator is None:
            if self.messages[index].role != "assistant":
                raise InvalidOperationError(f"Message {message_id} is not an assistant message")
            accumulator = MessageAccumulator(self.messages[index])
            self._accumulators[message_id] = accumulator

        before = accumulator.message
        message = accumulator.apply_all(frames)
        if message is not before:
            self.messages[index] = message
            await self._event_bus.publish(
                Event(
                    type=MESSAGE_UPDATED,
                    properties={"sessionID": self.id, "info": message.model_dump(mode="json")},
                )
            )
        return message

    async def apply_stream(
        self, message_id: str, frames: list[StreamPart | dict[str, Any]]
    ) -> Message:
        """
        Apply a mixed chat stream: `data-*` frames go to the artifact, the
        rest to the assistant message. Order is kept within each channel.
        """
        message_frames: list[StreamPart | dict[str, Any]] = []
        data_frames: list[StreamPart | dict[str, Any]] = []
        for raw in frames:
            try:
                frame = artifact_frame(raw)
            except MalformedEventError as e:
                logger.warning("Dropping frame: %s", e)
                continue
            if frame is None:
                message_frames.append(raw)
            else:
                data_frames.append(frame)
        if data_frames:
            await self.apply_artifact_frames(data_frames)
        return await self.apply_message_frames(message_id, message_frames)

    async def replace_message(self, message_id: str, message: Message) -> Message:
        """
        Replace a message after an edit, dropping every message after it.

        The replacement keeps the original id. Regenerated replies are
        streamed into a fresh assistant message afterwards.
        """
        index = self._index_of(message_id)
        if message.id != message_id:
            message = message.model_copy(update={"id": message_id})
        dropped = self.messages[index + 1:]
        self.messages = [*self.messages[:index], message]

        for old in [message_id, *(m.id for m in dropped)]:
            self._accumulators.pop(old, None)
            self.release_memory_component(old)
            self.no_memory_messages.discard(old)
        if message.role == "assistant":
            self._accumulators[message_id] = MessageAccumulator(message)

        await self._event_bus.publish(
            Event(
                type=MESSAGE_REPLACED,
                properties={
                    "sessionID": self.id,
                    "info": message.model_dump(mode="json"),
                    "removed": [m.id for m in dropped],
                },
            )
        )
        return message

    # -------------------------------------------------------------------------
    # Tool rendering and memory caches
    # -------------------------------------------------------------------------

    def claim_memory_component(self, message_id: str) -> bool:
        """Reserve the memory card for a message. False if it is already shown."""
        if message_id in self._rendered_memory_components:
            return False
        self._rendered_memory_components.add(message_id)
        return True

    def release_memory_component(self, message_id: str) -> None:
        self._rendered_memory_components.discard(message_id)

    def record_memory_results(self, message_id: str, output: Any) -> list[MemoryItem]:
        """Normalise a memory search result and cache it for the message."""
        raw = output.get("memories") if isinstance(output, dict) else None
        memories = [normalize_memory(m) for m in raw or [] if isinstance(m, dict)]
        if not memories:
            self.no_memory_messages.add(message_id)
        else:
            self.no_memory_messages.discard(message_id)
        if self._preferences is not None:
            self._preferences.set_json(
                memory_cache_key(message_id), [m.model_dump() for m in memories]
            )
        return memories

    def cached_memories(self, message_id: str) -> list[MemoryItem] | None:
        """Memories cached for a message, or None when nothing was cached."""
        if self._preferences is None:
            return None
        raw = self._preferences.get_json(memory_cache_key(message_id))
        if not isinstance(raw, list):
            return None
        return [normalize_memory(m) for m in raw if isinstance(m, dict)]

    def has_no_memories(self, message_id: str) -> bool:
        return message_id in self.no_memory_messages

    def render_tools(
        self, message_id: str, claim_memory: bool = False
    ) -> list[RendererDescriptor]:
        """
        Renderer descriptors for the tool parts of a message, in order.

        A message shows at most one memory card however many memory
        searches it ran. Completed searches are cached for later visits.
        With `claim_memory`, the card is left out if another view already
        claimed it.
        """
        message = self.get_message(message_id)
        descriptors = []
        showed_memory = False
        for part in message.parts:
            if not isinstance(part, ToolPart):
                continue
            descriptor = dispatch(
                part.toolName,
                part.state,
                input=part.input,
                output=part.output,
                tool_call_id=part.toolCallId,
                error_text=part.errorText,
            )
            if descriptor.renderer == MEMORY_RENDERER:
                if part.toolName == ToolName.SEARCH_MEMORIES.value:
                    self.record_memory_results(message_id, part.output)
                if showed_memory:
                    continue
                showed_memory = True
                if claim_memory and not self.claim_memory_component(message_id):
                    logger.debug("Memory card for %s already rendered", message_id)
                    continue
            descriptors.append(descriptor)
        return descriptors

    # -------------------------------------------------------------------------
    # Artifact
    # -------------------------------------------------------------------------

    async def _publish_artifact(self) -> None:
        state = self.artifact_state
        await self._event_bus.publish(
            Event(
                type=ARTIFACT_UPDATED,
                properties={
                    "sessionID": self.id,
                    "artifact": state.artifact.model_dump(mode="json"),
                    "metadata": state.metadata.model_dump(mode="json") if state.metadata else None,
                },
            )
        )

    async def open_artifact(self, artifact: Artifact) -> ArtifactState:
        """
        Show an artifact, loading whatever its kind needs from the API.

        Work still running for the previously open artifact, such as a code
        run, is cancelled and its results are discarded.

        Raises:
            ScopeClosedError: If the session is closed, or another artifact
                was opened before this one finished loading
        """
        if self.scope.closed:
            raise ScopeClosedError(f"{self.scope.name} is closed")
        await self.artifact_scope.close()
        scope = self.artifact_scope = LifecycleScope(f"artifact in session {self.id}")

        definition = get_artifact_definition(artifact.kind)
        artifact, metadata = await scope.run(definition.initialize(artifact, self._api))
        self.artifact_state = ArtifactState(
            artifact=artifact.model_copy(update={"isVisible": True}), metadata=metadata
        )
        await self._publish_artifact()
        return self.artifact_state

    async def apply_artifact_frames(
        self, frames: list[StreamPart | dict[str, Any]]
    ) -> ArtifactState:
        """Fold data-stream frames into the artifact. Bad frames are logged and skipped."""
        state = self.artifact_state
        for raw in frames:
            try:
                state = reduce_state(state, parse_frame(raw))
            except MalformedEventError as e:
                logger.warning("Dropping artifact frame: %s", e)
        if state is not self.artifact_state:
            self.artifact_state = state
            await self._publish_artifact()
        return state

    async def set_artifact_state(self, state: ArtifactState) -> ArtifactState:
        """Replace the artifact state with one computed by a reducer."""
        if state is not self.artifact_state:
            self.artifact_state = state
            await self._publish_artifact()
        return state

    async def run_code(self, timeout: int | None = None) -> CodeArtifactMetadata:
        """
        Run the open code artifact.

        Progress is only applied while the same code artifact stays open.

        Raises:
            InvalidOperationError: If the open artifact is not code
            ScopeClosedError: If another artifact was opened, or the session
                closed, before the run finished
        """
        state = self.artifact_state
        if state.artifact.kind != "code" or not isinstance(state.metadata, CodeArtifactMetadata):
            raise InvalidOperationError("The open artifact is not a code artifact")

        scope = self.artifact_scope
        document_id = state.artifact.documentId

        def still_open() -> bool:
            current = self.artifact_state.artifact
            return not scope.closed and current.kind == "code" and current.documentId == document_id

        async def on_update(metadata: CodeArtifactMetadata) -> None:
            if not still_open():
                logger.debug("Dropping code run update for closed artifact %s", document_id)
                return
            await self.set_artifact_state(
                ArtifactState(artifact=self.artifact_state.artifact, metadata=metadata)
            )

        kwargs = {"timeout": timeout} if timeout is not None else {}
        metadata = await scope.run(
            code_artifact.run(state.artifact, state.metadata, on_update, **kwargs)
        )
        if not still_open():
            raise ScopeClosedError(f"Artifact {document_id} was replaced while its code ran")
        if metadata is not self.artifact_state.metadata:
            await on_update(metadata)
        return metadata

    async def edit_artifact(self, content: str, debounce: bool = True) -> ArtifactState:
        """
        Apply a user edit to the open artifact and save it.

        Saves are debounced so a burst of keystrokes produces one write;
        pass debounce=False to save before returning.

        Raises:
            InvalidOperationError: If the artifact has no document yet
        """
        state = self.artifact_state
        if state.artifact.documentId == "init":
            raise InvalidOperationError("The artifact has not been saved as a document yet")
        if content == state.artifact.content:
            return state

        artifact = state.artifact.model_copy(update={"content": content})
        metadata = state.metadata
        if isinstance(metadata, BookArtifactMetadata):
            metadata = with_word_count(metadata, content)
        await self.set_artifact_state(ArtifactState(artifact=artifact, metadata=metadata))

        if debounce:
            self.autosave.schedule(artifact)
        else:
            self.autosave.cancel()
            await self._save_document(artifact)
        return self.artifact_state

    async def _save_document(self, artifact: Artifact) -> None:
        if self._api is None:
            logger.debug("No API client, not saving document %s", artifact.documentId)
            return
        await self._api.save_document(
            artifact.documentId, artifact.title, artifact.content, artifact.kind
        )
        logger.debug("Saved document %s", artifact.documentId)

    def _book_state(self) -> tuple[Artifact, BookArtifactMetadata]:
        state = self.artifact_state
        if state.artifact.kind != "book" or not isinstance(state.metadata, BookArtifactMetadata):
            raise InvalidOperationError("The open artifact is not a book")
        return state.artifact, state.metadata

    async def _show_chapter(self, artifact: Artifact, metadata: BookArtifactMetadata) -> ArtifactState:
        chapter = current_chapter(metadata)
        if chapter is not None and chapter.content != artifact.content:
            artifact = artifact.model_copy(update={"content": chapter.content})
        return await self.set_artifact_state(ArtifactState(artifact=artifact, metadata=metadata))

    async def navigate_chapter(
        self, action: ChapterAction, chapter_number: int | None = None
    ) -> ArtifactState:
        """
        Move the open book to another chapter.

        Raises:
            InvalidOperationError: If no book is open, or `select` names a
                chapter that does not exist
        """
        artifact, metadata = self._book_state()
        if action == "next":
            updated = next_chapter(metadata)
        elif action == "previous":
            updated = previous_chapter(metadata)
        else:
            if chapter_number is None:
                raise InvalidOperationError("select needs a chapter number")
            updated = select_chapter(metadata, chapter_number)
        if updated is metadata:
            return self.artifact_state
        return await self._show_chapter(artifact, updated)

    async def navigate_spread(
        self,
        action: SpreadAction,
        view_mode: ViewMode = "two-column",
        lines_per_page: int = DEFAULT_LINES_PER_PAGE,
        chars_per_line: int = DEFAULT_CHARS_PER_LINE,
    ) -> Spread:
        """
        Page through the open book, crossing chapter boundaries as needed.

        `current` just reports the visible spread. Moving into another
        chapter updates the book's current chapter.

        Raises:
            InvalidOperationError: If no book is open or it has no chapters
        """
        artifact, metadata = self._book_state()
        navigator = self._navigator
        if (
            navigator is None
            or self._navigator_chapters is not metadata.chapters
            or navigator.chapter_number != metadata.currentChapter
        ):
            navigator = SpreadNavigator(
                metadata.chapters,
                chapter_number=metadata.currentChapter,
                view_mode=view_mode,
                lines_per_page=lines_per_page,
                chars_per_line=chars_per_line,
            )
            self._navigator = navigator
            self._navigator_chapters = metadata.chapters
        navigator.set_view_mode(view_mode)

        if action == "next":
            navigator.next()
        elif action == "previous":
            navigator.previous()

        if navigator.chapter_number != metadata.currentChapter:
            await self._show_chapter(
                artifact, select_chapter(metadata, navigator.chapter_number)
            )
        return navigator.current()

    async def close(self) -> None:
        self.autosave.cancel()
        await self.artifact_scope.close()
        await self.scope.close()

    def to_dict(self) -> dict[str, Any]:
        state = self.artifact_state
        return {
            "id": self.id,
            "title": self.title,
            "messages": [m.model_dump(mode="json") for m in self.messages],
            "artifact": state.artifact.model_dump(mode="json"),
            "metadata": state.metadata.model_dump(mode="json") if state.metadata else None,
        }
