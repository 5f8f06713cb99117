"""
Artifact endpoints.

Open an artifact in a session, edit it, page through books, run code and
save it to memory.
"""

import logging

from fastapi import APIRouter, HTTPException

from client.actions import save_to_memory
from client.notify import RecordingNotifier
from core import Artifact, InvalidOperationError, NotFoundError, TransportError
from core.artifacts import ArtifactState
from core.lifecycle import ScopeClosedError

from ..logging_config import log_timing
from ..requests import (
    ChapterNavigationRequest,
    EditArtifactRequest,
    OpenArtifactRequest,
    RunCodeRequest,
    SpreadNavigationRequest,
)
from ..state import get_api_client, get_config, get_feature_manager, get_session

logger = logging.getLogger(__name__)

router = APIRouter()


def _state_response(state: ArtifactState) -> dict:
    return {
        "artifact": state.artifact.model_dump(mode="json"),
        "metadata": state.metadata.model_dump(mode="json") if state.metadata else None,
    }


def _session(session_id: str):
    try:
        return get_session(session_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")


@router.get("/session/{sessionID}/artifact")
async def get_artifact_route(sessionID: str) -> dict:
    """Get the open artifact and its metadata."""
    return _state_response(_session(sessionID).artifact_state)


@router.post("/session/{sessionID}/artifact")
async def open_artifact_route(sessionID: str, request: OpenArtifactRequest) -> dict:
    """Open an artifact, loading its suggestions, document or chapters."""
    session = _session(sessionID)
    artifact = Artifact(**request.model_dump())
    try:
        with log_timing(logger, f"Opening {artifact.kind} artifact {artifact.documentId}"):
            state = await session.open_artifact(artifact)
    except ScopeClosedError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _state_response(state)


@router.put("/session/{sessionID}/artifact/content")
async def edit_artifact_route(sessionID: str, request: EditArtifactRequest) -> dict:
    """Replace the open artifact's content and save it as a new version."""
    session = _session(sessionID)
    try:
        state = await session.edit_artifact(request.content, debounce=request.debounce)
    except InvalidOperationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except TransportError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return _state_response(state)


@router.post("/session/{sessionID}/artifact/chapter")
async def navigate_chapter_route(sessionID: str, request: ChapterNavigationRequest) -> dict:
    """Move the open book to the next, previous or a selected chapter."""
    session = _session(sessionID)
    try:
        state = await session.navigate_chapter(request.action, request.chapterNumber)
    except InvalidOperationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _state_response(state)


@router.post("/session/{sessionID}/artifact/spread")
async def navigate_spread_route(sessionID: str, request: SpreadNavigationRequest) -> dict:
    """Page through the open book one spread (or page) at a time."""
    session = _session(sessionID)
    view_mode = request.viewMode
    if view_mode == "two-column" and not get_feature_manager().is_enabled("two_column_view"):
        view_mode = "single"
    paginator = get_config().paginator
    try:
        spread = await session.navigate_spread(
            request.action,
            view_mode=view_mode,
            lines_per_page=paginator.lines_per_page,
            chars_per_line=paginator.chars_per_line,
        )
    except InvalidOperationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {
        "chapterNumber": spread.chapter_number,
        "index": spread.index,
        "left": spread.left,
        "right": spread.right,
        "leftPageNumber": spread.left_page_number,
        "totalPages": spread.total_pages,
        "viewMode": view_mode,
    }


@router.post("/session/{sessionID}/artifact/run")
async def run_code_route(sessionID: str, request: RunCodeRequest) -> dict:
    """Run the open code artifact, or toggle its preview for web languages."""
    if not get_feature_manager().is_enabled("code_execution"):
        raise HTTPException(status_code=403, detail="Code execution is disabled")
    session = _session(sessionID)
    try:
        await session.run_code(timeout=request.timeout)
    except InvalidOperationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ScopeClosedError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _state_response(session.artifact_state)


@router.post("/session/{sessionID}/artifact/memory")
async def save_artifact_to_memory_route(sessionID: str) -> dict:
    """Save the open artifact to long-term memory and report the toasts it raised."""
    if not get_feature_manager().is_enabled("memory"):
        raise HTTPException(status_code=403, detail="Memory is disabled")
    session = _session(sessionID)
    state = session.artifact_state
    notifier = RecordingNotifier()
    try:
        saved = await session.scope.run(
            save_to_memory(get_api_client(), notifier, state.artifact, state.metadata)
        )
    except ScopeClosedError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {
        "saved": saved,
        "toasts": [{"level": level, "message": message} for level, message in notifier.toasts],
    }
