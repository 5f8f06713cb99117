"""
Tool result dispatch.

Maps a tool invocation (name, state, input, output) to the descriptor of the
presentational component that should draw it. Dispatch is pure: no I/O, no
mutation of its arguments.

Every ToolName member must have a result renderer. The table is checked when
this module is imported, so adding a tool without a renderer fails at start-up
instead of silently falling through at render time. Names that are not
ToolName members fall back to the generic key/value renderer.
"""

from enum import Enum
from typing import Any, Callable

from .constants import (
    DEFAULT_MERGED_IMAGE_DIMENSIONS,
    DEFAULT_MERGED_IMAGE_FORMAT,
    LABEL_PREVIEW_CHARS,
)
from .models import RendererDescriptor, ToolState, normalize_memory

GENERIC_RENDERER = "key-value"
SPINNER_RENDERER = "spinner"
ERROR_RENDERER = "tool-error"


class ToolName(str, Enum):
    """Tools the presentation layer knows how to draw."""

    GET_WEATHER = "getWeather"
    CREATE_DOCUMENT = "createDocument"
    UPDATE_DOCUMENT = "updateDocument"
    REQUEST_SUGGESTIONS = "requestSuggestions"
    SEARCH_MEMORIES = "searchMemories"
    GET_MEMORY = "get_memory"
    ADD_MEMORY = "addMemory"
    CREATE_BOOK = "createBook"
    SEARCH_BOOKS = "searchBooks"
    CREATE_IMAGE = "createImage"
    CREATE_STRUCTURED_BOOK_IMAGES = "createStructuredBookImages"
    CREATE_BOOK_IMAGE_PLAN = "createBookImagePlan"
    CREATE_BOOK_PLAN = "createBookPlan"
    DRAFT_CHAPTER = "draftChapter"
    SEGMENT_CHAPTER_INTO_SCENES = "segmentChapterIntoScenes"
    CREATE_CHARACTER_PORTRAITS = "createCharacterPortraits"
    CREATE_ENVIRONMENTS = "createEnvironments"
    CREATE_SCENE_MANIFEST = "createSceneManifest"
    CREATE_BOOK_ARTIFACT = "createBookArtifact"
    CREATE_SINGLE_BOOK_IMAGE = "createSingleBookImage"
    SEARCH_BOOK_PROPS = "searchBookProps"
    GENERATE_IMAGE = "generateImage"
    EDIT_IMAGE = "editImage"
    MERGE_IMAGES = "mergeImages"
    RENDER_SCENE = "renderScene"
    # Task tracking
    TASK_TRACKER = "taskTracker"
    CREATE_TASK_PLAN = "createTaskPlan"
    UPDATE_TASK = "updateTask"
    COMPLETE_TASK = "completeTask"
    GET_TASK_STATUS = "getTaskStatus"
    ADD_TASK = "addTask"
    # GitHub
    LIST_REPOSITORIES = "listRepositories"
    CREATE_PROJECT = "createProject"
    GET_REPOSITORY_FILES = "getRepositoryFiles"
    GET_FILE_CONTENT = "getFileContent"
    SEARCH_FILES = "searchFiles"
    OPEN_FILE_EXPLORER = "openFileExplorer"
    CREATE_REPOSITORY = "createRepository"
    REQUEST_REPOSITORY_APPROVAL = "requestRepositoryApproval"
    GET_BRANCH_STATUS = "getBranchStatus"
    UPDATE_STAGED_FILE = "updateStagedFile"
    GET_STAGING_STATE = "getStagingState"
    CLEAR_STAGED_FILES = "clearStagedFiles"


def lookup_tool(tool_name: str) -> ToolName | None:
    """Return the ToolName for a wire name, or None if it is not known."""
    try:
        return ToolName(tool_name)
    except ValueError:
        return None


def _preview(text: Any) -> str:
    text = str(text or "")
    if len(text) > LABEL_PREVIEW_CHARS:
        return f"{text[:LABEL_PREVIEW_CHARS]}..."
    return text


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'s' if count != 1 else ''}"


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


# =============================================================================
# Result renderers (state == output-available)
# =============================================================================

ResultBuilder = Callable[[dict[str, Any], Any], tuple[str, dict[str, Any]]]


def _passthrough(renderer: str, prop: str = "result") -> ResultBuilder:
    def build(input: dict[str, Any], output: Any) -> tuple[str, dict[str, Any]]:
        return renderer, {prop: output}

    return build


def _document(kind: str) -> ResultBuilder:
    def build(input: dict[str, Any], output: Any) -> tuple[str, dict[str, Any]]:
        return "document-result", {"type": kind, "result": output}

    return build


def _generic(input: dict[str, Any], output: Any) -> tuple[str, dict[str, Any]]:
    if isinstance(output, dict):
        return GENERIC_RENDERER, {"entries": [[key, value] for key, value in output.items()]}
    return GENERIC_RENDERER, {"value": output}


def _memory_results(input: dict[str, Any], output: Any) -> tuple[str, dict[str, Any]]:
    raw = _as_dict(output).get("memories") or []
    memories = [normalize_memory(m).model_dump() for m in raw if isinstance(m, dict)]
    return "memory-results", {"memories": memories, "count": len(memories)}


def _add_memory(input: dict[str, Any], output: Any) -> tuple[str, dict[str, Any]]:
    result = _as_dict(output)
    return "add-memory-result", {
        "success": bool(result.get("success", False)),
        "message": result.get("message"),
        "memoryId": result.get("memoryId"),
        "error": result.get("error"),
        "category": input.get("category") or input.get("type"),
        "content": input.get("content"),
    }


def _merge_images(input: dict[str, Any], output: Any) -> tuple[str, dict[str, Any]]:
    # The grid layout comes from the call's input: the layout echoed in the
    # output can arrive truncated upstream.
    result = _as_dict(output)
    images = input.get("images") or []
    return "merged-images-result", {
        "mergedImageUrl": result.get("mergedImageUrl"),
        "gridLayout": images,
        "dimensions": result.get("dimensions") or dict(DEFAULT_MERGED_IMAGE_DIMENSIONS),
        "processedImages": result.get("processedImages") or len(images),
        "format": result.get("format") or DEFAULT_MERGED_IMAGE_FORMAT,
    }


def _task_card(input: dict[str, Any], output: Any) -> tuple[str, dict[str, Any]]:
    result = _as_dict(output)
    return "task-card", {
        "type": result.get("type") or "task-status",
        "tasks": result.get("tasks"),
        "task": result.get("task"),
        "nextTask": result.get("nextTask"),
        "progress": result.get("progress"),
        "allCompleted": result.get("allCompleted"),
        "message": result.get("message"),
    }


_GITHUB_SECTIONS = (
    ("repositories", "repo-results"),
    ("searchResults", "search-results"),
    ("file", "file-display"),
    ("repository", "repository-created"),
    ("stagedFiles", "staged-files"),
)


def _github(input: dict[str, Any], output: Any) -> tuple[str, dict[str, Any]]:
    result = _as_dict(output)
    if not result.get("success"):
        return "github-result", {"success": False, "error": result.get("error"), "sections": []}
    sections = [
        {"section": section, "data": result[key]}
        for key, section in _GITHUB_SECTIONS
        if result.get(key)
    ]
    return "github-result", {
        "success": True,
        "sections": sections,
        "searchQuery": result.get("searchQuery", ""),
        "editSuggestion": result.get("editSuggestion"),
    }


def _github_staging(tool: ToolName) -> ResultBuilder:
    def build(input: dict[str, Any], output: Any) -> tuple[str, dict[str, Any]]:
        return "github-staging", {"summary": tool_summary(tool.value, output), "result": output}

    return build


RESULT_RENDERERS: dict[ToolName, ResultBuilder] = {
    ToolName.GET_WEATHER: _passthrough("weather", "weatherAtLocation"),
    ToolName.CREATE_DOCUMENT: _document("create"),
    ToolName.UPDATE_DOCUMENT: _document("update"),
    ToolName.REQUEST_SUGGESTIONS: _document("request-suggestions"),
    ToolName.SEARCH_MEMORIES: _memory_results,
    ToolName.GET_MEMORY: _memory_results,
    ToolName.ADD_MEMORY: _add_memory,
    ToolName.CREATE_BOOK: _passthrough("book-result"),
    ToolName.SEARCH_BOOKS: _passthrough("search-books-results", "searchResult"),
    ToolName.CREATE_IMAGE: _passthrough("create-image-result"),
    ToolName.CREATE_STRUCTURED_BOOK_IMAGES: _passthrough("structured-book-image-results"),
    ToolName.CREATE_BOOK_IMAGE_PLAN: _passthrough("book-image-plan-result"),
    ToolName.CREATE_BOOK_PLAN: _passthrough("book-plan-result"),
    ToolName.DRAFT_CHAPTER: _passthrough("chapter-draft-result"),
    ToolName.SEGMENT_CHAPTER_INTO_SCENES: _passthrough("scene-segmentation-result"),
    ToolName.CREATE_CHARACTER_PORTRAITS: _passthrough("character-portraits-result"),
    ToolName.CREATE_ENVIRONMENTS: _passthrough("environments-result"),
    ToolName.CREATE_SCENE_MANIFEST: _passthrough("scene-manifest-result"),
    ToolName.CREATE_BOOK_ARTIFACT: _passthrough("book-artifact-result"),
    ToolName.CREATE_SINGLE_BOOK_IMAGE: _passthrough("single-book-image-result"),
    ToolName.SEARCH_BOOK_PROPS: _passthrough("search-book-props-result"),
    ToolName.GENERATE_IMAGE: _passthrough("image-result"),
    ToolName.EDIT_IMAGE: _passthrough("image-edit-result"),
    ToolName.MERGE_IMAGES: _merge_images,
    ToolName.RENDER_SCENE: _generic,
    ToolName.TASK_TRACKER: _task_card,
    ToolName.CREATE_TASK_PLAN: _task_card,
    ToolName.UPDATE_TASK: _task_card,
    ToolName.COMPLETE_TASK: _task_card,
    ToolName.GET_TASK_STATUS: _task_card,
    ToolName.ADD_TASK: _task_card,
    ToolName.LIST_REPOSITORIES: _github,
    ToolName.CREATE_PROJECT: _github,
    ToolName.GET_REPOSITORY_FILES: _github,
    ToolName.GET_FILE_CONTENT: _github,
    ToolName.SEARCH_FILES: _github,
    ToolName.OPEN_FILE_EXPLORER: _github,
    ToolName.CREATE_REPOSITORY: _github,
    ToolName.REQUEST_REPOSITORY_APPROVAL: _github,
    ToolName.GET_BRANCH_STATUS: _github_staging(ToolName.GET_BRANCH_STATUS),
    ToolName.UPDATE_STAGED_FILE: _github_staging(ToolName.UPDATE_STAGED_FILE),
    ToolName.GET_STAGING_STATE: _github_staging(ToolName.GET_STAGING_STATE),
    ToolName.CLEAR_STAGED_FILES: _github_staging(ToolName.CLEAR_STAGED_FILES),
}

_missing = [tool.value for tool in ToolName if tool not in RESULT_RENDERERS]
if _missing:
    raise RuntimeError(f"No result renderer for tools: {', '.join(_missing)}")


# =============================================================================
# In-progress placeholders (input-streaming / input-available)
# =============================================================================

ProgressBuilder = Callable[[dict[str, Any]], tuple[str, dict[str, Any]]]


def _progress(label: Callable[[dict[str, Any]], str]) -> ProgressBuilder:
    def build(input: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        return "progress", {"label": label(input)}

    return build


def _document_call(kind: str) -> ProgressBuilder:
    def build(input: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        return "document-call", {"type": kind, "args": input}

    return build


def _search_books_label(input: dict[str, Any]) -> str:
    if input.get("bookTitle"):
        return f'Looking for "{input["bookTitle"]}"'
    return "Finding all books in your library"


def _memory_search_label(input: dict[str, Any]) -> str:
    if input.get("query"):
        return f'Looking for: "{_preview(input["query"])}"'
    return "Searching your memories..."


def _single_book_image_label(input: dict[str, Any]) -> str:
    kind = "Character Portrait" if input.get("type") == "character" else "Book Image"
    name = f": {input['name']}" if input.get("name") else ""
    return f"{kind}{name}"


def _portraits_label(input: dict[str, Any]) -> str:
    characters = input.get("characters") or []
    if characters:
        return f"Generating portraits for {_plural(len(characters), 'character')}"
    return "Generating character portraits..."


def _environments_label(input: dict[str, Any]) -> str:
    environments = input.get("environments") or []
    if environments:
        return f"Generating {_plural(len(environments), 'environment')}"
    return "Generating environment master plates..."


def _render_scene_label(input: dict[str, Any]) -> str:
    if input.get("sceneId"):
        return f"Composing scene: {input['sceneId']}"
    return "Composing scene with characters and environment..."


_BOOK_ARTIFACT_ACTIONS = {
    "initialize": "Initializing Book Creation",
    "update_step": "Updating Step {step}",
    "approve_step": "Processing Step {step} Approval",
    "regenerate": "Regenerating Step {step}",
    "finalize": "Finalizing Book",
}


def _book_artifact_label(input: dict[str, Any]) -> str:
    template = _BOOK_ARTIFACT_ACTIONS.get(input.get("action") or "", "Processing Book Creation")
    return template.format(step=input.get("stepNumber"))


PROGRESS_RENDERERS: dict[ToolName, ProgressBuilder] = {
    ToolName.GET_WEATHER: lambda input: ("weather-skeleton", {}),
    ToolName.CREATE_DOCUMENT: _document_call("create"),
    ToolName.UPDATE_DOCUMENT: _document_call("update"),
    ToolName.REQUEST_SUGGESTIONS: _document_call("request-suggestions"),
    ToolName.CREATE_BOOK: lambda input: ("book-call", {"args": input}),
    ToolName.SEARCH_BOOKS: _progress(_search_books_label),
    ToolName.GENERATE_IMAGE: _progress(lambda input: f"Creating: {_preview(input.get('prompt'))}"),
    ToolName.CREATE_IMAGE: _progress(lambda input: f"Creating: {_preview(input.get('description'))}"),
    ToolName.CREATE_SINGLE_BOOK_IMAGE: _progress(_single_book_image_label),
    ToolName.SEARCH_MEMORIES: _progress(_memory_search_label),
    ToolName.GET_MEMORY: _progress(_memory_search_label),
    ToolName.CREATE_CHARACTER_PORTRAITS: _progress(_portraits_label),
    ToolName.CREATE_ENVIRONMENTS: _progress(_environments_label),
    ToolName.CREATE_SCENE_MANIFEST: _progress(lambda input: "Planning scene composition and visual elements..."),
    ToolName.RENDER_SCENE: _progress(_render_scene_label),
    ToolName.CREATE_BOOK_ARTIFACT: _progress(_book_artifact_label),
    ToolName.ADD_MEMORY: _progress(lambda input: "Adding to memory..."),
}


def tool_label(tool_name: str, input: dict[str, Any] | None = None) -> str:
    """One-line description of a call that is still running."""
    args = input or {}
    tool = lookup_tool(tool_name)
    if tool is ToolName.GET_WEATHER:
        return f"Getting weather for {args.get('location') or '...'}"
    if tool is ToolName.CREATE_DOCUMENT:
        return f"Creating document: {args.get('title') or '...'}"
    if tool is ToolName.UPDATE_DOCUMENT:
        return f"Updating document: {args.get('title') or '...'}"
    if tool is ToolName.REQUEST_SUGGESTIONS:
        return "Generating suggestions"
    if tool in (ToolName.SEARCH_MEMORIES, ToolName.GET_MEMORY):
        return f'Searching memories: "{args.get("query") or "..."}"'
    if tool is ToolName.TASK_TRACKER:
        action = args.get("action")
        if action == "create_plan":
            return f"Creating task plan ({len(args.get('tasks') or [])} tasks)"
        return {
            "complete_task": "Completing task",
            "update_task": "Updating task status",
            "get_status": "Checking task progress",
        }.get(action, "Managing tasks")
    if tool is ToolName.LIST_REPOSITORIES:
        return "Loading repositories..."
    if tool is ToolName.CREATE_PROJECT:
        return f"Creating project: {_as_dict(args.get('project')).get('name') or '...'}"
    if tool in (ToolName.GET_REPOSITORY_FILES, ToolName.OPEN_FILE_EXPLORER):
        repo = _as_dict(args.get("repository"))
        verb = "Loading files from" if tool is ToolName.GET_REPOSITORY_FILES else "Opening file explorer:"
        return f"{verb} {repo.get('owner')}/{repo.get('name')}..."
    if tool is ToolName.GET_FILE_CONTENT:
        return f"Reading file: {args.get('path') or '...'}"
    if tool is ToolName.SEARCH_FILES:
        return f'Searching files: "{args.get("query") or "..."}"'
    if tool is ToolName.CREATE_REPOSITORY:
        return f"Creating repository: {args.get('name') or '...'}"
    if tool is ToolName.REQUEST_REPOSITORY_APPROVAL:
        return f"Requesting approval: {args.get('name') or '...'}"
    if tool is ToolName.GET_BRANCH_STATUS:
        return "Checking branch status..."
    if tool is ToolName.UPDATE_STAGED_FILE:
        return f"Updating file: {args.get('filePath') or '...'}"
    return f"Running {tool_name}..."


def tool_summary(tool_name: str, output: Any) -> str:
    """One-line status for a finished call."""
    result = _as_dict(output)
    if not result.get("success"):
        return f"Error: {result.get('error')}"

    tool = lookup_tool(tool_name)
    if tool in (ToolName.SEARCH_MEMORIES, ToolName.GET_MEMORY):
        return f"Found {len(result.get('memories') or [])} relevant memories"
    if tool is ToolName.TASK_TRACKER:
        if result.get("allCompleted"):
            return "All tasks completed!"
        if result.get("nextTask"):
            return f"Next: {_as_dict(result['nextTask']).get('title')}"
        return result.get("message") or "Task updated"
    if tool is ToolName.LIST_REPOSITORIES:
        return f"Found {len(result.get('repositories') or [])} repositories"
    if tool is ToolName.CREATE_PROJECT:
        name = _as_dict(result.get("project")).get("name")
        return f'Created project "{name}" with {len(result.get("stagedFiles") or [])} files'
    if tool is ToolName.GET_REPOSITORY_FILES:
        return f"Loaded {len(result.get('files') or [])} files from {result.get('currentPath') or '/'}"
    if tool is ToolName.SEARCH_FILES:
        return f"Found {len(result.get('searchResults') or [])} matching files"
    if tool is ToolName.CREATE_REPOSITORY:
        if result.get("requiresApproval"):
            return "Awaiting approval"
        return f'Created repository "{_as_dict(result.get("repository")).get("name")}"'
    if tool is ToolName.UPDATE_STAGED_FILE:
        return f"Updated {result.get('filePath') or 'file'} in staging area"
    if tool is ToolName.GET_BRANCH_STATUS:
        if result.get("branchName"):
            return f"On branch: {result['branchName']}"
        return result.get("message") or ""
    if tool is ToolName.OPEN_FILE_EXPLORER:
        return f"Opened file explorer for {_as_dict(result.get('repository')).get('full_name')}"
    if tool is ToolName.GET_STAGING_STATE:
        staged = result.get("stagedFiles") or []
        return f"{_plural(len(staged), 'file')} staged" if staged else "No files currently staged"
    if tool is ToolName.CLEAR_STAGED_FILES:
        return f"Cleared {result.get('clearedCount', 0)} staged files"
    return "Operation completed successfully"


# =============================================================================
# Dispatch
# =============================================================================


def dispatch(
    tool_name: str,
    state: ToolState,
    input: dict[str, Any] | None = None,
    output: Any = None,
    tool_call_id: str | None = None,
    error_text: str | None = None,
) -> RendererDescriptor:
    """
    Choose the renderer for a tool part.

    Args:
        tool_name: Wire name of the tool (the part type without `tool-`)
        state: Current state of the call
        input: Arguments the model passed to the tool
        output: Tool result, when available
        tool_call_id: Call id, echoed back on the descriptor
        error_text: Error message for output-error parts

    Returns:
        The renderer name and the props it should receive
    """
    args = input or {}
    state = ToolState(state)
    tool = lookup_tool(tool_name)

    if state is ToolState.OUTPUT_AVAILABLE:
        builder = RESULT_RENDERERS[tool] if tool is not None else _generic
        renderer, props = builder(args, output)
    elif state is ToolState.OUTPUT_ERROR:
        error = str(error_text or _as_dict(output).get("error") or "Unknown error")
        variant = "busy" if "overloaded" in error.lower() else "error"
        renderer, props = ERROR_RENDERER, {"error": error, "variant": variant}
    else:
        progress = PROGRESS_RENDERERS.get(tool) if tool is not None else None
        if progress is not None:
            renderer, props = progress(args)
        else:
            renderer, props = SPINNER_RENDERER, {"label": tool_label(tool_name, args)}

    return RendererDescriptor(
        renderer=renderer,
        toolName=tool_name,
        toolCallId=tool_call_id,
        state=state,
        props=props,
    )
