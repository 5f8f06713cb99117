"""
Code artifact: streamed source, preview mode and a run console.

Previewable languages (html, svg, javascript, jsx) toggle a rendered
preview. Python is executed in a subprocess; each run appends one
ConsoleOutput to the metadata, keyed by a generated run id.
"""

import ast
import asyncio
import logging
import sys
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Awaitable, Callable, Literal

from ..constants import DEFAULT_CODE_TIMEOUT, IMAGE_OUTPUT_PREFIX, PREVIEWABLE_LANGUAGES
from ..exceptions import TransportError
from ..models import (
    Artifact,
    ArtifactMetadata,
    CodeArtifactMetadata,
    ConsoleOutput,
    ConsoleOutputContent,
    ConsoleStatus,
    StreamPart,
    gen_id,
)
from ..stream_parser import StreamEventKind, classify
from .base import ArtifactDefinition, _text, register_artifact

if TYPE_CHECKING:
    from client.api_client import ApiClient

logger = logging.getLogger(__name__)

Language = Literal["python", "html", "jsx", "svg", "javascript", "unknown"]

_JSX_MARKERS = ("import React", "export default", "React.", "<div", "</div>", "function Component")
_HTML_MARKERS = ("<!DOCTYPE html", "<html", "</html>")
_SVG_MARKERS = ("<svg", "</svg>")
_JS_MARKERS = ("document.getElementById", "function(", "() =>", "addEventListener")
_PYTHON_MARKERS = ("import matplotlib", "def ", "print(", "if __name__")


def detect_language(code: str) -> Language:
    """Guess the language of a code artifact from marker substrings."""
    if any(marker in code for marker in _JSX_MARKERS):
        return "jsx"
    if any(marker in code for marker in _HTML_MARKERS):
        return "html"
    if any(marker in code for marker in _SVG_MARKERS):
        return "svg"
    if any(marker in code for marker in _JS_MARKERS) or (
        "const " in code and "import " not in code
    ):
        return "javascript"
    if any(marker in code for marker in _PYTHON_MARKERS):
        return "python"
    return "unknown"


def is_previewable(code: str) -> bool:
    return detect_language(code) in PREVIEWABLE_LANGUAGES


# Console lifecycle. Each call replaces the run's entry and moves it to the
# end of the list.

def _upsert_output(
    metadata: CodeArtifactMetadata,
    run_id: str,
    status: ConsoleStatus,
    contents: list[ConsoleOutputContent],
) -> CodeArtifactMetadata:
    outputs = [o for o in metadata.outputs if o.id != run_id]
    outputs.append(ConsoleOutput(id=run_id, contents=contents, status=status))
    return metadata.model_copy(update={"outputs": outputs})


def start_run(metadata: CodeArtifactMetadata, run_id: str) -> CodeArtifactMetadata:
    return _upsert_output(metadata, run_id, "in_progress", [])


def mark_loading_packages(
    metadata: CodeArtifactMetadata, run_id: str, message: str
) -> CodeArtifactMetadata:
    return _upsert_output(
        metadata, run_id, "loading_packages", [ConsoleOutputContent(type="text", value=message)]
    )


def complete_run(
    metadata: CodeArtifactMetadata, run_id: str, contents: list[ConsoleOutputContent]
) -> CodeArtifactMetadata:
    return _upsert_output(metadata, run_id, "completed", contents)


def fail_run(metadata: CodeArtifactMetadata, run_id: str, error: str) -> CodeArtifactMetadata:
    return _upsert_output(
        metadata, run_id, "failed", [ConsoleOutputContent(type="text", value=error)]
    )


def clear_outputs(metadata: CodeArtifactMetadata) -> CodeArtifactMetadata:
    if not metadata.outputs:
        return metadata
    return metadata.model_copy(update={"outputs": []})


def toggle_preview(metadata: CodeArtifactMetadata) -> CodeArtifactMetadata:
    return metadata.model_copy(update={"previewMode": not metadata.previewMode})


def output_contents(stdout: str) -> list[ConsoleOutputContent]:
    """Split program output into console contents; image data lines become images."""
    contents = []
    for line in stdout.splitlines():
        if not line:
            continue
        kind = "image" if line.startswith(IMAGE_OUTPUT_PREFIX) else "text"
        contents.append(ConsoleOutputContent(type=kind, value=line))
    return contents


def third_party_imports(code: str) -> list[str]:
    """Top-level modules the code imports that are not in the standard library."""
    try:
        tree = ast.parse(code)
    except SyntaxError:
        return []
    names: set[str] = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            names.update(alias.name.split(".")[0] for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.module and node.level == 0:
            names.add(node.module.split(".")[0])
    return sorted(n for n in names if n not in sys.stdlib_module_names)


async def execute_python(code: str, timeout: int = DEFAULT_CODE_TIMEOUT) -> tuple[int, str, str]:
    """
    Execute Python code in a subprocess.

    The subprocess is killed on timeout or cancellation. Output that is not
    valid UTF-8 is decoded with replacement characters.

    Args:
        code: Python code to execute
        timeout: Maximum execution time in seconds

    Returns:
        (exit code, stdout, stderr)

    Raises:
        asyncio.TimeoutError: If the program runs longer than `timeout`
    """
    with tempfile.NamedTemporaryFile(mode="w", suffix=".py", delete=False) as f:
        f.write(code)
        script_path = f.name

    try:
        process = await asyncio.create_subprocess_exec(
            sys.executable,
            script_path,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
        except (asyncio.TimeoutError, asyncio.CancelledError):
            process.kill()
            await process.wait()
            raise
        return (
            process.returncode or 0,
            stdout.decode(errors="replace"),
            stderr.decode(errors="replace"),
        )
    finally:
        Path(script_path).unlink(missing_ok=True)


class CodeArtifact(ArtifactDefinition):
    kind = "code"
    description = "Useful for code generation; Code execution is only available for python code."

    def initial_metadata(self) -> CodeArtifactMetadata:
        return CodeArtifactMetadata()

    async def initialize(
        self, artifact: Artifact, api: "ApiClient | None" = None
    ) -> tuple[Artifact, ArtifactMetadata]:
        metadata = self.initial_metadata()
        if api is None or artifact.documentId == "init":
            return artifact, metadata

        try:
            documents = await api.get_document(artifact.documentId)
        except TransportError as e:
            logger.warning("Failed to fetch document %s: %s", artifact.documentId, e)
            return artifact, metadata
        if not documents:
            return artifact, metadata

        content = documents[-1].get("content") or ""
        if content and not artifact.content:
            artifact = artifact.model_copy(update={"content": content})
        if is_previewable(artifact.content):
            metadata = metadata.model_copy(update={"previewMode": True})
        return artifact, metadata

    def on_stream_part(
        self, artifact: Artifact, metadata: ArtifactMetadata, frame: StreamPart
    ) -> tuple[Artifact, ArtifactMetadata]:
        if classify(frame.type) is not StreamEventKind.CODE_DELTA:
            return artifact, metadata
        code = _text(frame)
        if not code:
            return artifact, metadata
        artifact = artifact.model_copy(
            update={"content": code, "isVisible": True, "status": "streaming"}
        )
        if is_previewable(code) and not metadata.previewMode:
            metadata = metadata.model_copy(update={"previewMode": True})
        return artifact, metadata

    async def run(
        self,
        artifact: Artifact,
        metadata: CodeArtifactMetadata,
        on_update: Callable[[CodeArtifactMetadata], Awaitable[None]] | None = None,
        timeout: int = DEFAULT_CODE_TIMEOUT,
    ) -> CodeArtifactMetadata:
        """
        Run the artifact's code.

        Previewable code just flips preview mode. Python runs in a
        subprocess and reports progress through `on_update` as its console
        entry moves from in_progress to completed or failed.
        """
        if is_previewable(artifact.content):
            return toggle_preview(metadata)

        async def publish(updated: CodeArtifactMetadata) -> CodeArtifactMetadata:
            if on_update is not None:
                await on_update(updated)
            return updated

        run_id = gen_id("run_")
        metadata = await publish(start_run(metadata, run_id))

        packages = third_party_imports(artifact.content)
        if packages:
            metadata = await publish(
                mark_loading_packages(metadata, run_id, f"Loading {', '.join(packages)}")
            )

        try:
            exit_code, stdout, stderr = await execute_python(artifact.content, timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning("Code run %s timed out after %ss", run_id, timeout)
            return await publish(fail_run(metadata, run_id, f"Execution timed out after {timeout} seconds"))
        except OSError as e:
            logger.error("Code run %s could not start: %s", run_id, e)
            return await publish(fail_run(metadata, run_id, str(e)))
        except Exception as e:
            logger.exception("Code run %s failed", run_id)
            return await publish(fail_run(metadata, run_id, f"{type(e).__name__}: {e}"))

        if exit_code != 0:
            return await publish(fail_run(metadata, run_id, stderr.strip() or f"Exit code: {exit_code}"))
        return await publish(complete_run(metadata, run_id, output_contents(stdout)))


code_artifact = register_artifact(CodeArtifact())
