"""
Tests for tool result dispatch.
"""

import pytest

from core.dispatcher import (
    ERROR_RENDERER,
    GENERIC_RENDERER,
    PROGRESS_RENDERERS,
    RESULT_RENDERERS,
    SPINNER_RENDERER,
    ToolName,
    dispatch,
    lookup_tool,
    tool_label,
    tool_summary,
)
from core.models import ToolState


class TestRegistry:
    """Test that the renderer tables cover the tool set."""

    def test_every_tool_has_result_renderer(self):
        assert set(RESULT_RENDERERS) == set(ToolName)

    def test_progress_renderers_are_known_tools(self):
        assert set(PROGRESS_RENDERERS) <= set(ToolName)

    def test_lookup_unknown_tool(self):
        assert lookup_tool("getWeather") is ToolName.GET_WEATHER
        assert lookup_tool("makeCoffee") is None


class TestResultRendering:
    """Test output-available dispatch."""

    def test_weather(self):
        descriptor = dispatch(
            "getWeather", ToolState.OUTPUT_AVAILABLE, output={"temp": 12}, tool_call_id="c1"
        )
        assert descriptor.renderer == "weather"
        assert descriptor.props == {"weatherAtLocation": {"temp": 12}}
        assert descriptor.toolCallId == "c1"

    def test_document_kinds(self):
        descriptor = dispatch("updateDocument", ToolState.OUTPUT_AVAILABLE, output={"id": "d"})
        assert descriptor.renderer == "document-result"
        assert descriptor.props["type"] == "update"

    def test_unknown_tool_uses_generic_renderer(self):
        descriptor = dispatch("makeCoffee", "output-available", output={"cups": 2})
        assert descriptor.renderer == GENERIC_RENDERER
        assert descriptor.props == {"entries": [["cups", 2]]}

    def test_generic_renderer_with_scalar(self):
        descriptor = dispatch("makeCoffee", ToolState.OUTPUT_AVAILABLE, output="done")
        assert descriptor.props == {"value": "done"}

    def test_memory_results_are_normalised(self):
        output = {"memories": [{"text": "likes tea", "_id": "m1", "created_at": "2024-01-01"}]}
        descriptor = dispatch("searchMemories", ToolState.OUTPUT_AVAILABLE, output=output)

        assert descriptor.renderer == "memory-results"
        assert descriptor.props["count"] == 1
        memory = descriptor.props["memories"][0]
        assert memory["content"] == "likes tea"
        assert memory["id"] == "m1"
        assert memory["createdAt"] == "2024-01-01"

    def test_add_memory_falls_back_to_type(self):
        descriptor = dispatch(
            "addMemory",
            ToolState.OUTPUT_AVAILABLE,
            input={"content": "c", "type": "preference"},
            output={"success": True, "memoryId": "m1"},
        )
        assert descriptor.props["category"] == "preference"
        assert descriptor.props["success"] is True

    def test_merge_images_layout_comes_from_input(self):
        images = [["a.png", "b.png"], ["c.png", "d.png"]]
        descriptor = dispatch(
            "mergeImages",
            ToolState.OUTPUT_AVAILABLE,
            input={"images": images},
            output={"mergedImageUrl": "merged.png", "gridLayout": [["a.png"]]},
        )
        assert descriptor.props["gridLayout"] == images
        assert descriptor.props["processedImages"] == 2
        assert descriptor.props["dimensions"] == {"width": 1024, "height": 1024}
        assert descriptor.props["format"] == "png"

    def test_github_sections(self):
        descriptor = dispatch(
            "searchFiles",
            ToolState.OUTPUT_AVAILABLE,
            output={"success": True, "searchResults": [{"path": "a.py"}], "searchQuery": "def"},
        )
        assert descriptor.renderer == "github-result"
        assert descriptor.props["sections"] == [
            {"section": "search-results", "data": [{"path": "a.py"}]}
        ]

    def test_github_failure(self):
        descriptor = dispatch("listRepositories", ToolState.OUTPUT_AVAILABLE, output={"error": "403"})
        assert descriptor.props == {"success": False, "error": "403", "sections": []}

    def test_dispatch_does_not_mutate_arguments(self):
        input = {"images": ["a"]}
        output = {"mergedImageUrl": "m"}
        dispatch("mergeImages", ToolState.OUTPUT_AVAILABLE, input=input, output=output)
        assert input == {"images": ["a"]}
        assert output == {"mergedImageUrl": "m"}


class TestErrorRendering:
    """Test output-error dispatch."""

    def test_error_text(self):
        descriptor = dispatch("createImage", ToolState.OUTPUT_ERROR, error_text="bad prompt")
        assert descriptor.renderer == ERROR_RENDERER
        assert descriptor.props == {"error": "bad prompt", "variant": "error"}

    def test_overloaded_is_busy(self):
        descriptor = dispatch("createImage", ToolState.OUTPUT_ERROR, error_text="Model Overloaded")
        assert descriptor.props["variant"] == "busy"

    def test_error_from_output(self):
        descriptor = dispatch("createImage", ToolState.OUTPUT_ERROR, output={"error": "quota"})
        assert descriptor.props["error"] == "quota"


class TestProgressRendering:
    """Test in-progress dispatch."""

    def test_progress_label_truncates(self):
        descriptor = dispatch(
            "generateImage", ToolState.INPUT_AVAILABLE, input={"prompt": "x" * 80}
        )
        assert descriptor.renderer == "progress"
        assert descriptor.props["label"] == "Creating: " + "x" * 50 + "..."

    def test_weather_skeleton(self):
        assert dispatch("getWeather", ToolState.INPUT_STREAMING).renderer == "weather-skeleton"

    def test_portraits_plural(self):
        descriptor = dispatch(
            "createCharacterPortraits", ToolState.INPUT_AVAILABLE, input={"characters": ["a"]}
        )
        assert descriptor.props["label"] == "Generating portraits for 1 character"

    def test_book_artifact_step_label(self):
        descriptor = dispatch(
            "createBookArtifact",
            ToolState.INPUT_AVAILABLE,
            input={"action": "approve_step", "stepNumber": 3},
        )
        assert descriptor.props["label"] == "Processing Step 3 Approval"

    def test_spinner_fallback(self):
        descriptor = dispatch("getFileContent", ToolState.INPUT_AVAILABLE, input={"path": "a.py"})
        assert descriptor.renderer == SPINNER_RENDERER
        assert descriptor.props["label"] == "Reading file: a.py"

    def test_unknown_tool_spinner(self):
        descriptor = dispatch("makeCoffee", ToolState.INPUT_STREAMING)
        assert descriptor.props["label"] == "Running makeCoffee..."


class TestLabelsAndSummaries:
    """Test one-line status strings."""

    def test_task_plan_label(self):
        label = tool_label("taskTracker", {"action": "create_plan", "tasks": [1, 2]})
        assert label == "Creating task plan (2 tasks)"

    def test_summary_failure(self):
        assert tool_summary("listRepositories", {"success": False, "error": "nope"}) == "Error: nope"

    def test_summary_staging_state(self):
        output = {"success": True, "stagedFiles": ["a", "b"]}
        assert tool_summary("getStagingState", output) == "2 files staged"

    def test_summary_all_tasks_done(self):
        assert tool_summary("taskTracker", {"success": True, "allCompleted": True}) == "All tasks completed!"

    @pytest.mark.parametrize("output", [None, "text", []])
    def test_summary_non_dict_output(self, output):
        assert tool_summary("searchFiles", output) == "Error: None"
