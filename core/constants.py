"""
Core constants for the chat pipeline.

This module defines system-wide constants used across the codebase.
Following the style guide: no magic constants in code.
"""

# Artifact panel is revealed once while streamed content is inside this window
VISIBILITY_WINDOW_MIN = 400  # exclusive
VISIBILITY_WINDOW_MAX = 450  # exclusive

# Book pagination
DEFAULT_LINES_PER_PAGE = 25
DEFAULT_CHARS_PER_LINE = 80

# Code artifact
PREVIEWABLE_LANGUAGES = frozenset({"html", "svg", "javascript", "jsx"})
IMAGE_OUTPUT_PREFIX = "data:image/png;base64"
DEFAULT_CODE_TIMEOUT = 30  # seconds

# mergeImages falls back to these when the tool output omits them
DEFAULT_MERGED_IMAGE_DIMENSIONS = {"width": 1024, "height": 1024}
DEFAULT_MERGED_IMAGE_FORMAT = "png"

# Progress labels truncate long prompts/queries to this many characters
LABEL_PREVIEW_CHARS = 50

# Edits are saved once they have been quiet for this long
DEFAULT_AUTOSAVE_DELAY = 1.0  # seconds
