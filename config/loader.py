"""Reading config files from disk."""

import json
import logging
import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .defaults import CONFIG_DIR_NAME, GLOBAL_CONFIG_FILENAME, PROJECT_CONFIG_FILENAMES
from .main_config import Config

logger = logging.getLogger(__name__)

API_BASE_URL_ENV = "CHAT_API_BASE_URL"

# A string literal (kept), or a // or /* */ comment (dropped)
_JSONC_TOKEN = re.compile(r'("(?:\\.|[^"\\])*")|//[^\n]*|/\*.*?\*/', re.DOTALL)


def strip_jsonc_comments(content: str) -> str:
    """Remove // and /* */ comments, leaving string literals such as "http://host" intact."""
    return _JSONC_TOKEN.sub(lambda m: m.group(1) or "", content)


def load_config_file(path: Path) -> dict[str, Any] | None:
    """
    Parse one .json or .jsonc file.

    Returns:
        The top-level object, or None when the file is missing, unreadable
        or not an object
    """
    if not path.exists():
        return None

    try:
        text = path.read_text()
        if path.suffix == ".jsonc":
            text = strip_jsonc_comments(text)
        data = json.loads(text)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Failed to load config from %s: %s", path, e)
        return None
    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: top level must be an object", path)
        return None
    return data


def merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively overlay `override` on `base`; nested objects merge, anything else replaces."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = merge_configs(current, value)
        else:
            merged[key] = value
    return merged


def global_config_path() -> Path:
    return Path.home() / CONFIG_DIR_NAME / GLOBAL_CONFIG_FILENAME


def load_config(project_root: Path | None = None) -> Config:
    """
    Build the effective configuration.

    The first of chat-artifacts.jsonc / chat-artifacts.json found in
    `project_root` is merged over ~/.chat-artifacts/config.jsonc, and
    CHAT_API_BASE_URL overrides both.

    Raises:
        ValueError: If the merged config does not validate
    """
    root = project_root or Path.cwd()
    data = load_config_file(global_config_path()) or {}

    for filename in PROJECT_CONFIG_FILENAMES:
        project_data = load_config_file(root / filename)
        if project_data is not None:
            data = merge_configs(data, project_data)
            logger.debug("Loaded project config from %s", root / filename)
            break

    base_url = os.environ.get(API_BASE_URL_ENV)
    if base_url:
        data["api_base_url"] = base_url

    try:
        return Config.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e


@lru_cache(maxsize=1)
def get_config(project_root: Path | None = None) -> Config:
    """Cached load_config(); call get_config.cache_clear() to reload."""
    return load_config(project_root)
