"""
Configuration module for the chat-artifacts project.

Exports the main configuration classes and functions for use throughout the application.
"""

from .features import FEATURE_FLAGS, FeatureFlag, FeatureManager, FeatureStage
from .loader import get_config, load_config, load_config_file, merge_configs, strip_jsonc_comments
from .main_config import Config, PaginatorConfig
from .preferences import (
    MEMORY_ENABLED_KEY,
    WEB_SEARCH_ENABLED_KEY,
    PreferenceStore,
    default_preferences_path,
    memory_cache_key,
)

__all__ = [
    # Config models
    "Config",
    "PaginatorConfig",
    # Loader functions
    "load_config",
    "get_config",
    "load_config_file",
    "merge_configs",
    "strip_jsonc_comments",
    # Feature flags
    "FEATURE_FLAGS",
    "FeatureFlag",
    "FeatureManager",
    "FeatureStage",
    # Preferences
    "PreferenceStore",
    "default_preferences_path",
    "memory_cache_key",
    "MEMORY_ENABLED_KEY",
    "WEB_SEARCH_ENABLED_KEY",
]
