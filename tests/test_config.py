"""
Tests for configuration loading, preferences and feature flags.
"""

import json

import pytest

from config import (
    FEATURE_FLAGS,
    Config,
    FeatureManager,
    FeatureStage,
    PreferenceStore,
    load_config,
    load_config_file,
    merge_configs,
    strip_jsonc_comments,
)
from config import loader


@pytest.fixture
def no_global_config(temp_dir, monkeypatch):
    """Point the global config at an empty directory."""
    monkeypatch.setattr(loader, "global_config_path", lambda: temp_dir / "global" / "config.jsonc")
    monkeypatch.delenv(loader.API_BASE_URL_ENV, raising=False)


class TestJsonc:
    """Test comment stripping."""

    def test_strips_comments(self):
        content = '{\n  // line\n  "a": 1, /* block */ "b": 2\n}'
        assert json.loads(strip_jsonc_comments(content)) == {"a": 1, "b": 2}

    def test_keeps_urls_in_strings(self):
        content = '{"api_base_url": "http://localhost:3000"} // trailing'
        assert json.loads(strip_jsonc_comments(content)) == {"api_base_url": "http://localhost:3000"}


class TestLoadConfig:
    """Test loading and merging config files."""

    def test_defaults(self, temp_dir, no_global_config):
        config = load_config(temp_dir)
        assert config == Config()
        assert config.paginator.lines_per_page == 25

    def test_project_overrides_global(self, temp_dir, no_global_config):
        global_path = temp_dir / "global" / "config.jsonc"
        global_path.parent.mkdir()
        global_path.write_text('{"request_timeout": 5, "paginator": {"lines_per_page": 30}}')
        (temp_dir / "chat-artifacts.jsonc").write_text(
            '// project\n{"paginator": {"chars_per_line": 60}}'
        )

        config = load_config(temp_dir)
        assert config.request_timeout == 5
        assert config.paginator.lines_per_page == 30
        assert config.paginator.chars_per_line == 60

    def test_env_overrides_files(self, temp_dir, no_global_config, monkeypatch):
        (temp_dir / "chat-artifacts.json").write_text('{"api_base_url": "http://file"}')
        monkeypatch.setenv(loader.API_BASE_URL_ENV, "http://env")
        assert load_config(temp_dir).api_base_url == "http://env"

    def test_invalid_config(self, temp_dir, no_global_config):
        (temp_dir / "chat-artifacts.json").write_text('{"request_timeout": -1}')
        with pytest.raises(ValueError):
            load_config(temp_dir)

    def test_unreadable_file(self, temp_dir):
        path = temp_dir / "broken.json"
        path.write_text("{nope")
        assert load_config_file(path) is None

    def test_non_object_file(self, temp_dir):
        path = temp_dir / "list.json"
        path.write_text("[1, 2]")
        assert load_config_file(path) is None

    def test_merge_is_deep(self):
        merged = merge_configs({"a": {"b": 1, "c": 2}}, {"a": {"c": 3}})
        assert merged == {"a": {"b": 1, "c": 3}}


class TestPreferenceStore:
    """Test the persisted key/value store."""

    def test_persists_to_disk(self, temp_dir):
        path = temp_dir / "prefs" / "preferences.json"
        store = PreferenceStore(path)
        store.set_bool("memory-enabled", False)
        store.set_json("memory-msg_1", [{"content": "tea"}])

        reloaded = PreferenceStore(path)
        assert reloaded.get("memory-enabled") == "false"
        assert reloaded.get_bool("memory-enabled", default=True) is False
        assert reloaded.get_json("memory-msg_1") == [{"content": "tea"}]

    def test_corrupt_file_starts_empty(self, temp_dir):
        path = temp_dir / "preferences.json"
        path.write_text("not json")
        assert PreferenceStore(path).keys() == []

    def test_unreadable_json_value(self):
        store = PreferenceStore()
        store.set("memory-msg_1", "{broken")
        assert store.get_json("memory-msg_1") is None

    def test_remove(self):
        store = PreferenceStore()
        store.set("a", "1")
        store.remove("a")
        store.remove("missing")
        assert store.get("a") is None


class TestFeatureFlags:
    """Test feature flag evaluation."""

    def test_registry(self):
        assert FEATURE_FLAGS["memory"].stage == FeatureStage.STABLE
        assert FEATURE_FLAGS["web_search"].default is False

    def test_defaults(self):
        manager = FeatureManager()
        assert manager.is_enabled("memory") is True
        assert manager.is_enabled("web_search") is False
        assert manager.is_enabled("nonexistent") is False

    def test_config_override(self):
        manager = FeatureManager()
        manager.load_from_config({"features": {"code_execution": False, "nonexistent": True}})
        assert manager.is_enabled("code_execution") is False
        assert manager.is_overridden("code_execution") is True
        assert manager.is_overridden("nonexistent") is False

    def test_toggle_is_saved(self):
        preferences = PreferenceStore()
        FeatureManager(preferences).enable("web_search")
        assert preferences.get("web-search-enabled") == "true"
        assert FeatureManager(preferences).is_enabled("web_search") is True

    def test_saved_toggle_beats_config(self):
        preferences = PreferenceStore()
        preferences.set_bool("memory-enabled", False)
        manager = FeatureManager(preferences)
        manager.load_from_config({"features": {"memory": True}})
        assert manager.is_enabled("memory") is False

    def test_unknown_feature(self):
        with pytest.raises(KeyError):
            FeatureManager().enable("nonexistent")

    def test_list_features(self):
        names = [f["name"] for f in FeatureManager().list_features()]
        assert names == list(FEATURE_FLAGS)
