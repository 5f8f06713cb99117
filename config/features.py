"""
Feature flags for optional chat capabilities.

Some flags double as user toggles (memory, web search): their state lives in
the preference store so the choice survives restarts.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .preferences import MEMORY_ENABLED_KEY, WEB_SEARCH_ENABLED_KEY, PreferenceStore


class FeatureStage(Enum):
    EXPERIMENTAL = "experimental"
    BETA = "beta"
    STABLE = "stable"


@dataclass(frozen=True)
class FeatureFlag:
    name: str
    description: str
    stage: FeatureStage
    default: bool
    # Preference holding the user's own toggle, for user-facing flags
    preference_key: Optional[str] = None


_FLAGS = (
    FeatureFlag(
        "memory",
        "Search and save long-term memories during chat",
        FeatureStage.STABLE,
        default=True,
        preference_key=MEMORY_ENABLED_KEY,
    ),
    FeatureFlag(
        "code_execution",
        "Run Python code artifacts in a subprocess",
        FeatureStage.STABLE,
        default=True,
    ),
    FeatureFlag(
        "web_search",
        "Let the model search the web while answering",
        FeatureStage.BETA,
        default=False,
        preference_key=WEB_SEARCH_ENABLED_KEY,
    ),
    FeatureFlag(
        "two_column_view",
        "Show book chapters as two-page spreads",
        FeatureStage.BETA,
        default=True,
    ),
)

FEATURE_FLAGS: dict[str, FeatureFlag] = {flag.name: flag for flag in _FLAGS}


class FeatureManager:
    """
    Resolves whether a flag is on.

    Precedence, highest first: runtime overrides (enable/disable), the
    user's saved toggles, config file overrides, the flag default. Toggles
    made through enable/disable are written back to the preference store
    for flags that have a preference key.
    """

    def __init__(self, preferences: PreferenceStore | None = None) -> None:
        self._overrides: dict[str, bool] = {}
        self._config_overrides: dict[str, bool] = {}
        self._preferences = preferences

    def load_from_config(self, config: dict) -> None:
        """Take overrides from the config's `features` section. Unknown names are ignored."""
        for name, value in (config.get("features") or {}).items():
            if name in FEATURE_FLAGS:
                self._config_overrides[name] = bool(value)

    def _set(self, name: str, value: bool) -> None:
        flag = FEATURE_FLAGS.get(name)
        if flag is None:
            raise KeyError(name)
        self._overrides[name] = value
        if self._preferences is not None and flag.preference_key:
            self._preferences.set_bool(flag.preference_key, value)

    def enable(self, name: str) -> None:
        """
        Raises:
            KeyError: If no flag has that name
        """
        self._set(name, True)

    def disable(self, name: str) -> None:
        """
        Raises:
            KeyError: If no flag has that name
        """
        self._set(name, False)

    def _saved_toggle(self, flag: FeatureFlag) -> bool | None:
        if self._preferences is None or not flag.preference_key:
            return None
        if self._preferences.get(flag.preference_key) is None:
            return None
        return self._preferences.get_bool(flag.preference_key)

    def is_enabled(self, name: str) -> bool:
        """Unknown flags are off."""
        flag = FEATURE_FLAGS.get(name)
        if flag is None:
            return False
        if name in self._overrides:
            return self._overrides[name]

        saved = self._saved_toggle(flag)
        if saved is not None:
            return saved
        return self._config_overrides.get(name, flag.default)

    def is_overridden(self, name: str) -> bool:
        flag = FEATURE_FLAGS.get(name)
        if flag is None:
            return False
        return (
            name in self._overrides
            or name in self._config_overrides
            or self._saved_toggle(flag) is not None
        )

    def list_features(self) -> list[dict]:
        return [
            {
                "name": flag.name,
                "description": flag.description,
                "stage": flag.stage.value,
                "default": flag.default,
                "enabled": self.is_enabled(flag.name),
                "overridden": self.is_overridden(flag.name),
            }
            for flag in FEATURE_FLAGS.values()
        ]
