"""
Server-side state management.

Holds the session registry and the process-wide services the routes share:
configuration, feature flags, client preferences and the API client.
"""

import logging

from client.api_client import ApiClient
from config import Config, FeatureManager, PreferenceStore
from core import ChatSession, NotFoundError

from .event_bus import get_event_bus

logger = logging.getLogger(__name__)


# =============================================================================
# Services
# =============================================================================

_config: Config = Config()
_preferences: PreferenceStore = PreferenceStore()
_feature_manager: FeatureManager = FeatureManager(_preferences)
_api_client: ApiClient | None = None


def configure(
    config: Config,
    preferences: PreferenceStore | None = None,
    api_client: ApiClient | None = None,
) -> None:
    """Install the services the routes use. Called once at start-up and by tests."""
    global _config, _preferences, _feature_manager, _api_client
    _config = config
    _preferences = preferences or PreferenceStore()
    _feature_manager = FeatureManager(_preferences)
    _feature_manager.load_from_config(config.model_dump())
    _api_client = api_client


def get_config() -> Config:
    return _config


def get_preferences() -> PreferenceStore:
    return _preferences


def get_feature_manager() -> FeatureManager:
    return _feature_manager


def get_api_client() -> ApiClient:
    """Get the API client, creating it from the config on first use."""
    global _api_client
    if _api_client is None:
        _api_client = ApiClient(
            base_url=_config.api_base_url, timeout=_config.request_timeout
        )
    return _api_client


# =============================================================================
# Sessions
# =============================================================================

sessions: dict[str, ChatSession] = {}


def create_session(title: str | None = None) -> ChatSession:
    session = ChatSession(
        event_bus=get_event_bus(),
        preferences=_preferences,
        api=get_api_client(),
        autosave_delay=_config.autosave_delay,
    )
    if title:
        session.title = title
    sessions[session.id] = session
    logger.info("Created session %s", session.id)
    return session


def get_session(session_id: str) -> ChatSession:
    """
    Look up a session.

    Raises:
        NotFoundError: If no session has that id
    """
    session = sessions.get(session_id)
    if session is None:
        raise NotFoundError("Session", session_id)
    return session


async def delete_session(session_id: str) -> None:
    session = get_session(session_id)
    await session.close()
    del sessions[session_id]
    logger.info("Deleted session %s", session_id)


async def shutdown() -> None:
    """Close every session and the API client."""
    global _api_client
    for session in list(sessions.values()):
        await session.close()
    sessions.clear()
    if _api_client is not None:
        await _api_client.aclose()
        _api_client = None
