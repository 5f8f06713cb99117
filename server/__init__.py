"""
Chat-artifacts API server.

HTTP bindings around the core chat pipeline: sessions, stream frames,
artifacts, pagination and tool rendering.
"""

from .app import app
from .routes import register_routes
from .state import configure, create_session, get_session

# Register all routes with the app
register_routes(app)

__all__ = ["app", "configure", "create_session", "get_session"]
