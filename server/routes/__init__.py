"""
Route registration for the chat-artifacts API.
"""

from fastapi import FastAPI

from . import artifact, events, features, health, messages, paginate, sessions, tools


def register_routes(app: FastAPI) -> None:
    """Register all routes with the FastAPI application."""
    app.include_router(health.router)
    app.include_router(events.router)
    app.include_router(features.router)
    app.include_router(paginate.router)
    app.include_router(artifact.router)
    sessions.register_routes(app)
    messages.register_routes(app)
    tools.register_routes(app)
