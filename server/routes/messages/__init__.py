"""
Message route registration.
"""

from fastapi import FastAPI

from . import get, replace, send, stream, tools


def register_routes(app: FastAPI) -> None:
    """Register all message routes."""
    app.include_router(get.router)
    app.include_router(send.router)
    app.include_router(stream.router)
    app.include_router(replace.router)
    app.include_router(tools.router)
