"""
FastAPI application setup and configuration.
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.defaults import DEFAULT_CORS_ORIGINS
from server.middleware import RequestLoggingMiddleware

from . import state


# =============================================================================
# Constants
# =============================================================================

API_TITLE = "Chat Artifacts API"
API_VERSION = "0.1.0"


# =============================================================================
# FastAPI App
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await state.shutdown()


app = FastAPI(title=API_TITLE, version=API_VERSION, lifespan=lifespan)


# =============================================================================
# CORS Configuration
# =============================================================================

# Comma-separated list, e.g. CORS_ORIGINS="https://example.com,https://app.example.com"
cors_origins_env = os.environ.get("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
cors_origins = [origin.strip() for origin in cors_origins_env.split(",") if origin.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Request logging middleware (added after CORS so it runs first)
app.add_middleware(RequestLoggingMiddleware)
