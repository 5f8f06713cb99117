"""Logging setup for the chat-artifacts server."""

import logging
import os
import sys
import time
from contextlib import contextmanager
from typing import Generator, Optional

LOG_LEVEL_ENV = "LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
# DEBUG adds the call site
DEBUG_LOG_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s"
)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are too chatty at INFO
NOISY_LOGGERS = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "sse_starlette": logging.WARNING,
    "uvicorn.access": logging.WARNING,
    "uvicorn.error": logging.INFO,
}


def resolve_level(level: Optional[str] = None) -> int:
    """Numeric level from an explicit name, else LOG_LEVEL, else INFO."""
    name = (level or os.environ.get(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: Optional[str] = None) -> None:
    """Install the root handler. Call once, before the app starts serving."""
    log_level = resolve_level(level)
    logging.basicConfig(
        level=log_level,
        format=DEBUG_LOG_FORMAT if log_level <= logging.DEBUG else LOG_FORMAT,
        datefmt=DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )
    for name, quiet_level in NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)


@contextmanager
def log_timing(
    logger: logging.Logger, operation: str, level: int = logging.DEBUG
) -> Generator[None, None, None]:
    """Log how long the enclosed block took.

    Example:
        with log_timing(logger, "Paginating chapter"):
            pages = paginate(content)
    """
    started = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.log(level, "%s took %.1fms", operation, elapsed_ms)
