"""Request logging."""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

SLOW_REQUEST_MS = 1000

# Polled or long-lived endpoints, logged at DEBUG when they succeed
QUIET_PATHS = frozenset({"/health", "/global/event"})


def response_log_level(path: str, status: int, elapsed_ms: float) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    if path in QUIET_PATHS:
        return logging.DEBUG
    if elapsed_ms > SLOW_REQUEST_MS:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One log line per request with status and duration; slow requests are flagged."""

    async def dispatch(self, request: Request, call_next) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        path = request.url.path
        level = response_log_level(path, response.status_code, elapsed_ms)
        slow = " SLOW" if elapsed_ms > SLOW_REQUEST_MS and path not in QUIET_PATHS else ""
        logger.log(
            level,
            "%s %s -> %d (%.1fms)%s",
            request.method,
            path,
            response.status_code,
            elapsed_ms,
            slow,
        )
        return response
