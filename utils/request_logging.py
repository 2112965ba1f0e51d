"""
Request logging middleware.
Logs every request with its status and latency, and periodically evicts expired cache entries.
"""

import logging
import time
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from utils.caching import get_global_cache

logger = logging.getLogger("sukha_yatra.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for access logging and cache housekeeping.
    """

    def __init__(self, app, cleanup_interval: int = 300):
        super().__init__(app)
        self.cleanup_interval = cleanup_interval
        self.last_cleanup = time.time()

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        current_time = time.time()
        if current_time - self.last_cleanup > self.cleanup_interval:
            removed_count = get_global_cache().cleanup_expired()
            if removed_count > 0:
                logger.debug(f"Cache cleanup: removed {removed_count} expired entries")
            self.last_cleanup = current_time

        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time

        response.headers["X-Process-Time"] = str(round(process_time, 3))
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"({process_time * 1000:.1f} ms)"
        )
        return response


def add_request_logging(app, cleanup_interval: int = 300):
    """
    Add request logging middleware to FastAPI application.

    Args:
        app: FastAPI application instance
        cleanup_interval: Cache cleanup interval in seconds (default: 5 minutes)
    """
    app.add_middleware(RequestLoggingMiddleware, cleanup_interval=cleanup_interval)
