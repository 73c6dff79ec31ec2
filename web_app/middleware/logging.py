"""Request logging middleware."""

import logging
import time
from typing import Callable, Optional, Tuple

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from linkstash.common.logging_config import get_logger

# Asset requests from the dashboard pages; only logged at DEBUG
QUIET_PATH_PREFIXES: Tuple[str, ...] = ("/css/", "/js/", "/favicon.ico")


def level_for_status(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per request with status and duration.

    Server errors log at ERROR and client errors at WARNING, so a failing
    store or a burst of unknown short links stands out from normal traffic.
    """

    def __init__(self, app, logger: Optional[logging.Logger] = None):
        super().__init__(app)
        self.logger = logger or get_logger("web")

    async def dispatch(self, request: Request, call_next: Callable):
        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        path = request.url.path
        if path.startswith(QUIET_PATH_PREFIXES):
            level = logging.DEBUG
        else:
            level = level_for_status(response.status_code)

        client_ip = request.client.host if request.client else "unknown"
        self.logger.log(
            level,
            f"{request.method} {path} -> {response.status_code} "
            f"({duration_ms:.2f}ms, client {client_ip})",
        )
        return response
