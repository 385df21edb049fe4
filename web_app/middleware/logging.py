"""Logging middleware."""

import time
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from typing import Callable
from urllib.parse import unquote

from shortlink.common.logging_config import get_logger, mask_key


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request/response logging."""

    def __init__(self, app, logger: logging.Logger = None):
        super().__init__(app)
        self.logger = logger or get_logger("shortlink.web")

    async def dispatch(self, request: Request, call_next: Callable):
        """Log request, outcome and duration on one line."""
        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        location = response.headers.get("location")
        redirect = f" -> {location}" if location else ""

        self.logger.info(
            f"{request.method} {mask_key(unquote(request.url.path))} from {client_ip} - "
            f"Status: {response.status_code}{redirect} - Duration: {duration_ms:.2f}ms"
        )

        return response
