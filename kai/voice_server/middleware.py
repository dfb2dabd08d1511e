"""
HTTP middleware for the voice server.

- RequestLoggingMiddleware: method, path, status code and latency per request
- AllowedOriginMiddleware: fixed Access-Control-Allow-Origin on every response
"""

import logging
import time
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

logger = logging.getLogger("kai.voice_server.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log request method, path, status code, and response time."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start = time.perf_counter()
        response: Optional[Response] = None
        try:
            response = await call_next(request)
            return response
        finally:
            elapsed_ms = round((time.perf_counter() - start) * 1000, 2)
            status_code = response.status_code if response else 500
            logger.info(
                "%s %s -> %d (%.2fms)",
                request.method,
                request.url.path,
                status_code,
                elapsed_ms,
            )


class AllowedOriginMiddleware(BaseHTTPMiddleware):
    """Only the local origin may call the server from a browser."""

    def __init__(self, app: ASGIApp, allowed_origin: str = "http://localhost"):
        super().__init__(app)
        self.allowed_origin = allowed_origin

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)
        response.headers["Access-Control-Allow-Origin"] = self.allowed_origin
        response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        return response
