"""
Request/response logging middleware for tracking API interactions.
"""
import logging
import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from checkin.core.logging_config import request_id_context

logger = logging.getLogger(__name__)


def _identify_caller(request: Request) -> str:
    """Short, non-secret description of who is calling."""
    if request.headers.get("X-Admin-Token"):
        return "admin"
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        # Only a prefix; the full token must never reach the logs
        return f"token:{auth_header[7:17]}..."
    return "anonymous"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Log one line per request and one per response.

    Assigns a request ID (or reuses the caller's X-Request-ID), exposes it
    through request_id_context for every log emitted while serving the
    request, and echoes it back in the response headers. Bodies are never
    logged: check-in answers are health data.
    """

    # Probes would drown out real traffic
    QUIET_PATH_SUFFIXES = ("/health", "/ping")

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        token = request_id_context.set(request_id)

        method = request.method
        path = str(request.url.path)
        client_host = request.client.host if request.client else "unknown"
        user_identifier = _identify_caller(request)
        quiet = path.endswith(self.QUIET_PATH_SUFFIXES)

        start_time = time.time()
        try:
            if not quiet:
                logger.info(
                    "Incoming request",
                    extra={
                        "method": method,
                        "path": path,
                        "client_host": client_host,
                        "user_identifier": user_identifier,
                    },
                )

            response = await call_next(request)

            duration_ms = round((time.time() - start_time) * 1000, 2)
            status_code = response.status_code
            response.headers["X-Request-ID"] = request_id

            extra_fields = {
                "method": method,
                "path": path,
                "status_code": status_code,
                "duration_ms": duration_ms,
                "client_host": client_host,
                "user_identifier": user_identifier,
            }
            if status_code >= 500:
                logger.error("Server error response", extra=extra_fields)
            elif status_code >= 400:
                logger.warning("Client error response", extra=extra_fields)
            elif not quiet:
                logger.info("Request completed", extra=extra_fields)

            return response
        finally:
            request_id_context.reset(token)
