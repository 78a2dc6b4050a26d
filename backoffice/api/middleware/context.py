"""Request context middleware for FastAPI.

Attaches the values the department access audit needs to every request:
- Request ID for tracing
- Client IP address (proxy aware)
- User agent

and logs the outcome of each request at a level chosen from its status.
"""

import logging
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware


logger = logging.getLogger(__name__)


# Paths that should not be logged (health checks, static files)
EXCLUDED_PATHS = {
    "/health",
    "/docs",
    "/redoc",
    "/openapi.json",
    "/favicon.ico",
}


def get_client_ip(request: Request) -> str:
    """Extract client IP from request, handling proxies."""
    # Check X-Forwarded-For header (set by reverse proxies)
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        # Take the first IP (original client)
        return forwarded.split(",")[0].strip()

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip

    if request.client:
        return request.client.host

    return "unknown"


def determine_log_level(status_code: int) -> int:
    """Pick a log level based on response status."""
    if status_code >= 500:
        return logging.ERROR
    elif status_code in (401, 403):
        return logging.WARNING  # Auth failures are security-relevant
    elif status_code >= 400:
        return logging.INFO
    return logging.DEBUG


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Stores request_id, client_ip and user_agent on request.state and logs
    method, path, status and duration once the response is ready.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request.state.request_id = str(uuid.uuid4())[:8]
        request.state.client_ip = get_client_ip(request)
        request.state.user_agent = request.headers.get("user-agent", "")

        if request.url.path in EXCLUDED_PATHS:
            return await call_next(request)

        start_time = time.time()
        response = await call_next(request)
        duration_ms = int((time.time() - start_time) * 1000)

        logger.log(
            determine_log_level(response.status_code),
            f"[{request.state.request_id}] {request.method} {request.url.path} "
            f"-> {response.status_code} ({duration_ms}ms) from {request.state.client_ip}",
        )
        response.headers["X-Request-ID"] = request.state.request_id
        return response
