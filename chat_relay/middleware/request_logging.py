"""
Request logging middleware.
Logs HTTP requests and responses for monitoring and debugging.
"""
import json
import logging
import time
from typing import Any, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

SENSITIVE_FIELDS = {"password", "token", "secret", "api_key", "apikey"}
# Conversation text is summarized, never logged verbatim
CONTENT_FIELDS = {"content"}


def summarize_body(data: Any) -> Any:
    """
    Make a decoded JSON body safe to log.

    Credentials are redacted and message text is replaced by its length,
    at any nesting depth, so a chat payload logs its shape (roles, turn
    count) without the conversation itself.
    """
    if isinstance(data, dict):
        summary = {}
        for key, value in data.items():
            if key.lower() in SENSITIVE_FIELDS:
                summary[key] = "***REDACTED***"
            elif key.lower() in CONTENT_FIELDS and isinstance(value, str):
                summary[key] = f"<{len(value)} chars>"
            else:
                summary[key] = summarize_body(value)
        return summary
    if isinstance(data, list):
        return [summarize_body(item) for item in data]
    return data


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging HTTP requests and responses."""

    def __init__(self, app, ignore_paths: tuple = (), enabled: bool = True):
        super().__init__(app)
        self.enabled = enabled
        self.ignore_paths = ignore_paths or (
            "/api/health",
            "/docs",
            "/openapi.json",
            "/redoc",
            "/favicon.ico",
        )

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Skip logging when disabled or for ignored paths
        if not self.enabled or request.url.path in self.ignore_paths:
            return await call_next(request)

        start_time = time.time()

        # Log request
        request_log = {
            "type": "request",
            "method": request.method,
            "path": request.url.path,
            "query_params": dict(request.query_params),
            "client_ip": self._get_client_ip(request),
            "user_agent": request.headers.get("user-agent"),
            "timestamp": start_time,
        }

        # Log request body for non-GET requests (for debugging)
        if request.method in ("POST", "PUT", "PATCH", "DELETE"):
            body = await self._get_request_body(request)
            if body:
                request_log["body"] = body

        logger.info(json.dumps(request_log))

        # Process request
        response = await call_next(request)

        # For SSE responses this is time-to-headers, not stream duration
        process_time = time.time() - start_time

        # Log response
        response_log = {
            "type": "response",
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "process_time_ms": round(process_time * 1000, 2),
            "client_ip": self._get_client_ip(request),
            "timestamp": time.time(),
        }

        # Add response size if available
        if hasattr(response, "body"):
            response_log["response_size_bytes"] = len(response.body)

        # Log level based on status code
        if response.status_code >= 500:
            logger.error(json.dumps(response_log))
        elif response.status_code >= 400:
            logger.warning(json.dumps(response_log))
        else:
            logger.info(json.dumps(response_log))

        # Add processing time header
        response.headers["X-Process-Time"] = str(process_time)

        return response

    def _get_client_ip(self, request: Request) -> str:
        """Extract client IP address from request."""
        # Check for forwarded headers (App Service sits behind a proxy)
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()

        real_ip = request.headers.get("x-real-ip")
        if real_ip:
            return real_ip

        # Fallback to direct client
        if request.client:
            return request.client.host

        return "unknown"

    async def _get_request_body(self, request: Request) -> Any:
        """
        Read, parse and summarize the request body.
        Returns None if body cannot be read or parsed.
        """
        # Cache the raw bytes for downstream middleware
        if hasattr(request.state, "body"):
            body_bytes = request.state.body
        else:
            body_bytes = await request.body()
            request.state.body = body_bytes

        if not body_bytes:
            return None

        try:
            body_data = json.loads(body_bytes.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            # Unparseable bodies are rejected downstream, not here
            return None

        return summarize_body(body_data)
