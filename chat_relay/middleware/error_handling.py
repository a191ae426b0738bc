"""
Error handling middleware.
Centralizes error handling and response formatting for the relay.
"""
import json
import logging
import traceback
from typing import Any, Callable

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.middleware.base import BaseHTTPMiddleware

from chat_relay.controllers.chat_controller import InvalidMessageFormat
from chat_relay.middleware.request_logging import summarize_body

logger = logging.getLogger(__name__)


async def invalid_message_format_handler(
    request: Request, exc: InvalidMessageFormat
) -> JSONResponse:
    """Reject a malformed chat payload before any stream starts."""
    logger.warning(
        "Invalid chat payload",
        extra={"path": request.url.path, "method": request.method},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": exc.message},
    )


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Middleware for centralized error handling and logging."""

    async def _get_request_body(self, request: Request) -> Any:
        """
        Safely extract the summarized request body for error logging.
        """
        try:
            if hasattr(request.state, "body"):
                body_bytes = request.state.body
            else:
                body_bytes = await request.body()
                request.state.body = body_bytes

            if not body_bytes:
                return None

            return summarize_body(json.loads(body_bytes.decode("utf-8")))
        except (UnicodeDecodeError, ValueError):
            return None

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            response = await call_next(request)
            return response

        except ValidationError as e:
            body = await self._get_request_body(request)

            logger.warning(
                "Validation error",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "errors": e.errors(),
                    "request_body": body,
                },
            )
            return JSONResponse(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                content={
                    "error": "Validation Error",
                    "message": "Invalid input data",
                    "details": json.loads(e.json()),
                },
            )

        except Exception as e:
            body = await self._get_request_body(request)

            tb_str = traceback.format_exc()

            from chat_relay.config.settings import get_settings

            is_production = get_settings().is_production

            logger.error(
                "Unhandled error",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "error": str(e),
                    "error_type": type(e).__name__,
                    "request_body": body,
                    "traceback": tb_str if not is_production else None,
                },
                exc_info=True,
            )

            # Don't expose internal errors in production
            if is_production:
                message = "An internal error occurred. Please try again later."
            else:
                message = f"{type(e).__name__}: {str(e)}"

            response_content = {
                "error": "Internal Server Error",
                "message": message,
            }

            if not is_production:
                response_content["traceback"] = tb_str

            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=response_content,
            )
