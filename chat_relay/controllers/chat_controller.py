"""
Chat controller for the streaming relay.

Validates chat payloads and republishes completion deltas as Server-Sent
Events. Each stream ends with exactly one terminal frame: the [DONE]
sentinel on success, or a single error event if the upstream call fails.
"""
import asyncio
import json
import logging
from contextlib import aclosing
from typing import Any, AsyncGenerator, Dict

from pydantic import ValidationError

from chat_relay.api.models.chat import ChatRequest
from chat_relay.services.completion import CompletionClient

logger = logging.getLogger(__name__)

INVALID_MESSAGE_FORMAT = "Invalid message format"
STREAM_ERROR_MESSAGE = "An error occurred while processing your request."

SSE_DONE = "data: [DONE]\n\n"
SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


class InvalidMessageFormat(Exception):
    """Raised when a chat payload has no usable messages array."""

    def __init__(self, message: str = INVALID_MESSAGE_FORMAT):
        super().__init__(message)
        self.message = message


def format_sse(payload: Dict[str, Any]) -> str:
    """Encode one payload as an SSE data frame."""
    data = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    return f"data: {data}\n\n"


class ChatController:
    """Controller for chat relay operations."""

    def __init__(self, completion_client: CompletionClient):
        self.completion_client = completion_client

    def parse_request(self, payload: Any) -> ChatRequest:
        """
        Validate a decoded chat payload.

        Args:
            payload: Decoded JSON body, or None if the body was not JSON

        Returns:
            ChatRequest with validated messages

        Raises:
            InvalidMessageFormat: If messages is missing, not a list, or
                contains malformed entries
        """
        if not isinstance(payload, dict) or not isinstance(payload.get("messages"), list):
            raise InvalidMessageFormat()

        try:
            return ChatRequest.model_validate(payload)
        except ValidationError as e:
            logger.debug(f"Rejected chat payload: {e}")
            raise InvalidMessageFormat() from e

    async def chat_stream(self, request: ChatRequest) -> AsyncGenerator[str, None]:
        """
        Generate the SSE frames for one chat request.

        NOTE: Validation must happen BEFORE calling this method so that a 400
        can still be returned; once streaming starts the status is committed.

        Args:
            request: Validated ChatRequest

        Yields:
            SSE frames, ending with [DONE] or a single error event
        """
        messages = [message.model_dump() for message in request.messages]

        try:
            async with aclosing(self.completion_client.stream_deltas(messages)) as deltas:
                async for delta in deltas:
                    yield format_sse({"content": delta})
        except asyncio.CancelledError:
            logger.info(f"Client disconnected, {self.completion_client.mode} stream stopped")
            raise
        except Exception as e:
            # Headers are already sent as 200, so report in-band.
            # The raw error stays in the server log only.
            logger.error(f"AI API error: {e}", exc_info=True)
            yield format_sse({"error": STREAM_ERROR_MESSAGE})
            return

        yield SSE_DONE
