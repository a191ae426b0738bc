"""
Chat relay endpoint.

Proxies chat messages to the configured completion API and streams the
reply back as Server-Sent Events.
"""
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import StreamingResponse

from chat_relay.api.models import ErrorResponse
from chat_relay.controllers.chat_controller import SSE_HEADERS, ChatController
from chat_relay.services.completion import CompletionClient, get_completion_client

# ============================================================================
# Dependency Injection
# ============================================================================


def get_chat_controller(
    completion_client: CompletionClient = Depends(get_completion_client),
) -> ChatController:
    """Dependency injection for ChatController."""
    return ChatController(completion_client)


# ============================================================================
# Router
# ============================================================================

router = APIRouter()


# ============================================================================
# Endpoints
# ============================================================================


@router.post(
    "/chat",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"content": {"text/event-stream": {}}, "description": "SSE stream"},
        400: {"model": ErrorResponse, "description": "Invalid message format"},
    },
)
async def chat(
    request: Request,
    controller: ChatController = Depends(get_chat_controller),
) -> StreamingResponse:
    """
    Chat endpoint with streaming LLM response.

    Body: {"messages": [{"role": ..., "content": ...}, ...]}

    Streams `data: {"content": ...}` events followed by `data: [DONE]`.
    Without API credentials a canned mock reply is streamed instead.
    """
    # The body is decoded by hand so that every malformed payload, including
    # invalid JSON, gets the same 400 body instead of FastAPI's 422
    try:
        payload = await request.json()
    except ValueError:
        payload = None

    # Validate BEFORE creating StreamingResponse so the 400 is still possible
    chat_request = controller.parse_request(payload)

    return StreamingResponse(
        controller.chat_stream(chat_request),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
