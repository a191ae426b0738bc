from .chat import ChatMessage, ChatRequest
from .error import ErrorResponse

__all__ = [
    "ErrorResponse",
    "ChatMessage",
    "ChatRequest",
]
