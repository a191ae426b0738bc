from .chat_prompts import (
    CHAT_SYSTEM_PROMPT,
    MOCK_CHAT_RESPONSE,
)

__all__ = [
    "CHAT_SYSTEM_PROMPT",
    "MOCK_CHAT_RESPONSE",
]
