"""
Request models for the chat relay endpoint.
"""
from typing import List, Literal

from pydantic import BaseModel, ConfigDict


class ChatMessage(BaseModel):
    """One conversation turn, forwarded upstream as-is.

    Keys beyond role and content (e.g. ``name``) are kept so the upstream
    API receives the entry unchanged.
    """
    model_config = ConfigDict(extra="allow")

    role: Literal["system", "user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    """Payload for chat.

    - messages: Chronological list of {role, content} turns (may be empty)
    """
    messages: List[ChatMessage]
