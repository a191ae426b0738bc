"""
Completion clients used by the chat relay.

Two implementations share one interface:
- LiveCompletionClient streams deltas from an OpenAI-compatible API
  (Azure OpenAI deployments or api.openai.com)
- MockCompletionClient replays a fixed instructional message when no
  credentials are configured, so the UI can be exercised offline
"""
from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Dict, List, Optional

from openai import AsyncOpenAI

from chat_relay.services.prompts import CHAT_SYSTEM_PROMPT, MOCK_CHAT_RESPONSE

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOKENS = 800
DEFAULT_TEMPERATURE = 0.7
MOCK_CHUNK_SIZE = 5


class CompletionClient(ABC):
    """Source of incremental text deltas for a chat conversation."""

    #: Short label reported by the health endpoint and startup logs
    mode: str = "unknown"

    @abstractmethod
    def stream_deltas(self, messages: List[Dict[str, Any]]) -> AsyncIterator[str]:
        """
        Stream the reply to a conversation.

        Args:
            messages: Chronological list of {role, content} dictionaries

        Yields:
            Non-empty text fragments in generation order
        """


class LiveCompletionClient(CompletionClient):
    """Streams chat completions from an OpenAI-compatible endpoint."""

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str,
        mode: str = "openai",
        system_prompt: str = CHAT_SYSTEM_PROMPT,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        temperature: float = DEFAULT_TEMPERATURE,
    ):
        self.client = client
        self.model = model
        self.mode = mode
        self.system_prompt = system_prompt
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def stream_deltas(self, messages: List[Dict[str, Any]]) -> AsyncIterator[str]:
        all_messages = [
            {"role": "system", "content": self.system_prompt},
            *messages,
        ]

        stream = await self.client.chat.completions.create(
            model=self.model,
            messages=all_messages,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            stream=True,
        )

        # Closing the stream on early exit (client disconnect, cancellation)
        # stops pulling further chunks from the upstream connection
        try:
            async for chunk in stream:
                content = _delta_content(chunk)
                if content:
                    yield content
        finally:
            await stream.close()


class MockCompletionClient(CompletionClient):
    """Replays a fixed message in small paced fragments."""

    mode = "mock"

    def __init__(
        self,
        message: str = MOCK_CHAT_RESPONSE,
        chunk_size: int = MOCK_CHUNK_SIZE,
        delay: float = 0.05,
    ):
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self.message = message
        self.chunk_size = chunk_size
        self.delay = delay

    def fragments(self) -> List[str]:
        """Split the message into fragments of at most chunk_size characters."""
        # str slicing works on code points, so multi-byte characters stay whole
        return [
            self.message[i:i + self.chunk_size]
            for i in range(0, len(self.message), self.chunk_size)
        ]

    async def stream_deltas(self, messages: List[Dict[str, Any]]) -> AsyncIterator[str]:
        for fragment in self.fragments():
            yield fragment
            await asyncio.sleep(self.delay)


def _delta_content(chunk: Any) -> Optional[str]:
    """Extract the text delta from a streamed completion chunk, if any."""
    choices = getattr(chunk, "choices", None)
    if not choices:
        return None
    delta = getattr(choices[0], "delta", None)
    if delta is None:
        return None
    return getattr(delta, "content", None)
