"""Test configuration and fixtures."""
from types import SimpleNamespace
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from chat_relay.config.settings import get_settings
from chat_relay.services.completion import (
    LiveCompletionClient,
    MockCompletionClient,
    get_completion_client,
)

RELAY_ENV_VARS = (
    "AZURE_OPENAI_API_KEY",
    "OPENAI_API_KEY",
    "AZURE_OPENAI_ENDPOINT",
    "AZURE_OPENAI_DEPLOYMENT_NAME",
    "OPENAI_MODEL_NAME",
    "SYSTEM_ENVIRONMENT",
    "PUBLIC_DIR",
)


def make_chunk(content: Optional[str]) -> SimpleNamespace:
    """Build an object shaped like a streamed ChatCompletionChunk."""
    return SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=content))])


class FakeStream:
    """Stand-in for openai.AsyncStream: yields chunks, optionally fails."""

    def __init__(self, chunks: List[SimpleNamespace], fail_after: Optional[int] = None):
        self.chunks = list(chunks)
        self.fail_after = fail_after
        self.pulled = 0
        self.closed = False

    def __aiter__(self):
        return self

    async def __anext__(self):
        if self.fail_after is not None and self.pulled >= self.fail_after:
            raise RuntimeError("upstream connection reset")
        if self.pulled >= len(self.chunks):
            raise StopAsyncIteration
        chunk = self.chunks[self.pulled]
        self.pulled += 1
        return chunk

    async def close(self):
        self.closed = True


class FakeCompletions:
    def __init__(self, stream: Optional[FakeStream] = None, error: Optional[Exception] = None):
        self.stream = stream
        self.error = error
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.stream


class FakeOpenAI:
    """Minimal AsyncOpenAI double exposing chat.completions.create."""

    def __init__(self, completions: FakeCompletions):
        self.chat = SimpleNamespace(completions=completions)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep host credentials and cached settings out of every test."""
    for name in RELAY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    get_completion_client.cache_clear()
    yield
    get_settings.cache_clear()
    get_completion_client.cache_clear()


@pytest.fixture
def mock_completion_client():
    return MockCompletionClient(delay=0)


@pytest.fixture
def make_live_client():
    """Factory for a LiveCompletionClient backed by a fake upstream."""

    def _make(chunks=(), fail_after=None, error=None):
        stream = FakeStream(list(chunks), fail_after=fail_after)
        completions = FakeCompletions(stream=stream, error=error)
        client = LiveCompletionClient(client=FakeOpenAI(completions), model="gpt-test")
        return client, completions, stream

    return _make


@pytest.fixture
def make_test_client():
    """Build a TestClient for a fresh app using the given completion client."""
    from main import create_app

    def _make(completion_client):
        app = create_app()
        app.dependency_overrides[get_completion_client] = lambda: completion_client
        return TestClient(app)

    return _make


def parse_sse(body: str) -> List[str]:
    """Split an SSE body into the payload of each data frame."""
    assert body.endswith("\n\n")
    frames = body.split("\n\n")[:-1]
    payloads = []
    for frame in frames:
        assert frame.startswith("data: ")
        payloads.append(frame[len("data: "):])
    return payloads
