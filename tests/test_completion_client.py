import pytest

from chat_relay.controllers.chat_controller import ChatController
from chat_relay.api.models import ChatRequest
from chat_relay.services.completion import MockCompletionClient
from chat_relay.services.prompts import CHAT_SYSTEM_PROMPT, MOCK_CHAT_RESPONSE
from conftest import make_chunk


async def _collect(agen):
    return [item async for item in agen]


def test_mock_fragments_are_five_characters():
    client = MockCompletionClient(delay=0)

    fragments = client.fragments()

    assert "".join(fragments) == MOCK_CHAT_RESPONSE
    assert all(len(f) == 5 for f in fragments[:-1])
    assert 1 <= len(fragments[-1]) <= 5


def test_mock_fragments_keep_multibyte_characters_whole():
    message = "Grüße aus Köln 🌍✨ — 你好世界"
    client = MockCompletionClient(message=message, chunk_size=5, delay=0)

    fragments = client.fragments()

    assert fragments == ["Grüße", " aus ", "Köln ", "🌍✨ — ", "你好世界"]


def test_mock_rejects_non_positive_chunk_size():
    with pytest.raises(ValueError):
        MockCompletionClient(chunk_size=0)


@pytest.mark.asyncio
async def test_mock_stream_ignores_messages():
    client = MockCompletionClient(delay=0)

    with_history = await _collect(client.stream_deltas([{"role": "user", "content": "hi"}]))
    empty = await _collect(client.stream_deltas([]))

    assert with_history == empty == client.fragments()


@pytest.mark.asyncio
async def test_live_client_request_parameters(make_live_client):
    client, completions, _ = make_live_client([make_chunk("ok")])
    messages = [{"role": "user", "content": "hi"}]

    deltas = await _collect(client.stream_deltas(messages))

    assert deltas == ["ok"]
    call = completions.calls[0]
    assert call["model"] == "gpt-test"
    assert call["stream"] is True
    assert call["max_tokens"] == 800
    assert call["temperature"] == 0.7
    assert call["messages"] == [{"role": "system", "content": CHAT_SYSTEM_PROMPT}, *messages]


@pytest.mark.asyncio
async def test_live_client_skips_chunks_without_choices(make_live_client):
    from types import SimpleNamespace

    client, _, _ = make_live_client([SimpleNamespace(choices=[]), make_chunk("a"), make_chunk("b")])

    assert await _collect(client.stream_deltas([])) == ["a", "b"]


@pytest.mark.asyncio
async def test_live_client_closes_upstream_on_early_exit(make_live_client):
    client, _, stream = make_live_client([make_chunk("a"), make_chunk("b"), make_chunk("c")])

    deltas = client.stream_deltas([])
    assert await deltas.__anext__() == "a"
    await deltas.aclose()

    assert stream.closed
    assert stream.pulled == 1


@pytest.mark.asyncio
async def test_relay_disconnect_stops_pulling_upstream(make_live_client):
    client, _, stream = make_live_client([make_chunk("a"), make_chunk("b"), make_chunk("c")])
    controller = ChatController(client)

    frames = controller.chat_stream(ChatRequest(messages=[]))
    assert await frames.__anext__() == 'data: {"content":"a"}\n\n'
    await frames.aclose()

    assert stream.closed
    assert stream.pulled == 1
