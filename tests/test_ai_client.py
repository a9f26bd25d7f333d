"""Tests for the remote model gateway and chat sessions."""

import json

import httpx
import pytest

from orca.core.ai_client import AIClient, SessionError


def reply(content) -> httpx.Response:
    return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})


def make_client(settings, handler) -> AIClient:
    return AIClient(settings, transport=httpx.MockTransport(handler))


async def test_complete_posts_messages_with_bearer_token(settings):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return reply("Hello")

    client = make_client(settings, handler)
    text = await client.complete(
        [{"role": "user", "content": "Hi"}],
        endpoint=settings.chat_endpoint,
        max_tokens=64,
        temperature=0.1,
    )
    await client.close()

    assert text == "Hello"
    assert len(seen) == 1
    assert seen[0].url.path == settings.chat_endpoint
    assert seen[0].headers["Authorization"] == "Bearer test-token"
    body = json.loads(seen[0].content)
    assert body["messages"] == [{"role": "user", "content": "Hi"}]
    assert body["max_tokens"] == 64


async def test_multi_part_content_is_joined(settings):
    client = make_client(settings, lambda request: reply([{"type": "text", "text": "Hel"}, "lo"]))
    text = await client.complete([], endpoint=settings.chat_endpoint)
    await client.close()
    assert text == "Hello"


async def test_http_error_raises_session_error(settings):
    client = make_client(settings, lambda request: httpx.Response(503, text="unavailable"))
    with pytest.raises(SessionError):
        await client.complete([], endpoint=settings.chat_endpoint)
    await client.close()


async def test_transport_error_raises_session_error(settings):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(settings, handler)
    with pytest.raises(SessionError):
        await client.complete([], endpoint=settings.chat_endpoint)
    await client.close()


async def test_non_json_body_raises_session_error(settings):
    client = make_client(settings, lambda request: httpx.Response(200, text="<html>"))
    with pytest.raises(SessionError):
        await client.complete([], endpoint=settings.chat_endpoint)
    await client.close()


async def test_chat_session_resends_full_history(settings):
    bodies = []
    answers = iter(["First question?", "Second question?"])

    def handler(request):
        bodies.append(json.loads(request.content))
        return reply(next(answers))

    client = make_client(settings, handler)
    chat = client.open_chat("You are Orca.")

    assert await chat.send("Start") == "First question?"
    assert await chat.send("My answer") == "Second question?"
    await client.close()

    assert [m["role"] for m in bodies[1]["messages"]] == ["system", "user", "assistant", "user"]
    assert bodies[1]["messages"][0]["content"] == "You are Orca."
    assert bodies[1]["messages"][-1]["content"] == "My answer"
    assert chat.turn_count == 2


async def test_failed_turn_leaves_history_unchanged(settings):
    responses = iter([reply("First question?"), httpx.Response(500)])
    client = make_client(settings, lambda request: next(responses))
    chat = client.open_chat("You are Orca.")

    await chat.send("Start")
    before = list(chat.messages)
    with pytest.raises(SessionError):
        await chat.send("My answer")
    await client.close()

    assert chat.messages == before
    assert chat.turn_count == 1
