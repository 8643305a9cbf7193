"""
Tests for the AI assistant client.
"""

import json

import httpx
import pytest

from simvex.core.exceptions import AssistantUnavailableException, ServiceUnavailableException
from simvex.services.assistant_client import AssistantClient


@pytest.mark.asyncio
async def test_ask_posts_content_and_relays_reply():
    received = []

    def handler(request: httpx.Request) -> httpx.Response:
        received.append(request)
        return httpx.Response(
            201,
            content=b"plain answer",
            headers={"content-type": "text/plain"},
        )

    client = AssistantClient("https://assistant.test/", transport=httpx.MockTransport(handler))

    reply = await client.ask("p1", "wheel", "How heavy is it?")

    assert reply.status_code == 201
    assert reply.body == b"plain answer"
    assert reply.content_type == "text/plain"
    assert str(received[0].url) == "https://assistant.test/assistant/p1/wheel"
    assert received[0].method == "POST"
    assert json.loads(received[0].content) == {"content": "How heavy is it?"}


@pytest.mark.asyncio
async def test_error_status_is_relayed():
    client = AssistantClient(
        "https://assistant.test",
        transport=httpx.MockTransport(lambda request: httpx.Response(500, json={"detail": "down"})),
    )

    reply = await client.ask("p1", "wheel", "?")

    assert reply.status_code == 500
    assert json.loads(reply.body) == {"detail": "down"}


@pytest.mark.asyncio
async def test_unconfigured_assistant():
    client = AssistantClient(None)

    with pytest.raises(ServiceUnavailableException):
        await client.ask("p1", "wheel", "?")


@pytest.mark.asyncio
async def test_unreachable_assistant():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = AssistantClient("https://assistant.test", transport=httpx.MockTransport(handler))

    with pytest.raises(AssistantUnavailableException):
        await client.ask("p1", "wheel", "?")
