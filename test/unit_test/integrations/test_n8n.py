"""Tests for the n8n webhook client using httpx.MockTransport."""

import json

import httpx
import pytest

from legal_chatbot.integrations.errors import N8nWebhookError
from legal_chatbot.integrations.n8n import N8nAnswer, N8nWebhookClient

WEBHOOK_URL = "http://mock/webhook/chat"


def _client(handler) -> N8nWebhookClient:
    return N8nWebhookClient(WEBHOOK_URL, client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


@pytest.mark.asyncio
async def test_ask_posts_json_payload():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["content_type"] = request.headers["content-type"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"response": "ok", "sources": [], "matched_ids": [1, "a"]})

    client = _client(handler)
    answer = await client.ask({"query": "luật thuế", "topic": "logistics"})

    assert isinstance(answer, N8nAnswer)
    assert answer.response == "ok"
    assert answer.matched_ids == [1, "a"]
    assert seen["method"] == "POST"
    assert seen["url"] == WEBHOOK_URL
    assert seen["content_type"] == "application/json"
    assert seen["body"] == {"query": "luật thuế", "topic": "logistics"}
    await client.aclose()


@pytest.mark.asyncio
async def test_ask_takes_first_item_of_list_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[{"response": "first"}, {"response": "second"}])

    answer = await _client(handler).ask({})

    assert answer.response == "first"
    assert answer.sources == []


@pytest.mark.asyncio
async def test_ask_ignores_unknown_fields():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"response": "x", "executionId": "123"})

    answer = await _client(handler).ask({})

    assert answer.response == "x"


@pytest.mark.asyncio
async def test_http_error_status():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="bad gateway")

    with pytest.raises(N8nWebhookError) as exc_info:
        await _client(handler).ask({})

    assert exc_info.value.status_code == 502
    assert exc_info.value.details == "bad gateway"
    assert isinstance(exc_info.value.__cause__, httpx.HTTPStatusError)


@pytest.mark.asyncio
async def test_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(N8nWebhookError) as exc_info:
        await _client(handler).ask({})

    assert exc_info.value.status_code is None


@pytest.mark.asyncio
async def test_non_json_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>oops</html>")

    with pytest.raises(N8nWebhookError) as exc_info:
        await _client(handler).ask({})

    assert exc_info.value.status_code == 200


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [[], ["just a string"], 42])
async def test_unexpected_shape(body):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=body)

    with pytest.raises(N8nWebhookError):
        await _client(handler).ask({})


@pytest.mark.asyncio
async def test_invalid_answer_fields():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"response": "x", "sources": "not-a-list"})

    with pytest.raises(N8nWebhookError, match="Invalid n8n answer"):
        await _client(handler).ask({})
