import json

import httpx
import pytest
import respx

from llm_playground.clients.anthropic import AnthropicMessagesAdapter
from llm_playground.errors import NormalizationError, TransportError, VendorError
from llm_playground.normalizer import normalize
from llm_playground.types import Provider

URL = "https://api.anthropic.com/v1/messages"


@pytest.mark.asyncio
@respx.mock
async def test_anthropic_parsing():
    mock = {
        "content": [{"type": "text", "text": "hello"}],
        "usage": {"input_tokens": 1, "output_tokens": 1},
    }

    route = respx.post(URL).respond(200, json=mock)

    a = AnthropicMessagesAdapter()
    raw = await a.invoke("hi", "claude-3-5-haiku-20241022", "sk-ant-test")
    assert normalize(Provider.anthropic, raw) == "hello"

    req = route.calls.last.request
    assert req.headers["x-api-key"] == "sk-ant-test"
    assert req.headers["anthropic-version"] == "2023-06-01"
    assert "Authorization" not in req.headers
    body = json.loads(req.content)
    assert body["max_tokens"] == 1024
    assert body["system"] == "You are Claude, a helpful AI assistant."
    assert body["messages"] == [{"role": "user", "content": "hi"}]


@pytest.mark.asyncio
@respx.mock
async def test_anthropic_401_carries_structured_message():
    respx.post(URL).respond(
        401,
        json={"type": "error", "error": {"type": "authentication_error", "message": "invalid x-api-key"}},
    )

    with pytest.raises(VendorError) as ei:
        await AnthropicMessagesAdapter().invoke("hi", "claude-3-5-haiku-20241022", "sk-ant-bad")

    assert ei.value.status_code == 401
    assert ei.value.structured_message == "invalid x-api-key"


@pytest.mark.asyncio
@respx.mock
async def test_anthropic_error_envelope_in_2xx_body():
    respx.post(URL).respond(200, json={"error": "overloaded"})

    with pytest.raises(VendorError) as ei:
        await AnthropicMessagesAdapter().invoke("hi", "claude-3-5-haiku-20241022", "sk-ant-test")

    assert ei.value.plain_message == "overloaded"
    assert ei.value.structured_message is None


@pytest.mark.asyncio
@respx.mock
async def test_anthropic_non_json_success_is_normalization_error():
    respx.post(URL).respond(200, text="<html>gateway</html>")

    with pytest.raises(NormalizationError):
        await AnthropicMessagesAdapter().invoke("hi", "claude-3-5-haiku-20241022", "sk-ant-test")


@pytest.mark.asyncio
@respx.mock
async def test_anthropic_connect_error_is_transport_error():
    respx.post(URL).mock(side_effect=httpx.ConnectError("connection refused"))

    with pytest.raises(TransportError) as ei:
        await AnthropicMessagesAdapter().invoke("hi", "claude-3-5-haiku-20241022", "sk-ant-test")

    assert "connection refused" in str(ei.value)
