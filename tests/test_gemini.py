import json

import pytest
import respx

from llm_playground.clients.gemini import GeminiAdapter
from llm_playground.errors import VendorError
from llm_playground.normalizer import normalize
from llm_playground.types import Provider

@pytest.mark.asyncio
@respx.mock
async def test_gemini_parsing():
    mock = {
        "candidates": [{
            "content": {"parts": [{"text": "hello"}]}
        }]
    }

    # We match by URL prefix since query param includes ?key=
    route = respx.post(url__startswith="https://generativelanguage.googleapis.com/v1beta/models/").respond(200, json=mock)

    a = GeminiAdapter()
    raw = await a.invoke("hi", "gemini-pro", "test-key")
    assert normalize(Provider.gemini, raw) == "hello"

    req = route.calls.last.request
    assert req.url.path == "/v1beta/models/gemini-pro:generateContent"
    assert req.url.params["key"] == "test-key"
    assert json.loads(req.content) == {"contents": [{"parts": [{"text": "hi"}]}]}


@pytest.mark.asyncio
@respx.mock
async def test_gemini_error_status():
    respx.post(url__startswith="https://generativelanguage.googleapis.com/v1beta/models/").respond(
        400,
        json={"error": {"code": 400, "message": "API key not valid.", "status": "INVALID_ARGUMENT"}},
    )

    with pytest.raises(VendorError) as ei:
        await GeminiAdapter().invoke("hi", "gemini-pro", "bad-key")

    assert ei.value.structured_message == "API key not valid."


@pytest.mark.asyncio
@respx.mock
async def test_gemini_no_candidates():
    respx.post(url__startswith="https://generativelanguage.googleapis.com/v1beta/models/").respond(
        200, json={"promptFeedback": {"blockReason": "SAFETY"}}
    )

    raw = await GeminiAdapter().invoke("hi", "gemini-pro", "test-key")
    assert raw == {"output": None}
