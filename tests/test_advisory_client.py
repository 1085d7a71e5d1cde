"""Tests for the OpenAI-compatible advisory client (mocked HTTP)."""
import json

import httpx
import pytest

from plantlink.advisory import OpenAIAdvisory
from plantlink.core.errors import AdvisoryError


def _completion(content):
    return {
        "id": "chatcmpl-1",
        "model": "gpt-3.5-turbo",
        "choices": [{"index": 0, "message": {"role": "assistant", "content": content}}],
    }


@pytest.mark.asyncio
async def test_complete_posts_chat_request():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=_completion("Overwatering is the likely cause."))

    advisory = OpenAIAdvisory(
        api_key="sk-test",
        base_url="https://llm.example.com/v1/",
        model="gpt-test",
        transport=httpx.MockTransport(handler),
    )
    text = await advisory.complete("You are a plant health expert.", "yellow leaves")
    await advisory.close()

    assert text == "Overwatering is the likely cause."
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "https://llm.example.com/v1/chat/completions"
    assert request.headers["Authorization"] == "Bearer sk-test"
    body = json.loads(request.content)
    assert body["model"] == "gpt-test"
    assert body["messages"] == [
        {"role": "system", "content": "You are a plant health expert."},
        {"role": "user", "content": "yellow leaves"},
    ]


@pytest.mark.asyncio
async def test_http_error_raises_advisory_error():
    advisory = OpenAIAdvisory(
        api_key="sk-test",
        transport=httpx.MockTransport(lambda request: httpx.Response(401, json={"error": "bad key"})),
    )
    with pytest.raises(AdvisoryError, match="Advisory request failed"):
        await advisory.complete("system", "Pothos")
    await advisory.close()


@pytest.mark.asyncio
async def test_missing_choices_raises_advisory_error():
    advisory = OpenAIAdvisory(
        api_key="sk-test",
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"choices": []})),
    )
    with pytest.raises(AdvisoryError, match="no message content"):
        await advisory.complete("system", "Pothos")
    await advisory.close()


@pytest.mark.asyncio
async def test_null_content_raises_advisory_error():
    advisory = OpenAIAdvisory(
        api_key="sk-test",
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json=_completion(None))),
    )
    with pytest.raises(AdvisoryError):
        await advisory.complete("system", "Pothos")
    await advisory.close()


@pytest.mark.asyncio
async def test_non_json_body_raises_advisory_error():
    advisory = OpenAIAdvisory(
        api_key="sk-test",
        transport=httpx.MockTransport(lambda request: httpx.Response(200, text="<html>gateway</html>")),
    )
    with pytest.raises(AdvisoryError, match="not JSON"):
        await advisory.complete("system", "Pothos")
    await advisory.close()
