import json

import httpx
import pytest
from openai import AsyncOpenAI

from scribe.llms.openai_backend import OpenAICompatibleBackend


def completion(content: str | None) -> dict:
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "created": 0,
        "model": "openai/gpt-4o",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
    }


def chunk(content: str | None) -> str:
    delta = {"content": content} if content is not None else {}
    data = {
        "id": "chatcmpl-1",
        "object": "chat.completion.chunk",
        "created": 0,
        "model": "openai/gpt-4o",
        "choices": [{"index": 0, "delta": delta, "finish_reason": None}],
    }
    return f"data: {json.dumps(data)}\n\n"


def make_backend(handler) -> OpenAICompatibleBackend:  # noqa: ANN001
    client = AsyncOpenAI(
        base_url="https://llm.example.com/v1",
        api_key="test-key",
        max_retries=0,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    return OpenAICompatibleBackend(client)


@pytest.mark.asyncio
async def test_complete_sends_single_user_message() -> None:
    requests: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(json.loads(request.content))
        return httpx.Response(200, json=completion("Hello"))

    backend = make_backend(handler)

    assert await backend.complete("openai/gpt-4o", "Say hi") == "Hello"
    assert requests[0]["model"] == "openai/gpt-4o"
    assert requests[0]["messages"] == [{"role": "user", "content": "Say hi"}]
    assert not requests[0].get("stream")


@pytest.mark.asyncio
async def test_complete_with_empty_content() -> None:
    backend = make_backend(lambda request: httpx.Response(200, json=completion(None)))

    assert await backend.complete("openai/gpt-4o", "Say hi") == ""


@pytest.mark.asyncio
async def test_stream_yields_non_empty_deltas_in_order() -> None:
    requests: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(json.loads(request.content))
        body = chunk("Hel") + chunk(None) + chunk("") + chunk("lo") + "data: [DONE]\n\n"
        return httpx.Response(200, text=body, headers={"content-type": "text/event-stream"})

    backend = make_backend(handler)

    chunks = [c async for c in backend.stream("openai/gpt-4o", "Say hi")]

    assert chunks == ["Hel", "lo"]
    assert requests[0]["stream"] is True


@pytest.mark.asyncio
async def test_backend_errors_propagate() -> None:
    backend = make_backend(lambda request: httpx.Response(500, json={"error": {"message": "boom"}}))

    with pytest.raises(Exception, match="boom"):
        await backend.complete("openai/gpt-4o", "Say hi")
