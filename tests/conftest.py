"""Pytest configuration and shared fixtures."""
import asyncio
import json
import os
from dataclasses import dataclass
from typing import Any

import httpx
import pytest

from reasonchat.llm import ClientConfig, CompletionClient
from reasonchat.registry import ModelRegistry, RegistryConfig

TEST_ENDPOINT = "https://llm.test/openai/v1"


def completion_body(
    content: str = "Hi",
    reasoning: str | None = None,
    finish_reason: str = "stop",
    response_id: str = "chatcmpl-test",
) -> dict[str, Any]:
    """Build a success body in the endpoint's response shape."""
    choice: dict[str, Any] = {
        "index": 0,
        "message": {"role": "assistant", "content": content},
        "finish_reason": finish_reason,
    }
    if reasoning is not None:
        choice["reasoning"] = reasoning
    return {"id": response_id, "object": "chat.completion", "choices": [choice]}


def sse_chunk(content: str | None = None, reasoning: str | None = None, finish_reason: str | None = None) -> bytes:
    """Encode one streamed chunk as a server-sent event."""
    delta: dict[str, Any] = {}
    if content is not None:
        delta["content"] = content
    if reasoning is not None:
        delta["reasoning"] = reasoning
    payload = {
        "id": "chatcmpl-stream",
        "object": "chat.completion.chunk",
        "created": 0,
        "model": "test-model",
        "choices": [{"index": 0, "delta": delta, "finish_reason": finish_reason}],
    }
    return f"data: {json.dumps(payload)}\n\n".encode()


SSE_DONE = b"data: [DONE]\n\n"


@dataclass
class Delayed:
    """Reply after sleeping, so a test can act while the request is pending."""

    seconds: float
    reply: Any


class FakeEndpoint:
    """Scripted completion endpoint served through httpx.MockTransport.

    Replies are consumed in order; the last one repeats. A reply can be a
    dict (200 JSON), an httpx.Response, an exception class raised as a
    transport error, or Delayed wrapping any of those.
    """

    def __init__(self, *replies: Any):
        self.replies = list(replies)
        self.requests: list[dict[str, Any]] = []
        self.headers: list[httpx.Headers] = []
        self.active = 0
        self.max_active = 0
        self.received = asyncio.Event()

    @property
    def attempts(self) -> int:
        return len(self.requests)

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(json.loads(request.content))
        self.headers.append(request.headers)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        self.received.set()
        try:
            reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
            if isinstance(reply, Delayed):
                await asyncio.sleep(reply.seconds)
                reply = reply.reply
            if isinstance(reply, type) and issubclass(reply, Exception):
                raise reply("simulated transport failure", request=request)
            if isinstance(reply, httpx.Response):
                try:
                    # Repeated replies need a fresh response each time
                    return httpx.Response(reply.status_code, headers=reply.headers, content=reply.content)
                except httpx.ResponseNotRead:
                    return reply
            return httpx.Response(200, json=reply)
        finally:
            self.active -= 1

    def client(self, **config: Any) -> CompletionClient:
        settings = {"endpoint": TEST_ENDPOINT, "max_retries": 3, "retry_delay": 0.0, "timeout": 5.0}
        settings.update(config)
        return CompletionClient(
            ClientConfig(**settings),
            api_key="test-key",
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(self.handler)),
        )


@pytest.fixture
def registry():
    """Registry over the built-in catalogue."""
    return ModelRegistry(RegistryConfig())


@pytest.fixture(scope="session")
def api_keys():
    """Return API keys from environment."""
    return {
        "groq": os.getenv("GROQ_API_KEY"),
    }
