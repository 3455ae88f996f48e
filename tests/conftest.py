import httpx
import pytest
from unittest import mock
from fastapi.testclient import TestClient
from codehelper.api import app


def completion_body(content):
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "model": "llama-3.1-8b-instant",
        "choices": [
            {"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": "stop"}
        ],
    }

class FakeUpstream:
    """Records outbound completion calls and answers them with a canned response."""

    def __init__(self):
        self.calls = []
        self.response = httpx.Response(200, json=completion_body("stubbed text"))
        self.responder = None
        self.error = None

    def __call__(self, *args, **kwargs):
        return FakeAsyncClient(self)

class FakeAsyncClient:
    def __init__(self, upstream):
        self.upstream = upstream

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        pass

    async def post(self, url, headers=None, json=None):
        self.upstream.calls.append({"url": url, "headers": headers, "json": json})
        if self.upstream.error:
            raise self.upstream.error
        if self.upstream.responder:
            return await self.upstream.responder(json)
        return self.upstream.response

@pytest.fixture(scope="module")
def client():
    return TestClient(app)

@pytest.fixture
def base_payload():
    return {"code": "print('hello')"}

@pytest.fixture
def fake_upstream():
    upstream = FakeUpstream()
    with mock.patch("codehelper.gateway.httpx.AsyncClient", upstream):
        yield upstream
