"""Shared fixtures: a recording stand-in for the Resend HTTP API."""

import json

import httpx
import pytest

from resend_uvx_mcp.capabilities import build_registry
from resend_uvx_mcp.email_tool import ResendClient

STUB_URL = "https://resend.test/emails"


class StubResend:
    """Answers every request with a canned response and records it."""

    def __init__(self, status=200, body=None, raw=None, error=None):
        self.status = status
        self.body = body if body is not None else {"id": "em_stub"}
        self.raw = raw
        self.error = error
        self.requests = []

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error(request)
        if self.raw is not None:
            return httpx.Response(self.status, content=self.raw)
        return httpx.Response(self.status, json=self.body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    def sent_payload(self, index: int = 0) -> dict:
        return json.loads(self.requests[index].content)


@pytest.fixture
def stub():
    return StubResend()


@pytest.fixture
def make_client():
    def _make(stub: StubResend) -> ResendClient:
        return ResendClient(api_url=STUB_URL, timeout=5.0, transport=stub.transport)

    return _make


@pytest.fixture
def registry(stub, make_client):
    return build_registry(make_client(stub))


@pytest.fixture
def email_args():
    return {
        "to_emails": ["a@x.com"],
        "subject": "Hi",
        "sender_email": "s@x.com",
        "text_content": "hello",
    }
