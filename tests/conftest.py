"""Shared fixtures for Xero MCP tests."""

import json
from collections.abc import Callable

import httpx
import pytest

from xero_mcp.client import XeroClient
from xero_mcp.credentials import ClientManager, CredentialResolver
from xero_mcp.models import AuthMode, Credentials
from xero_mcp.router import ToolRouter

TEST_CREDENTIALS = Credentials(access_token="test-token", tenant_id="tenant-1")


class FakeXero:
    """Records outbound requests and answers them from a responder function."""

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response] | None = None) -> None:
        self.requests: list[httpx.Request] = []
        self.responder = responder or (lambda request: httpx.Response(200, json={}))
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last.content)


@pytest.fixture
def fake_xero():
    """Fake Xero API returning an empty JSON object by default."""
    return FakeXero()


@pytest.fixture
def client(fake_xero):
    """XeroClient wired to the fake Xero API."""
    return XeroClient(TEST_CREDENTIALS, transport=fake_xero.transport)


@pytest.fixture
def router(fake_xero):
    """Env-mode ToolRouter wired to the fake Xero API."""
    resolver = CredentialResolver(AuthMode.ENV, TEST_CREDENTIALS)
    return ToolRouter(ClientManager(resolver, transport=fake_xero.transport))
