"""Tests for the streamable HTTP host."""

import httpx
import pytest
from mcp.types import LATEST_PROTOCOL_VERSION
from starlette.responses import JSONResponse
from starlette.testclient import TestClient

from conftest import FakeXero
from xero_mcp.config import Settings
from xero_mcp.http_app import create_http_app
from xero_mcp.models import AuthMode, Credentials, Transport
from xero_mcp.server import create_server

CREDENTIAL_HEADERS = {"X-Xero-Access-Token": "tok", "X-Xero-Tenant-Id": "ten"}


class RecordingHandler:
    """Stands in for the MCP session manager and records what reached it."""

    def __init__(self) -> None:
        self.calls: list[dict[str, str]] = []

    async def handle_request(self, scope, receive, send) -> None:
        headers = {k.decode(): v.decode() for k, v in scope["headers"]}
        self.calls.append(headers)
        await JSONResponse({"handled": True})(scope, receive, send)


def make_client(auth_mode: AuthMode, handler: RecordingHandler) -> TestClient:
    settings = Settings(transport=Transport.HTTP, auth_mode=auth_mode)
    app = create_http_app(create_server(settings), settings, handler=handler)
    return TestClient(app)


def mcp_post(
    http: TestClient,
    payload: dict,
    headers: dict[str, str],
    session_id: str | None = None,
) -> httpx.Response:
    """POST one JSON-RPC message to /mcp as a streamable HTTP client would."""
    request_headers = {**headers, "Accept": "application/json, text/event-stream"}
    if session_id is not None:
        request_headers["mcp-session-id"] = session_id
        request_headers["mcp-protocol-version"] = LATEST_PROTOCOL_VERSION
    return http.post("/mcp", json=payload, headers=request_headers)


def open_session(http: TestClient, headers: dict[str, str]) -> str:
    """Run the MCP initialize handshake and return the session id."""
    response = mcp_post(
        http,
        {
            "jsonrpc": "2.0",
            "id": 1,
            "method": "initialize",
            "params": {
                "protocolVersion": LATEST_PROTOCOL_VERSION,
                "capabilities": {},
                "clientInfo": {"name": "test-client", "version": "0.0.1"},
            },
        },
        headers,
    )
    assert response.status_code == 200
    session_id = response.headers["mcp-session-id"]

    response = mcp_post(
        http, {"jsonrpc": "2.0", "method": "notifications/initialized"}, headers, session_id
    )
    assert response.status_code == 202
    return session_id


def list_tool_names(http: TestClient, headers: dict[str, str], session_id: str) -> list[str]:
    response = mcp_post(
        http, {"jsonrpc": "2.0", "id": 2, "method": "tools/list"}, headers, session_id
    )
    return [tool["name"] for tool in response.json()["result"]["tools"]]


def call_tool(
    http: TestClient,
    headers: dict[str, str],
    session_id: str,
    name: str,
    arguments: dict,
) -> dict:
    response = mcp_post(
        http,
        {
            "jsonrpc": "2.0",
            "id": 3,
            "method": "tools/call",
            "params": {"name": name, "arguments": arguments},
        },
        headers,
        session_id,
    )
    assert response.status_code == 200
    return response.json()["result"]


@pytest.fixture
def handler():
    return RecordingHandler()


class TestHealth:
    @pytest.mark.parametrize("auth_mode", list(AuthMode))
    def test_health_needs_no_auth(self, handler, auth_mode):
        response = make_client(auth_mode, handler).get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["transport"] == "http"
        assert body["authMode"] == auth_mode.value
        assert "timestamp" in body
        assert handler.calls == []

    @pytest.mark.parametrize("method", ["POST", "PUT", "DELETE"])
    def test_health_any_method(self, handler, method):
        response = make_client(AuthMode.ENV, handler).request(method, "/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestNotFound:
    def test_unknown_path_lists_endpoints(self, handler):
        response = make_client(AuthMode.ENV, handler).post("/rpc", json={})

        assert response.status_code == 404
        assert response.json() == {"error": "Not found", "endpoints": ["/mcp", "/health"]}


class TestGatewayMode:
    """Header checks on /mcp in gateway mode."""

    @pytest.mark.parametrize(
        "headers",
        [
            {},
            {"X-Xero-Access-Token": "tok"},
            {"X-Xero-Tenant-Id": "ten"},
        ],
    )
    def test_missing_header_rejected(self, handler, headers):
        response = make_client(AuthMode.GATEWAY, handler).post("/mcp", json={}, headers=headers)

        assert response.status_code == 401
        body = response.json()
        assert body["error"] == "Missing credentials"
        assert body["required"] == ["X-Xero-Access-Token", "X-Xero-Tenant-Id"]
        assert handler.calls == []

    def test_complete_headers_forwarded(self, handler):
        response = make_client(AuthMode.GATEWAY, handler).post(
            "/mcp", json={}, headers=CREDENTIAL_HEADERS
        )

        assert response.status_code == 200
        assert response.json() == {"handled": True}
        [forwarded] = handler.calls
        assert forwarded["x-xero-access-token"] == "tok"
        assert forwarded["x-xero-tenant-id"] == "ten"


class TestEnvMode:
    def test_mcp_forwarded_without_headers(self, handler):
        response = make_client(AuthMode.ENV, handler).get("/mcp")

        assert response.status_code == 200
        assert len(handler.calls) == 1


class TestSessionManager:
    """Requests served end to end by the real MCP session manager."""

    def test_gateway_sessions_use_their_own_headers(self):
        fake = FakeXero(lambda request: httpx.Response(200, json={"Accounts": []}))
        settings = Settings(transport=Transport.HTTP, auth_mode=AuthMode.GATEWAY)
        headers_a = {"X-Xero-Access-Token": "tok-a", "X-Xero-Tenant-Id": "ten-a"}
        headers_b = {"X-Xero-Access-Token": "tok-b", "X-Xero-Tenant-Id": "ten-b"}

        app = create_http_app(create_server(settings, transport=fake.transport), settings)
        with TestClient(app) as http:
            session_a = open_session(http, headers_a)
            session_b = open_session(http, headers_b)
            assert session_a != session_b

            result = call_tool(http, headers_a, session_a, "xero_navigate", {"domain": "accounts"})
            assert not result.get("isError")

            result = call_tool(http, headers_b, session_b, "xero_accounts_list", {})
            assert not result.get("isError")

            tools_a = list_tool_names(http, headers_a, session_a)
            tools_b = list_tool_names(http, headers_b, session_b)

        assert [(r.headers["Authorization"], r.headers["xero-tenant-id"]) for r in fake.requests] == [
            ("Bearer tok-b", "ten-b")
        ]
        assert tools_a[0] == "xero_back"
        assert "xero_accounts_list" in tools_a
        assert "xero_navigate" not in tools_a
        assert tools_b == ["xero_navigate"]

    def test_shutdown_closes_cached_client(self):
        fake = FakeXero()
        settings = Settings(
            transport=Transport.HTTP,
            credentials=Credentials(access_token="tok", tenant_id="ten"),
        )
        server = create_server(settings, transport=fake.transport)

        with TestClient(create_http_app(server, settings)) as http:
            session_id = open_session(http, {})
            result = call_tool(http, {}, session_id, "xero_accounts_list", {})
            assert not result.get("isError")
            assert server.clients._client is not None

        assert server.clients._client is None
        assert fake.last.headers["Authorization"] == "Bearer tok"
