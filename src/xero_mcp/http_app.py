"""Streamable HTTP transport for the Xero MCP server.

Routes:
- /health: static status on any method, no authentication
- /mcp: MCP streamable HTTP endpoint (any method)
- anything else: 404 listing the valid endpoints

In gateway mode every /mcp request must carry X-Xero-Access-Token and
X-Xero-Tenant-Id. Requests missing either header are rejected with 401
before reaching the MCP session manager; the headers of accepted requests
are read again by the tool handler to build that call's Xero client.
"""

import contextlib
import logging
from collections.abc import AsyncIterator
from datetime import datetime, timezone
from typing import Protocol

import uvicorn
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.types import Receive, Scope, Send

from xero_mcp.config import Settings
from xero_mcp.credentials import REQUIRED_HEADERS, credentials_from_headers
from xero_mcp.models import AuthMode
from xero_mcp.server import XeroMCPServer

logger = logging.getLogger(__name__)

MCP_PATH = "/mcp"
HEALTH_PATH = "/health"


class RequestHandler(Protocol):
    """Anything that can serve an MCP HTTP request (e.g. a session manager)."""

    async def handle_request(self, scope: Scope, receive: Receive, send: Send) -> None: ...


class MCPEndpoint:
    """ASGI endpoint for /mcp that enforces gateway credential headers."""

    def __init__(self, handler: RequestHandler, auth_mode: AuthMode) -> None:
        """Initialize the endpoint.

        Args:
            handler: Handler serving accepted MCP requests.
            auth_mode: Credential mode; headers are only checked in gateway mode.
        """
        self.handler = handler
        self.auth_mode = auth_mode

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if self.auth_mode is AuthMode.GATEWAY:
            request = Request(scope, receive)
            if not credentials_from_headers(request.headers).is_complete:
                logger.warning(
                    "Gateway mode: missing X-Xero-Access-Token or X-Xero-Tenant-Id header"
                )
                response = JSONResponse(
                    {
                        "error": "Missing credentials",
                        "message": (
                            "Gateway mode requires X-Xero-Access-Token and "
                            "X-Xero-Tenant-Id headers"
                        ),
                        "required": REQUIRED_HEADERS,
                    },
                    status_code=401,
                )
                await response(scope, receive, send)
                return

        await self.handler.handle_request(scope, receive, send)


def create_http_app(
    app: XeroMCPServer,
    settings: Settings,
    handler: RequestHandler | None = None,
) -> Starlette:
    """Build the Starlette application for the HTTP transport.

    Args:
        app: MCP server to expose.
        settings: Runtime settings (auth mode).
        handler: Optional request handler replacing the session manager.

    Returns:
        Starlette application whose lifespan runs the MCP session manager
        and closes the Xero clients on shutdown.
    """
    session_manager = StreamableHTTPSessionManager(app=app.server, json_response=True)
    endpoint = MCPEndpoint(handler or session_manager, settings.auth_mode)

    async def health(request: Request) -> JSONResponse:
        return JSONResponse(
            {
                "status": "ok",
                "transport": "http",
                "authMode": settings.auth_mode.value,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
        )

    async def not_found(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(
            {"error": "Not found", "endpoints": [MCP_PATH, HEALTH_PATH]},
            status_code=404,
        )

    @contextlib.asynccontextmanager
    async def lifespan(_: Starlette) -> AsyncIterator[None]:
        try:
            async with session_manager.run():
                yield
            logger.info("MCP transport closed")
        finally:
            await app.aclose()

    return Starlette(
        routes=[
            Route(HEALTH_PATH, health),
            Route(MCP_PATH, endpoint=endpoint),
        ],
        exception_handlers={404: not_found},
        lifespan=lifespan,
    )


async def run_http(app: XeroMCPServer, settings: Settings) -> None:
    """Serve the MCP server over streamable HTTP until SIGINT/SIGTERM.

    uvicorn stops accepting connections and drains in-flight requests
    before running the application shutdown, which closes the MCP
    transport and the Xero clients.
    """
    http_app = create_http_app(app, settings)
    config = uvicorn.Config(
        http_app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
    server = uvicorn.Server(config)

    logger.info(f"Xero MCP server listening on http://{settings.host}:{settings.port}{MCP_PATH}")
    logger.info(f"Health check available at http://{settings.host}:{settings.port}{HEALTH_PATH}")
    logger.info(
        "Authentication mode: "
        + (
            "gateway (header-based)"
            if settings.auth_mode is AuthMode.GATEWAY
            else "env (environment variables)"
        )
    )

    await server.serve()
    logger.info("Xero MCP server stopped")
