"""MCP server for the Xero Accounting API.

This module wires the ToolRouter into a low-level MCP Server and runs it
over stdio. Tools are organised as a decision tree:
- xero_navigate: select a domain (contacts, invoices, payments, accounts, reports)
- xero_back: return to domain selection
- xero_<domain>_<action>: domain tools, listed only inside their domain

Each MCP session keeps its own navigation state. A tools/list_changed
notification is sent whenever navigation changes the visible tools.
"""

import logging
from collections.abc import Mapping
from typing import Any
from weakref import WeakKeyDictionary

import httpx
from mcp.server.lowlevel import NotificationOptions, Server
from mcp.server.models import InitializationOptions
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, Tool

from xero_mcp import __version__
from xero_mcp.config import Settings
from xero_mcp.credentials import ClientManager, CredentialResolver
from xero_mcp.models import NavigationState
from xero_mcp.router import ToolRouter

logger = logging.getLogger(__name__)

INSTRUCTIONS = (
    "Access to Xero accounting data. Start with xero_navigate to pick a domain; "
    "use xero_back to switch domains."
)


class _ListChangedServer(Server):
    """Server that always advertises the tools.listChanged capability."""

    def create_initialization_options(
        self,
        notification_options: NotificationOptions | None = None,
        experimental_capabilities: dict[str, dict[str, Any]] | None = None,
    ) -> InitializationOptions:
        return super().create_initialization_options(
            notification_options or NotificationOptions(tools_changed=True),
            experimental_capabilities,
        )


class XeroMCPServer:
    """Low-level MCP server exposing the Xero tool router.

    Owns the ClientManager; call aclose() on shutdown to release it.
    """

    def __init__(self, router: ToolRouter) -> None:
        """Initialize the server and register MCP request handlers.

        Args:
            router: Tool router used for tools/list and tools/call.
        """
        self.router = router
        self.server = _ListChangedServer(
            "xero-mcp",
            version=__version__,
            instructions=INSTRUCTIONS,
        )
        self._states: WeakKeyDictionary[Any, NavigationState] = WeakKeyDictionary()

        self.server.list_tools()(self._list_tools)
        self.server.call_tool(validate_input=False)(self._call_tool)

    @property
    def clients(self) -> ClientManager:
        """Client manager shared by all sessions."""
        return self.router.clients

    def state_for(self, session: Any) -> NavigationState:
        """Get or create the navigation state for an MCP session."""
        state = self._states.get(session)
        if state is None:
            state = NavigationState()
            self._states[session] = state
        return state

    async def _list_tools(self) -> list[Tool]:
        session = self.server.request_context.session
        return self.router.list_tools(self.state_for(session))

    async def _call_tool(self, name: str, arguments: dict[str, Any]) -> CallToolResult:
        ctx = self.server.request_context
        headers: Mapping[str, str] | None = None
        if ctx.request is not None:
            headers = ctx.request.headers

        state = self.state_for(ctx.session)
        previous = state.current_domain
        result = await self.router.call_tool(name, arguments, state, headers)

        if state.current_domain != previous:
            await ctx.session.send_tool_list_changed()
        return result

    async def aclose(self) -> None:
        """Release the Xero clients."""
        await self.clients.aclose()


def create_server(
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> XeroMCPServer:
    """Build the MCP server for the given settings.

    Args:
        settings: Runtime settings.
        transport: Optional httpx transport for outbound Xero calls.

    Returns:
        Configured XeroMCPServer.
    """
    resolver = CredentialResolver(settings.auth_mode, settings.credentials)
    clients = ClientManager(resolver, base_url=settings.api_base_url, transport=transport)
    return XeroMCPServer(ToolRouter(clients))


async def run_stdio(app: XeroMCPServer) -> None:
    """Serve a single MCP session over stdin/stdout."""
    try:
        async with stdio_server() as (read_stream, write_stream):
            logger.info("Xero MCP server running on stdio")
            await app.server.run(
                read_stream,
                write_stream,
                app.server.create_initialization_options(),
            )
    finally:
        await app.aclose()
        logger.info("Xero MCP server stopped")
