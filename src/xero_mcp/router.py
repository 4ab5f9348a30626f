"""Decision-tree tool router for the Xero MCP server.

Tools are exposed in two levels. At the root only xero_navigate is listed.
After navigating to a domain, xero_back and that domain's tools are listed,
and nothing from other domains. Navigation state lives in a NavigationState
owned by the caller (one per MCP session).

Every tool call returns a CallToolResult; errors are reported as results
with isError set and never raised to the transport.
"""

import json
import logging
from collections.abc import Mapping
from typing import Any

from mcp.types import CallToolResult, TextContent, Tool

from xero_mcp.credentials import ClientManager
from xero_mcp.domains import DOMAINS, DomainToolset
from xero_mcp.exceptions import ToolInputError, UnknownToolError, XeroError
from xero_mcp.models import Domain, NavigationState

logger = logging.getLogger(__name__)

NAVIGATE_TOOL_NAME = "xero_navigate"
BACK_TOOL_NAME = "xero_back"

_DOMAIN_LIST = ", ".join(d.value for d in Domain)

NAVIGATE_TOOL = Tool(
    name=NAVIGATE_TOOL_NAME,
    description=(
        "Navigate to a specific domain in Xero. Call this first to select which area "
        "you want to work with. After navigation, domain-specific tools will be available."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "domain": {
                "type": "string",
                "enum": [d.value for d in Domain],
                "description": "The domain to navigate to:\n"
                + "\n".join(f"- {d.value}: {DOMAINS[d].description}" for d in Domain),
            },
        },
        "required": ["domain"],
    },
)

BACK_TOOL = Tool(
    name=BACK_TOOL_NAME,
    description="Return to domain selection. Use this to switch to a different area of Xero.",
    inputSchema={"type": "object", "properties": {}},
)

BACK_MESSAGE = (
    f"Returned to domain selection. Use {NAVIGATE_TOOL_NAME} to select a domain: {_DOMAIN_LIST}"
)


def text_result(text: str, is_error: bool = False) -> CallToolResult:
    """Wrap text in a CallToolResult."""
    return CallToolResult(content=[TextContent(type="text", text=text)], isError=is_error)


def error_result(error: XeroError) -> CallToolResult:
    """Format a XeroError as an error-flagged result."""
    text = f"Error: {error.message}"
    if error.action:
        text += f"\nAction: {error.action}"
    return text_result(text, is_error=True)


def missing_arguments(tool: Tool, arguments: Mapping[str, Any]) -> list[str]:
    """List required arguments of a tool that are absent or None.

    Args:
        tool: Tool descriptor whose input schema lists the required fields.
        arguments: Arguments supplied by the caller.

    Returns:
        Names of missing required arguments, in schema order.
    """
    required = tool.inputSchema.get("required", [])
    return [key for key in required if arguments.get(key) is None]


def resolve_domain(name: str) -> Domain | None:
    """Find the domain whose tool prefix matches a tool name."""
    for domain in Domain:
        if name.startswith(domain.tool_prefix):
            return domain
    return None


class ToolRouter:
    """Lists and dispatches tools according to a session's navigation state."""

    def __init__(self, clients: ClientManager) -> None:
        """Initialize the router.

        Args:
            clients: Manager providing Xero clients to domain handlers.
        """
        self.clients = clients

    def list_tools(self, state: NavigationState) -> list[Tool]:
        """Return the tools visible in the given navigation state.

        Args:
            state: Navigation state of the calling session.

        Returns:
            [xero_navigate] at the root, otherwise xero_back followed by
            the current domain's tools.
        """
        if state.current_domain is None:
            return [NAVIGATE_TOOL]
        return [BACK_TOOL, *DOMAINS[state.current_domain].tools]

    def navigate(self, state: NavigationState, domain: Any) -> CallToolResult:
        """Select a domain.

        Args:
            state: Navigation state to update.
            domain: Requested domain name.

        Returns:
            Confirmation listing the domain's tools.

        Raises:
            ToolInputError: If the domain is not recognized; state is unchanged.
        """
        try:
            selected = Domain(domain)
        except ValueError:
            raise ToolInputError(f"Invalid domain: {domain}. Valid domains: {_DOMAIN_LIST}") from None

        state.current_domain = selected
        logger.info(f"Navigated to {selected.value} domain")

        tool_names = ", ".join(DOMAINS[selected].tool_names)
        return text_result(f"Navigated to {selected.value} domain. Available tools: {tool_names}")

    def back(self, state: NavigationState) -> CallToolResult:
        """Return to the domain selection root."""
        state.current_domain = None
        logger.info("Returned to domain selection")
        return text_result(BACK_MESSAGE)

    async def call_tool(
        self,
        name: str,
        arguments: Mapping[str, Any] | None,
        state: NavigationState,
        headers: Mapping[str, str] | None = None,
    ) -> CallToolResult:
        """Dispatch a tool call.

        Args:
            name: Tool name.
            arguments: Tool arguments (may be None).
            state: Navigation state of the calling session.
            headers: Headers of the HTTP request carrying the call, used to
                resolve gateway-mode credentials.

        Returns:
            CallToolResult with the JSON-encoded response, or an
            error-flagged result.
        """
        arguments = dict(arguments or {})

        try:
            if name == NAVIGATE_TOOL_NAME:
                if arguments.get("domain") is None:
                    raise ToolInputError("Missing required argument(s): domain")
                return self.navigate(state, arguments["domain"])

            if name == BACK_TOOL_NAME:
                return self.back(state)

            domain = resolve_domain(name)
            if domain is None:
                raise UnknownToolError(name)

            return await self._dispatch(DOMAINS[domain], name, arguments, headers)

        except XeroError as e:
            logger.error(f"Error calling {name}: {e.message}")
            return error_result(e)
        except (ValueError, TypeError, KeyError) as e:
            logger.error(f"Invalid input for {name}: {e}")
            return error_result(ToolInputError(f"Invalid input: {e}"))
        except Exception as e:
            logger.exception(f"Unexpected error calling {name}")
            return text_result(f"Error: {e}", is_error=True)

    async def _dispatch(
        self,
        toolset: DomainToolset,
        name: str,
        arguments: dict[str, Any],
        headers: Mapping[str, str] | None,
    ) -> CallToolResult:
        """Validate arguments and run a domain handler."""
        tool = toolset.get_tool(name)
        if tool is None:
            raise UnknownToolError(name)

        missing = missing_arguments(tool, arguments)
        if missing:
            raise ToolInputError(f"Missing required argument(s): {', '.join(missing)}")

        async with self.clients.client_for(headers) as client:
            response = await toolset.handler(name, arguments, client)

        return text_result(json.dumps(response, indent=2))
