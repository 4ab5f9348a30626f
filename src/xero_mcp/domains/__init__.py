"""Domain toolsets for the Xero MCP server.

Each domain module defines its static tool descriptors (TOOLS) and an async
handle() function. DOMAINS maps every Domain to exactly one toolset; adding a
domain means adding a Domain member and registering its toolset here.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from mcp.types import Tool

from xero_mcp.client import XeroClient
from xero_mcp.domains import accounts, contacts, invoices, payments, reports
from xero_mcp.models import Domain

DomainHandler = Callable[[str, dict[str, Any], XeroClient], Awaitable[Any]]


@dataclass(frozen=True)
class DomainToolset:
    """Tools and handler for one domain.

    Args:
        domain: The domain these tools belong to.
        description: Summary shown in the navigation tool's domain enum.
        tools: Static tool descriptors, all prefixed with the domain's tool prefix.
        handler: Coroutine function executing a tool call.
    """

    domain: Domain
    description: str
    tools: tuple[Tool, ...]
    handler: DomainHandler

    @property
    def tool_names(self) -> list[str]:
        """Names of the tools in this domain."""
        return [tool.name for tool in self.tools]

    def get_tool(self, name: str) -> Tool | None:
        """Look up a tool descriptor by name."""
        return next((tool for tool in self.tools if tool.name == name), None)


DOMAINS: dict[Domain, DomainToolset] = {
    Domain.CONTACTS: DomainToolset(
        domain=Domain.CONTACTS,
        description="Contact management - list, get, create, and search contacts (customers and suppliers)",
        tools=tuple(contacts.TOOLS),
        handler=contacts.handle,
    ),
    Domain.INVOICES: DomainToolset(
        domain=Domain.INVOICES,
        description="Invoice management - list, get, create invoices and update their status",
        tools=tuple(invoices.TOOLS),
        handler=invoices.handle,
    ),
    Domain.PAYMENTS: DomainToolset(
        domain=Domain.PAYMENTS,
        description="Payment management - list, get, and create payments against invoices",
        tools=tuple(payments.TOOLS),
        handler=payments.handle,
    ),
    Domain.ACCOUNTS: DomainToolset(
        domain=Domain.ACCOUNTS,
        description="Chart of accounts - list and view account details by type and class",
        tools=tuple(accounts.TOOLS),
        handler=accounts.handle,
    ),
    Domain.REPORTS: DomainToolset(
        domain=Domain.REPORTS,
        description="Financial reports - profit & loss, balance sheet, aged receivables, and aged payables",
        tools=tuple(reports.TOOLS),
        handler=reports.handle,
    ),
}


def _check_registry() -> None:
    """Ensure every Domain has one toolset whose tools carry its prefix."""
    missing = set(Domain) - set(DOMAINS)
    if missing:
        raise RuntimeError(
            f"No toolset registered for domain(s): {', '.join(sorted(d.value for d in missing))}"
        )
    for domain, toolset in DOMAINS.items():
        if toolset.domain is not domain:
            raise RuntimeError(f"Toolset for {domain.value} is registered as {toolset.domain.value}")
        for name in toolset.tool_names:
            if not name.startswith(domain.tool_prefix):
                raise RuntimeError(f"Tool {name} lacks the {domain.tool_prefix} prefix")


_check_registry()

__all__ = ["DOMAINS", "DomainHandler", "DomainToolset"]
