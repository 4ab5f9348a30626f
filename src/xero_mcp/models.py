"""Data models for the Xero MCP server.

This module contains the enums and dataclasses shared across the server:
Domain, AuthMode, Transport, Credentials and NavigationState.
"""

from dataclasses import dataclass, field
from enum import Enum


class Domain(str, Enum):
    """Functional areas of Xero that gate which tools are visible."""

    CONTACTS = "contacts"
    INVOICES = "invoices"
    PAYMENTS = "payments"
    ACCOUNTS = "accounts"
    REPORTS = "reports"

    @property
    def tool_prefix(self) -> str:
        """Prefix shared by every tool name in this domain."""
        return f"xero_{self.value}_"


class AuthMode(str, Enum):
    """How Xero credentials reach the client.

    ENV reads a single credential pair from the environment at startup.
    GATEWAY takes a credential pair from the headers of every HTTP request.
    """

    ENV = "env"
    GATEWAY = "gateway"


class Transport(str, Enum):
    """MCP transport the server listens on."""

    STDIO = "stdio"
    HTTP = "http"


@dataclass(frozen=True)
class Credentials:
    """Bearer token and tenant ID for one Xero organisation.

    Args:
        access_token: OAuth2 access token obtained outside this server.
        tenant_id: Xero tenant (organisation) ID sent as xero-tenant-id.
    """

    access_token: str | None = field(default=None, repr=False)
    tenant_id: str | None = None

    @property
    def is_complete(self) -> bool:
        """Whether both the token and the tenant ID are present."""
        return bool(self.access_token) and bool(self.tenant_id)


@dataclass
class NavigationState:
    """Currently selected domain for one MCP session.

    Args:
        current_domain: Selected domain, or None when at the domain selection root.
    """

    current_domain: Domain | None = None

    @property
    def at_root(self) -> bool:
        """Whether no domain is selected."""
        return self.current_domain is None
