"""Credential resolution and Xero client lifecycle.

In env mode a single credential pair is read from configuration and one
client is reused for the life of the process. In gateway mode every HTTP
request carries its own credential pair in headers; a fresh client is built
from those headers for each tool call and closed afterwards, so concurrent
requests for different tenants never share credentials.
"""

import logging
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager

import httpx

from xero_mcp.client import XERO_API_BASE, XeroClient
from xero_mcp.exceptions import AuthenticationError
from xero_mcp.models import AuthMode, Credentials

logger = logging.getLogger(__name__)

ACCESS_TOKEN_HEADER = "X-Xero-Access-Token"
TENANT_ID_HEADER = "X-Xero-Tenant-Id"
REQUIRED_HEADERS = [ACCESS_TOKEN_HEADER, TENANT_ID_HEADER]


def credentials_from_headers(headers: Mapping[str, str]) -> Credentials:
    """Read the gateway credential headers (case-insensitive).

    Args:
        headers: Request headers.

    Returns:
        Credentials, possibly incomplete if a header is missing.
    """
    lowered = {k.lower(): v for k, v in headers.items()}
    return Credentials(
        access_token=lowered.get(ACCESS_TOKEN_HEADER.lower()) or None,
        tenant_id=lowered.get(TENANT_ID_HEADER.lower()) or None,
    )


class CredentialResolver:
    """Supplies the credential pair for a request according to the auth mode."""

    def __init__(self, mode: AuthMode, env_credentials: Credentials | None = None) -> None:
        """Initialize the resolver.

        Args:
            mode: Credential mode selected at startup.
            env_credentials: Credentials from configuration (env mode only).
        """
        self.mode = mode
        self.env_credentials = env_credentials or Credentials()

    def resolve(self, headers: Mapping[str, str] | None = None) -> Credentials:
        """Resolve the credentials for the current request.

        Args:
            headers: Headers of the HTTP request carrying the tool call.
                Ignored in env mode.

        Returns:
            Complete Credentials.

        Raises:
            AuthenticationError: If the token or tenant ID is missing.
        """
        if self.mode is AuthMode.ENV:
            if not self.env_credentials.is_complete:
                raise AuthenticationError()
            return self.env_credentials

        credentials = credentials_from_headers(headers or {})
        if not credentials.is_complete:
            raise AuthenticationError(
                message=f"Gateway mode requires {ACCESS_TOKEN_HEADER} and {TENANT_ID_HEADER} headers",
                action="Send both credential headers with every request",
            )
        return credentials


class ClientManager:
    """Owns the XeroClient instances used by the tool router.

    The manager is created by the host and closed at shutdown. Callers
    obtain a client with client_for(), which either reuses the cached
    env-mode client or builds a per-request gateway-mode client.
    """

    def __init__(
        self,
        resolver: CredentialResolver,
        base_url: str = XERO_API_BASE,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client manager.

        Args:
            resolver: Credential resolver for the configured auth mode.
            base_url: Xero API base URL passed to every client.
            transport: Optional httpx transport passed to every client.
        """
        self.resolver = resolver
        self.base_url = base_url
        self.transport = transport
        self._client: XeroClient | None = None

    def build(self, credentials: Credentials) -> XeroClient:
        """Construct a new client for the given credentials."""
        return XeroClient(credentials, base_url=self.base_url, transport=self.transport)

    @asynccontextmanager
    async def client_for(
        self, headers: Mapping[str, str] | None = None
    ) -> AsyncIterator[XeroClient]:
        """Provide a client for one tool call.

        Args:
            headers: Headers of the HTTP request carrying the call (gateway mode).

        Yields:
            XeroClient bound to the resolved credentials.

        Raises:
            AuthenticationError: If credentials cannot be resolved.
        """
        if self.resolver.mode is AuthMode.ENV:
            if self._client is None:
                self._client = self.build(self.resolver.resolve())
                logger.info("Created Xero client from environment credentials")
            yield self._client
            return

        client = self.build(self.resolver.resolve(headers))
        try:
            yield client
        finally:
            await client.close()

    async def invalidate(self) -> None:
        """Tear down the cached client so the next call rebuilds it."""
        if self._client is not None:
            await self._client.close()
            self._client = None
            logger.debug("Xero client invalidated")

    async def aclose(self) -> None:
        """Release all resources held by the manager."""
        await self.invalidate()
