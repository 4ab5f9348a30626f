"""Xero Accounting API client.

This module provides the XeroClient class for making authenticated requests
to the Xero REST API. It does not handle OAuth flows: it expects a
pre-authenticated access token and tenant ID.

Base URL: https://api.xero.com/api.xro/2.0
Rate Limit: 60 requests/minute, 5000/day
"""

import logging
from typing import Any

import httpx

from xero_mcp.exceptions import AuthenticationError, NetworkError, XeroAPIError
from xero_mcp.models import Credentials

logger = logging.getLogger(__name__)

XERO_API_BASE = "https://api.xero.com/api.xro/2.0"


def quote_where_value(value: str) -> str:
    """Escape a string value for use inside a Xero where clause.

    Xero where clauses wrap string literals in double quotes, so embedded
    backslashes and double quotes must be escaped.

    Args:
        value: The string value to escape.

    Returns:
        Escaped string safe to place between double quotes.

    Raises:
        ValueError: If the value is not a string.
    """
    if not isinstance(value, str):
        raise ValueError("Where clause value must be a string")

    return value.replace("\\", "\\\\").replace('"', '\\"')


class XeroClient:
    """Async HTTP client for the Xero Accounting API.

    This client handles:
    - Bearer token and xero-tenant-id headers on every request
    - Mapping non-success responses to XeroAPIError
    - 1-based page number pagination (100 records per page)
    - Request timeout (30 seconds)
    """

    TIMEOUT = 30.0  # seconds
    PAGE_SIZE = 100

    def __init__(
        self,
        credentials: Credentials,
        base_url: str = XERO_API_BASE,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the Xero client.

        Args:
            credentials: Access token and tenant ID used for every request.
            base_url: Xero API base URL.
            transport: Optional httpx transport (e.g. httpx.MockTransport in tests).

        Raises:
            AuthenticationError: If the token or tenant ID is missing.
        """
        if not credentials.is_complete:
            raise AuthenticationError()

        self.credentials = credentials
        self.base_url = base_url.rstrip("/")
        self._transport = transport
        self._http_client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client.

        Returns:
            Configured AsyncClient instance.
        """
        if self._http_client is None or self._http_client.is_closed:
            self._http_client = httpx.AsyncClient(
                timeout=self.TIMEOUT,
                limits=httpx.Limits(max_keepalive_connections=5),
                transport=self._transport,
            )
        return self._http_client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: Any = None,
    ) -> Any:
        """Make an authenticated request to the Xero API.

        Args:
            method: HTTP method (GET, POST, etc.).
            path: Path relative to the base URL (e.g., "Invoices").
            params: Optional query parameters.
            body: Optional JSON request body.

        Returns:
            Decoded JSON response, or None for 204 No Content.

        Raises:
            XeroAPIError: On non-success status codes.
            NetworkError: On connection errors or timeouts.
        """
        client = await self._get_client()
        url = f"{self.base_url}/{path}"

        headers = {
            "Authorization": f"Bearer {self.credentials.access_token}",
            "xero-tenant-id": self.credentials.tenant_id,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if params:
            params = {k: str(v) for k, v in params.items() if v is not None}

        try:
            response = await client.request(
                method,
                url,
                params=params or None,
                json=body,
                headers=headers,
            )
        except httpx.TimeoutException as e:
            raise NetworkError(f"Request timed out: {method} /{path}", e) from e
        except httpx.RequestError as e:
            raise NetworkError(f"Network connection failed: {method} /{path}", e) from e

        if not response.is_success:
            logger.warning(f"Xero API {method} /{path} returned {response.status_code}")
            raise XeroAPIError(method, path, response.status_code, response.text)

        # Handle 204 No Content
        if response.status_code == 204:
            return None

        return response.json()

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """GET request."""
        return await self._request("GET", path, params=params)

    async def post(self, path: str, body: Any) -> Any:
        """POST request."""
        return await self._request("POST", path, body=body)

    async def put(self, path: str, body: Any) -> Any:
        """PUT request."""
        return await self._request("PUT", path, body=body)

    async def delete(self, path: str) -> Any:
        """DELETE request."""
        return await self._request("DELETE", path)

    async def get_all_pages(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        response_key: str | None = None,
    ) -> list[Any]:
        """Fetch all records from a paginated endpoint.

        Xero uses 1-based page numbers and returns up to 100 items per page.
        Responses wrap the records in a key matching the resource name
        (e.g. {"Invoices": [...]}). Xero reports no total count, so a page
        with fewer than PAGE_SIZE items is taken as the last one.

        Args:
            path: API path (e.g., "Contacts").
            params: Additional query parameters.
            response_key: Key holding the records. Defaults to the first
                list-valued field in the response.

        Returns:
            Combined records from all pages.
        """
        all_items: list[Any] = []
        page = 1

        while True:
            data = await self.get(path, {**(params or {}), "page": page})

            items: list[Any] | None = None
            if isinstance(data, dict):
                if response_key:
                    items = data.get(response_key)
                else:
                    items = next(
                        (v for v in data.values() if isinstance(v, list)), None
                    )

            if not items:
                break

            all_items.extend(items)

            # If we got fewer than PAGE_SIZE, we're done
            if len(items) < self.PAGE_SIZE:
                break

            page += 1

        logger.debug(f"Fetched {len(all_items)} records from {path} in {page} page(s)")
        return all_items
