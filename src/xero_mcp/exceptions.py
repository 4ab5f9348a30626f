"""Custom exceptions for the Xero MCP server.

This module defines the exception hierarchy for handling error conditions
when dispatching tools and interacting with the Xero Accounting API.
"""


class XeroError(Exception):
    """Base exception for all Xero MCP errors.

    All custom exceptions in this module inherit from this class, allowing
    the tool router to catch them at its dispatch boundary.
    """

    def __init__(self, message: str, action: str | None = None) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message.
            action: Optional suggested action to resolve the error.
        """
        super().__init__(message)
        self.message = message
        self.action = action

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for structured error responses."""
        result = {"error": self.message}
        if self.action:
            result["action"] = self.action
        return result


class AuthenticationError(XeroError):
    """Raised when Xero credentials are missing.

    This error indicates that a request cannot be sent because either:
    - XERO_ACCESS_TOKEN or XERO_TENANT_ID is not set (env mode)
    - The X-Xero-Access-Token or X-Xero-Tenant-Id header is missing (gateway mode)
    """

    def __init__(
        self,
        message: str = "XERO_ACCESS_TOKEN and XERO_TENANT_ID are required",
        action: str = (
            "Set XERO_ACCESS_TOKEN and XERO_TENANT_ID, or run in gateway mode "
            "and send the X-Xero-Access-Token and X-Xero-Tenant-Id headers"
        ),
    ) -> None:
        """Initialize authentication error with default action."""
        super().__init__(message, action)


# Suggested actions for common Xero API status codes
STATUS_ACTIONS: dict[int, str] = {
    401: "The access token is invalid or expired; obtain a new token",
    403: "The token lacks the required scope or tenant access",
    404: "Check the resource ID; use a list tool to find valid IDs",
    429: "Xero rate limit reached (60 calls/minute); wait before retrying",
}


class XeroAPIError(XeroError):
    """Raised when the Xero API returns a non-success status code.

    Carries the request method, path, status code and raw response body
    so the failure can be diagnosed from the tool result alone.
    """

    def __init__(
        self,
        method: str,
        path: str,
        status_code: int,
        body: str,
    ) -> None:
        """Initialize API error.

        Args:
            method: HTTP method of the failed request.
            path: API path relative to the base URL (e.g., "Invoices").
            status_code: HTTP status code returned by Xero.
            body: Raw response body.
        """
        message = f"Xero API error {method} /{path} ({status_code}): {body}"
        super().__init__(message, STATUS_ACTIONS.get(status_code))
        self.method = method
        self.path = path
        self.status_code = status_code
        self.body = body

    def to_dict(self) -> dict[str, str | int]:
        """Convert to dictionary including the status code."""
        result = super().to_dict()
        result["status_code"] = self.status_code
        return result


class NetworkError(XeroError):
    """Raised when network connectivity issues occur.

    Wraps the underlying httpx timeout or connection error.
    """

    def __init__(
        self,
        message: str = "Network error occurred",
        original_error: Exception | None = None,
    ) -> None:
        """Initialize network error.

        Args:
            message: Error message.
            original_error: The underlying exception that caused this error.
        """
        action = "Check your network connection and try again"
        super().__init__(message, action)
        self.original_error = original_error


class ToolInputError(XeroError):
    """Raised when a tool is called with missing or invalid arguments."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "Check the tool's input schema and try again")


class UnknownToolError(XeroError):
    """Raised when a tool name does not match any navigation or domain tool."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"Unknown tool: {name}",
            "Use xero_navigate to select a domain first",
        )
        self.name = name
