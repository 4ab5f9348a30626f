"""Server configuration loaded from environment variables.

Values are read from the process environment, after loading a .env file
from the working directory if one exists.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from dotenv import load_dotenv

from xero_mcp.client import XERO_API_BASE
from xero_mcp.models import AuthMode, Credentials, Transport


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the Xero MCP server.

    Args:
        transport: MCP transport (MCP_TRANSPORT: 'stdio' or 'http').
        host: HTTP listen host (MCP_HTTP_HOST).
        port: HTTP listen port (MCP_HTTP_PORT).
        auth_mode: Credential mode (AUTH_MODE: 'env' or 'gateway').
        credentials: Env-mode credentials (XERO_ACCESS_TOKEN, XERO_TENANT_ID).
        api_base_url: Xero API base URL (XERO_API_BASE_URL).
        log_level: Root log level (LOG_LEVEL).
    """

    transport: Transport = Transport.STDIO
    host: str = "0.0.0.0"
    port: int = 8080
    auth_mode: AuthMode = AuthMode.ENV
    credentials: Credentials = field(default_factory=Credentials)
    api_base_url: str = XERO_API_BASE
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.auth_mode is AuthMode.GATEWAY and self.transport is not Transport.HTTP:
            raise ValueError(
                "AUTH_MODE=gateway requires MCP_TRANSPORT=http "
                "(credentials are read from HTTP request headers)"
            )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from. Defaults to os.environ after
                loading .env.

        Returns:
            Settings instance.

        Raises:
            ValueError: If a variable holds an unsupported value.
        """
        if environ is None:
            load_dotenv()
            environ = os.environ

        transport = environ.get("MCP_TRANSPORT", "stdio").strip().lower()
        if transport not in {t.value for t in Transport}:
            raise ValueError(f"Unsupported MCP_TRANSPORT: {transport}. Use 'stdio' or 'http'.")

        auth_mode = environ.get("AUTH_MODE", "env").strip().lower()
        if auth_mode not in {m.value for m in AuthMode}:
            raise ValueError(f"Unsupported AUTH_MODE: {auth_mode}. Use 'env' or 'gateway'.")

        port = environ.get("MCP_HTTP_PORT", "8080")
        try:
            port_number = int(port)
        except ValueError:
            raise ValueError(f"MCP_HTTP_PORT must be an integer, got: {port}") from None

        return cls(
            transport=Transport(transport),
            host=environ.get("MCP_HTTP_HOST", "0.0.0.0"),
            port=port_number,
            auth_mode=AuthMode(auth_mode),
            credentials=Credentials(
                access_token=environ.get("XERO_ACCESS_TOKEN") or None,
                tenant_id=environ.get("XERO_TENANT_ID") or None,
            ),
            api_base_url=environ.get("XERO_API_BASE_URL", XERO_API_BASE),
            log_level=environ.get("LOG_LEVEL", "INFO").upper(),
        )
