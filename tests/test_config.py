"""Tests for environment-based settings."""

import pytest

from xero_mcp.client import XERO_API_BASE
from xero_mcp.config import Settings
from xero_mcp.models import AuthMode, Credentials, Transport


class TestSettingsFromEnv:
    """Test cases for Settings.from_env."""

    def test_defaults(self):
        settings = Settings.from_env({})

        assert settings.transport is Transport.STDIO
        assert settings.host == "0.0.0.0"
        assert settings.port == 8080
        assert settings.auth_mode is AuthMode.ENV
        assert settings.credentials == Credentials()
        assert settings.api_base_url == XERO_API_BASE
        assert settings.log_level == "INFO"

    def test_http_gateway(self):
        settings = Settings.from_env(
            {
                "MCP_TRANSPORT": "http",
                "MCP_HTTP_HOST": "127.0.0.1",
                "MCP_HTTP_PORT": "9000",
                "AUTH_MODE": "gateway",
                "LOG_LEVEL": "debug",
            }
        )

        assert settings.transport is Transport.HTTP
        assert settings.host == "127.0.0.1"
        assert settings.port == 9000
        assert settings.auth_mode is AuthMode.GATEWAY
        assert settings.log_level == "DEBUG"

    def test_env_credentials(self):
        settings = Settings.from_env({"XERO_ACCESS_TOKEN": "tok", "XERO_TENANT_ID": "ten"})
        assert settings.credentials == Credentials(access_token="tok", tenant_id="ten")

    def test_empty_credentials_are_unset(self):
        settings = Settings.from_env({"XERO_ACCESS_TOKEN": "", "XERO_TENANT_ID": ""})
        assert not settings.credentials.is_complete

    @pytest.mark.parametrize(
        "environ,match",
        [
            ({"MCP_TRANSPORT": "sse"}, "MCP_TRANSPORT"),
            ({"AUTH_MODE": "oauth"}, "AUTH_MODE"),
            ({"MCP_HTTP_PORT": "eighty"}, "MCP_HTTP_PORT"),
            ({"AUTH_MODE": "gateway"}, "requires MCP_TRANSPORT=http"),
        ],
    )
    def test_invalid_values(self, environ, match):
        with pytest.raises(ValueError, match=match):
            Settings.from_env(environ)
