"""Entry point for running the Xero MCP server.

Run with: uv run python -m xero_mcp
Or the console script: xero-mcp

MCP_TRANSPORT selects stdio (default) or http; AUTH_MODE selects env
(default) or gateway credentials.
"""

import asyncio
import logging
import sys

from xero_mcp.config import Settings
from xero_mcp.http_app import run_http
from xero_mcp.models import Transport
from xero_mcp.server import create_server, run_stdio

logger = logging.getLogger("xero_mcp")


def configure_logging(level: str) -> None:
    """Configure logging to stderr (not stdout - would corrupt MCP protocol)."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


async def serve(settings: Settings) -> None:
    """Run the server on the configured transport."""
    app = create_server(settings)
    if settings.transport is Transport.HTTP:
        await run_http(app, settings)
    else:
        await run_stdio(app)


def main() -> None:
    """Load settings and run the MCP server.

    Any exception escaping the server is fatal: it is logged and the
    process exits with status 1.
    """
    try:
        settings = Settings.from_env()
    except ValueError as e:
        configure_logging("INFO")
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    configure_logging(settings.log_level)

    try:
        asyncio.run(serve(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted")
    except Exception:
        logger.exception("Xero MCP server crashed with an unhandled exception")
        sys.exit(1)


if __name__ == "__main__":
    main()
