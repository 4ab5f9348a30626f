"""Xero MCP Server.

A Model Context Protocol server exposing the Xero Accounting API as a
decision tree of tools: navigate to a domain, then use that domain's tools.
"""

__version__ = "1.0.0"

from xero_mcp.server import XeroMCPServer, create_server

__all__ = ["XeroMCPServer", "create_server", "__version__"]
