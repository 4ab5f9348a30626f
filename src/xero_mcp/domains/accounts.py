"""Accounts domain tools: the chart of accounts."""

from typing import Any

from mcp.types import Tool

from xero_mcp.client import XeroClient, quote_where_value
from xero_mcp.exceptions import UnknownToolError

TOOLS: list[Tool] = [
    Tool(
        name="xero_accounts_list",
        description="List chart of accounts in Xero. Optionally filter by account type or class.",
        inputSchema={
            "type": "object",
            "properties": {
                "Type": {
                    "type": "string",
                    "description": (
                        'Filter by account type (e.g., "BANK", "REVENUE", "EXPENSE", '
                        '"CURRENT", "FIXED", "EQUITY", "CURRLIAB", "TERMLIAB", '
                        '"DIRECTCOSTS", "OVERHEADS", "DEPRECIATN", "OTHERINCOME", "SALES")'
                    ),
                },
                "Class": {
                    "type": "string",
                    "enum": ["ASSET", "EQUITY", "EXPENSE", "LIABILITY", "REVENUE"],
                    "description": "Filter by account class",
                },
            },
        },
    ),
    Tool(
        name="xero_accounts_get",
        description="Get detailed information about a specific account by its ID.",
        inputSchema={
            "type": "object",
            "properties": {
                "accountId": {
                    "type": "string",
                    "description": "The unique account ID (UUID)",
                },
            },
            "required": ["accountId"],
        },
    ),
]


async def handle(name: str, arguments: dict[str, Any], client: XeroClient) -> Any:
    """Handle an accounts domain tool call."""
    if name == "xero_accounts_list":
        params: dict[str, Any] = {}
        filters = [
            f'{key}=="{quote_where_value(arguments[key])}"'
            for key in ("Type", "Class")
            if arguments.get(key)
        ]
        if filters:
            params["where"] = " AND ".join(filters)
        return await client.get("Accounts", params)

    elif name == "xero_accounts_get":
        return await client.get(f"Accounts/{arguments['accountId']}")

    raise UnknownToolError(name)
