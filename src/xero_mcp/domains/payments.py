"""Payments domain tools: payments recorded against invoices."""

from typing import Any

from mcp.types import Tool

from xero_mcp.client import XeroClient, quote_where_value
from xero_mcp.exceptions import UnknownToolError

TOOLS: list[Tool] = [
    Tool(
        name="xero_payments_list",
        description="List payments in Xero with pagination. Optionally filter by status.",
        inputSchema={
            "type": "object",
            "properties": {
                "page": {
                    "type": "number",
                    "description": "Page number (1-based, default: 1). Each page returns up to 100 payments.",
                },
                "Status": {
                    "type": "string",
                    "enum": ["AUTHORISED", "DELETED"],
                    "description": "Filter by payment status",
                },
                "allPages": {
                    "type": "boolean",
                    "description": "Fetch every page and return all matching payments (ignores page)",
                },
            },
        },
    ),
    Tool(
        name="xero_payments_get",
        description="Get detailed information about a specific payment by its ID.",
        inputSchema={
            "type": "object",
            "properties": {
                "paymentId": {
                    "type": "string",
                    "description": "The unique payment ID (UUID)",
                },
            },
            "required": ["paymentId"],
        },
    ),
    Tool(
        name="xero_payments_create",
        description="Create a new payment in Xero. Records a payment against an invoice.",
        inputSchema={
            "type": "object",
            "properties": {
                "InvoiceID": {
                    "type": "string",
                    "description": "The invoice ID to apply the payment to (required)",
                },
                "AccountID": {
                    "type": "string",
                    "description": "The bank account ID the payment is made from/to (required)",
                },
                "Amount": {"type": "number", "description": "Payment amount (required)"},
                "Date": {
                    "type": "string",
                    "description": "Payment date in YYYY-MM-DD format (required)",
                },
                "Reference": {"type": "string", "description": "Payment reference"},
            },
            "required": ["InvoiceID", "AccountID", "Amount", "Date"],
        },
    ),
]


async def handle(name: str, arguments: dict[str, Any], client: XeroClient) -> Any:
    """Handle a payments domain tool call."""
    if name == "xero_payments_list":
        params: dict[str, Any] = {}
        if arguments.get("Status"):
            params["where"] = f'Status=="{quote_where_value(arguments["Status"])}"'
        if arguments.get("allPages"):
            payments = await client.get_all_pages("Payments", params, "Payments")
            return {"Payments": payments}
        if arguments.get("page") is not None:
            params["page"] = int(arguments["page"])
        return await client.get("Payments", params)

    elif name == "xero_payments_get":
        return await client.get(f"Payments/{arguments['paymentId']}")

    elif name == "xero_payments_create":
        payment: dict[str, Any] = {
            "Invoice": {"InvoiceID": arguments["InvoiceID"]},
            "Account": {"AccountID": arguments["AccountID"]},
            "Amount": arguments["Amount"],
            "Date": arguments["Date"],
        }
        if arguments.get("Reference"):
            payment["Reference"] = arguments["Reference"]
        return await client.post("Payments", {"Payments": [payment]})

    raise UnknownToolError(name)
