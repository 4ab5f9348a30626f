"""Invoices domain tools: sales invoices (ACCREC) and bills (ACCPAY)."""

from typing import Any

from mcp.types import Tool

from xero_mcp.client import XeroClient, quote_where_value
from xero_mcp.exceptions import ToolInputError, UnknownToolError

TOOLS: list[Tool] = [
    Tool(
        name="xero_invoices_list",
        description=(
            "List invoices in Xero with pagination. Optionally filter by status and "
            "type (ACCREC for sales, ACCPAY for bills)."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "page": {
                    "type": "number",
                    "description": "Page number (1-based, default: 1). Each page returns up to 100 invoices.",
                },
                "Status": {
                    "type": "string",
                    "enum": ["DRAFT", "SUBMITTED", "AUTHORISED", "PAID", "VOIDED", "DELETED"],
                    "description": "Filter by invoice status",
                },
                "Type": {
                    "type": "string",
                    "enum": ["ACCREC", "ACCPAY"],
                    "description": (
                        "Filter by invoice type: ACCREC (accounts receivable / sales "
                        "invoices) or ACCPAY (accounts payable / bills)"
                    ),
                },
                "allPages": {
                    "type": "boolean",
                    "description": "Fetch every page and return all matching invoices (ignores page)",
                },
            },
        },
    ),
    Tool(
        name="xero_invoices_get",
        description=(
            "Get detailed information about a specific invoice by its ID. Returns full "
            "invoice details including line items, amounts, and payment status."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "invoiceId": {
                    "type": "string",
                    "description": "The unique invoice ID (UUID)",
                },
            },
            "required": ["invoiceId"],
        },
    ),
    Tool(
        name="xero_invoices_create",
        description="Create a new invoice in Xero. Requires type, contact, and at least one line item.",
        inputSchema={
            "type": "object",
            "properties": {
                "Type": {
                    "type": "string",
                    "enum": ["ACCREC", "ACCPAY"],
                    "description": "Invoice type: ACCREC (sales invoice) or ACCPAY (bill) (required)",
                },
                "ContactID": {
                    "type": "string",
                    "description": "The contact ID to create the invoice for (required)",
                },
                "LineItems": {
                    "type": "array",
                    "description": (
                        "Array of line items (required). Each item needs Description, "
                        "Quantity, UnitAmount, and AccountCode."
                    ),
                    "items": {
                        "type": "object",
                        "properties": {
                            "Description": {"type": "string", "description": "Line item description"},
                            "Quantity": {"type": "number", "description": "Quantity"},
                            "UnitAmount": {"type": "number", "description": "Unit price"},
                            "AccountCode": {
                                "type": "string",
                                "description": "Account code for the line item",
                            },
                            "TaxType": {
                                "type": "string",
                                "description": "Tax type code (e.g., OUTPUT, INPUT, NONE)",
                            },
                        },
                        "required": ["Description", "Quantity", "UnitAmount", "AccountCode"],
                    },
                },
                "Date": {"type": "string", "description": "Invoice date in YYYY-MM-DD format"},
                "DueDate": {"type": "string", "description": "Due date in YYYY-MM-DD format"},
                "Reference": {"type": "string", "description": "Invoice reference/PO number"},
                "Status": {
                    "type": "string",
                    "enum": ["DRAFT", "SUBMITTED", "AUTHORISED"],
                    "description": "Initial invoice status (default: DRAFT)",
                },
            },
            "required": ["Type", "ContactID", "LineItems"],
        },
    ),
    Tool(
        name="xero_invoices_update_status",
        description=(
            "Update the status of an existing invoice. Can submit, authorise, or void an invoice."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "invoiceId": {
                    "type": "string",
                    "description": "The invoice ID to update (required)",
                },
                "Status": {
                    "type": "string",
                    "enum": ["SUBMITTED", "AUTHORISED", "VOIDED"],
                    "description": "New status for the invoice (required)",
                },
            },
            "required": ["invoiceId", "Status"],
        },
    ),
]


async def handle(name: str, arguments: dict[str, Any], client: XeroClient) -> Any:
    """Handle an invoices domain tool call.

    Args:
        name: Tool name.
        arguments: Tool arguments.
        client: Xero client for this call.

    Returns:
        Decoded Xero response.

    Raises:
        ToolInputError: If LineItems is not a non-empty list.
        UnknownToolError: If the name is not an invoices tool.
    """
    if name == "xero_invoices_list":
        params: dict[str, Any] = {}

        # Build where clause from filters
        filters = [
            f'{key}=="{quote_where_value(arguments[key])}"'
            for key in ("Status", "Type")
            if arguments.get(key)
        ]
        if filters:
            params["where"] = " AND ".join(filters)

        if arguments.get("allPages"):
            invoices = await client.get_all_pages("Invoices", params, "Invoices")
            return {"Invoices": invoices}
        if arguments.get("page") is not None:
            params["page"] = int(arguments["page"])
        return await client.get("Invoices", params)

    elif name == "xero_invoices_get":
        return await client.get(f"Invoices/{arguments['invoiceId']}")

    elif name == "xero_invoices_create":
        line_items = arguments["LineItems"]
        if not isinstance(line_items, list) or not line_items:
            raise ToolInputError("LineItems must be a non-empty array")

        invoice: dict[str, Any] = {
            "Type": arguments["Type"],
            "Contact": {"ContactID": arguments["ContactID"]},
            "LineItems": line_items,
        }
        for key in ("Date", "DueDate", "Reference", "Status"):
            if arguments.get(key):
                invoice[key] = arguments[key]
        return await client.post("Invoices", {"Invoices": [invoice]})

    elif name == "xero_invoices_update_status":
        invoice_id = arguments["invoiceId"]
        return await client.post(
            f"Invoices/{invoice_id}",
            {"InvoiceID": invoice_id, "Status": arguments["Status"]},
        )

    raise UnknownToolError(name)
