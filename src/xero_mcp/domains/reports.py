"""Reports domain tools: profit & loss, balance sheet and aged reports."""

from typing import Any

from mcp.types import Tool

from xero_mcp.client import XeroClient
from xero_mcp.exceptions import UnknownToolError


def _dated_report_tool(name: str, description: str) -> Tool:
    """Build a report tool that takes a single report date."""
    return Tool(
        name=name,
        description=description,
        inputSchema={
            "type": "object",
            "properties": {
                "date": {
                    "type": "string",
                    "description": "Report date in YYYY-MM-DD format (required)",
                },
            },
            "required": ["date"],
        },
    )


TOOLS: list[Tool] = [
    Tool(
        name="xero_reports_profit_and_loss",
        description="Get a Profit and Loss (income statement) report for a date range.",
        inputSchema={
            "type": "object",
            "properties": {
                "fromDate": {
                    "type": "string",
                    "description": "Start date in YYYY-MM-DD format (required)",
                },
                "toDate": {
                    "type": "string",
                    "description": "End date in YYYY-MM-DD format (required)",
                },
            },
            "required": ["fromDate", "toDate"],
        },
    ),
    _dated_report_tool(
        "xero_reports_balance_sheet",
        "Get a Balance Sheet report as of a specific date.",
    ),
    _dated_report_tool(
        "xero_reports_aged_receivables",
        "Get an Aged Receivables report showing outstanding customer invoices by age.",
    ),
    _dated_report_tool(
        "xero_reports_aged_payables",
        "Get an Aged Payables report showing outstanding supplier bills by age.",
    ),
]

# Report endpoints that take a single date parameter
_DATED_REPORTS = {
    "xero_reports_balance_sheet": "Reports/BalanceSheet",
    "xero_reports_aged_receivables": "Reports/AgedReceivablesByContact",
    "xero_reports_aged_payables": "Reports/AgedPayablesByContact",
}


async def handle(name: str, arguments: dict[str, Any], client: XeroClient) -> Any:
    """Handle a reports domain tool call."""
    if name == "xero_reports_profit_and_loss":
        return await client.get(
            "Reports/ProfitAndLoss",
            {"fromDate": arguments["fromDate"], "toDate": arguments["toDate"]},
        )

    if name in _DATED_REPORTS:
        return await client.get(_DATED_REPORTS[name], {"date": arguments["date"]})

    raise UnknownToolError(name)
