"""Contacts domain tools: customers and suppliers."""

from typing import Any

from mcp.types import Tool

from xero_mcp.client import XeroClient, quote_where_value
from xero_mcp.exceptions import UnknownToolError

TOOLS: list[Tool] = [
    Tool(
        name="xero_contacts_list",
        description=(
            "List contacts in Xero with pagination. Optionally filter using a where "
            "clause. Returns contact details including name, email, and addresses."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "page": {
                    "type": "number",
                    "description": "Page number (1-based, default: 1). Each page returns up to 100 contacts.",
                },
                "where": {
                    "type": "string",
                    "description": "Optional Xero where clause filter (e.g., 'ContactStatus==\"ACTIVE\"')",
                },
                "allPages": {
                    "type": "boolean",
                    "description": "Fetch every page and return all matching contacts (ignores page)",
                },
            },
        },
    ),
    Tool(
        name="xero_contacts_get",
        description=(
            "Get detailed information about a specific contact by its ID. Returns full "
            "contact profile including addresses, phone numbers, and email."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "contactId": {
                    "type": "string",
                    "description": "The unique contact ID (UUID)",
                },
            },
            "required": ["contactId"],
        },
    ),
    Tool(
        name="xero_contacts_create",
        description="Create a new contact in Xero. Name is required; other fields are optional.",
        inputSchema={
            "type": "object",
            "properties": {
                "Name": {"type": "string", "description": "Contact name (required)"},
                "EmailAddress": {"type": "string", "description": "Contact email address"},
                "FirstName": {"type": "string", "description": "Contact first name"},
                "LastName": {"type": "string", "description": "Contact last name"},
                "Phone": {"type": "string", "description": "Contact phone number"},
                "AccountNumber": {
                    "type": "string",
                    "description": "Account number for the contact",
                },
                "TaxNumber": {
                    "type": "string",
                    "description": "Tax number (ABN in Australia, GST in NZ, VAT in UK)",
                },
                "IsCustomer": {
                    "type": "boolean",
                    "description": "Whether the contact is a customer",
                },
                "IsSupplier": {
                    "type": "boolean",
                    "description": "Whether the contact is a supplier",
                },
            },
            "required": ["Name"],
        },
    ),
    Tool(
        name="xero_contacts_search",
        description="Search contacts by name. Returns contacts whose name contains the search term.",
        inputSchema={
            "type": "object",
            "properties": {
                "term": {
                    "type": "string",
                    "description": "Search term to match against contact names",
                },
            },
            "required": ["term"],
        },
    ),
]

# Optional string fields copied verbatim into the contact payload
_CONTACT_FIELDS = ("EmailAddress", "FirstName", "LastName", "AccountNumber", "TaxNumber")


async def handle(name: str, arguments: dict[str, Any], client: XeroClient) -> Any:
    """Handle a contacts domain tool call.

    Args:
        name: Tool name.
        arguments: Tool arguments.
        client: Xero client for this call.

    Returns:
        Decoded Xero response.

    Raises:
        UnknownToolError: If the name is not a contacts tool.
    """
    if name == "xero_contacts_list":
        params: dict[str, Any] = {}
        if arguments.get("where"):
            params["where"] = arguments["where"]
        if arguments.get("allPages"):
            contacts = await client.get_all_pages("Contacts", params, "Contacts")
            return {"Contacts": contacts}
        if arguments.get("page") is not None:
            params["page"] = int(arguments["page"])
        return await client.get("Contacts", params)

    elif name == "xero_contacts_get":
        return await client.get(f"Contacts/{arguments['contactId']}")

    elif name == "xero_contacts_create":
        contact: dict[str, Any] = {"Name": arguments["Name"]}
        for key in _CONTACT_FIELDS:
            if arguments.get(key):
                contact[key] = arguments[key]
        if arguments.get("Phone"):
            contact["Phones"] = [{"PhoneType": "DEFAULT", "PhoneNumber": arguments["Phone"]}]
        for key in ("IsCustomer", "IsSupplier"):
            if arguments.get(key) is not None:
                contact[key] = arguments[key]
        return await client.post("Contacts", {"Contacts": [contact]})

    elif name == "xero_contacts_search":
        term = quote_where_value(arguments["term"])
        return await client.get("Contacts", {"where": f'Name.Contains("{term}")'})

    raise UnknownToolError(name)
