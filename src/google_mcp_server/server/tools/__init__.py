"""Tool groups exposed by the server, one module per Google service."""

from google_mcp_server.server.google_api import GoogleClients
from google_mcp_server.server.registry import ToolRegistry
from google_mcp_server.server.tools.calendar import register_calendar_tools
from google_mcp_server.server.tools.contacts import register_contacts_tools
from google_mcp_server.server.tools.docs import register_docs_tools
from google_mcp_server.server.tools.drive import register_drive_tools
from google_mcp_server.server.tools.sheets import register_sheets_tools
from google_mcp_server.server.tools.slides import register_slides_tools
from google_mcp_server.server.tools.tasks import register_tasks_tools

TOOL_GROUPS = (
    register_drive_tools,
    register_calendar_tools,
    register_docs_tools,
    register_slides_tools,
    register_sheets_tools,
    register_contacts_tools,
    register_tasks_tools,
)


def register_all_tools(registry: ToolRegistry, google: GoogleClients) -> None:
    """Register every tool group, in catalog order."""
    for register in TOOL_GROUPS:
        register(registry, google)


__all__ = [
    "TOOL_GROUPS",
    "register_all_tools",
    "register_calendar_tools",
    "register_contacts_tools",
    "register_docs_tools",
    "register_drive_tools",
    "register_sheets_tools",
    "register_slides_tools",
    "register_tasks_tools",
]
