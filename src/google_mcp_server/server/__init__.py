"""MCP server implementation for Google Workspace.

Provides 65 tools across seven Google services:

Drive Tools (16):
- Search, list and read files (Google formats are exported)
- Create, update, copy and move files and folders
- Trash, untrash and delete
- Sharing and permissions
- Storage quota

Calendar Tools (15):
- List, search, create, update and delete events
- Quick add, move and recurring instances
- Free/busy queries
- Create, update, clear and delete calendars

Docs Tools (7) and Slides Tools (6):
- Create and read documents and presentations
- Insert text, tables, images and slides
- Find & replace and raw batch updates

Sheets Tools (6), Contacts Tools (6), Tasks Tools (9):
- Read, write, append and clear ranges
- Contact CRUD and groups
- Task lists and tasks

Transport: Stdio
Authentication: OAuth 2.0 with automatic token refresh
"""

from google_mcp_server.config import Settings
from google_mcp_server.server.google_mcp_server import GoogleMcpServer, main


def create_server(settings: Settings | None = None) -> GoogleMcpServer:
    """Create and configure a Google Workspace MCP server.

    Args:
        settings: Runtime settings. Read from the environment if not given.

    Returns:
        GoogleMcpServer: Configured server instance ready to run.

    Raises:
        ConfigurationError: If the OAuth client ID or secret is missing.

    Example:
        >>> server = create_server()
        >>> asyncio.run(server.run())
    """
    return GoogleMcpServer(settings or Settings.from_env())


__all__ = ["create_server", "GoogleMcpServer", "main"]
