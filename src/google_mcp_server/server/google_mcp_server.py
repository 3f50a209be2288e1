"""Google Workspace MCP server.

Exposes Drive, Docs, Slides, Sheets, Calendar, Contacts and Tasks as
individually named tools over the stdio transport. All tools share one
set of OAuth credentials, refreshed automatically and written back to
the token cache.
"""

import asyncio
import logging
from typing import Any

import httpx
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, Tool

from google_mcp_server.__version__ import __version__
from google_mcp_server.auth import CredentialManager
from google_mcp_server.config import Settings
from google_mcp_server.server.google_api import GoogleClients
from google_mcp_server.server.registry import ToolRegistry
from google_mcp_server.server.tools import register_all_tools

logger = logging.getLogger(__name__)

SERVER_NAME = "google-mcp-server"


class GoogleMcpServer:
    """MCP server for Google Workspace APIs.

    Attributes:
        server: Low-level MCP Server instance.
        settings: Runtime settings.
        credential_manager: Owner of the shared OAuth credentials.
        google: Versioned Google API clients.
        registry: All registered tools.
    """

    def __init__(
        self,
        settings: Settings,
        credential_manager: CredentialManager | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the server and register every tool group.

        No network access happens here; credentials are loaded on the
        first tool call.
        """
        self.settings = settings
        self.credential_manager = credential_manager or CredentialManager(settings)
        self.google = GoogleClients(self.credential_manager, http_client=http_client)
        self.registry = ToolRegistry()
        register_all_tools(self.registry, self.google)

        self.server: Server = Server(SERVER_NAME, version=__version__)
        self._setup_handlers()

    def _setup_handlers(self) -> None:
        """Register MCP tool handlers."""

        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            """Return available Google Workspace tools."""
            return self.registry.list_tools()

        # Arguments are validated by the tool's pydantic model
        @self.server.call_tool(validate_input=False)
        async def call_tool(name: str, arguments: dict[str, Any]) -> CallToolResult:
            """Handle tool calls."""
            return await self.registry.call(name, arguments)

    async def close(self) -> None:
        """Close the shared HTTP client and release resources."""
        await self.google.close()

    async def run(self) -> None:
        """Run the MCP server using stdio transport."""
        logger.info(f"Starting {SERVER_NAME} with {len(self.registry)} tools")
        try:
            async with stdio_server() as (read_stream, write_stream):
                await self.server.run(
                    read_stream,
                    write_stream,
                    self.server.create_initialization_options(),
                )
        finally:
            await self.close()


def main() -> None:
    """Entry point for the Google Workspace MCP server."""
    server = GoogleMcpServer(Settings.from_env())
    asyncio.run(server.run())


if __name__ == "__main__":
    main()
