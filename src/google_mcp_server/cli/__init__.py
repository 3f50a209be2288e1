"""Command-line interface for google-mcp-server."""

from google_mcp_server.cli.main import main

__all__ = ["main"]
