"""Google MCP Server.

Expose Google Drive, Docs, Slides, Sheets, Calendar, Contacts and Tasks
to MCP clients as individually named tools over stdio.
"""

from google_mcp_server.__version__ import __version__

__all__ = ["__version__"]
