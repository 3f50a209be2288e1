"""Integration tests for the MCP server wiring.

Covers the published tool catalog, the MCP request handlers, and an
end-to-end call that refreshes an expired token and writes it back to
the token cache.
"""

import json
from datetime import datetime
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest
from google.oauth2.credentials import Credentials
from mcp import types

from google_mcp_server.auth.credential_manager import CredentialManager
from google_mcp_server.auth.models import expiry_to_millis
from google_mcp_server.config import Settings
from google_mcp_server.server import GoogleMcpServer

EXPECTED_TOOLS = [
    # Drive
    "drive_search",
    "drive_read",
    "drive_list",
    "drive_file_info",
    "drive_create_folder",
    "drive_create_file",
    "drive_update_file",
    "drive_delete",
    "drive_trash",
    "drive_untrash",
    "drive_copy",
    "drive_move",
    "drive_share",
    "drive_list_permissions",
    "drive_remove_permission",
    "drive_about",
    # Calendar
    "calendar_list_events",
    "calendar_search_events",
    "calendar_create_event",
    "calendar_update_event",
    "calendar_delete_event",
    "calendar_list_calendars",
    "calendar_quick_add",
    "calendar_get_event",
    "calendar_move_event",
    "calendar_recurring_instances",
    "calendar_freebusy",
    "calendar_create_calendar",
    "calendar_update_calendar",
    "calendar_delete_calendar",
    "calendar_clear",
    # Docs
    "docs_create",
    "docs_read",
    "docs_insert_text",
    "docs_batch_update",
    "docs_insert_table",
    "docs_insert_image",
    "docs_find_replace",
    # Slides
    "slides_create",
    "slides_read",
    "slides_add_slide",
    "slides_insert_text",
    "slides_replace_all_text",
    "slides_batch_update",
    # Sheets
    "sheets_read",
    "sheets_write",
    "sheets_create",
    "sheets_append",
    "sheets_clear",
    "sheets_get_info",
    # Contacts
    "contacts_list",
    "contacts_get",
    "contacts_create",
    "contacts_update",
    "contacts_delete",
    "contacts_groups_list",
    # Tasks
    "tasks_list",
    "tasks_list_tasks",
    "tasks_create",
    "tasks_complete",
    "tasks_create_list",
    "tasks_delete_list",
    "tasks_update",
    "tasks_delete",
    "tasks_move",
]


@pytest.mark.integration
class TestToolCatalog:
    """Tests for the registered tool catalog."""

    def test_should_register_every_tool_in_order(self, server: GoogleMcpServer) -> None:
        assert [tool.name for tool in server.registry.list_tools()] == EXPECTED_TOOLS
        assert len(server.registry) == 65

    def test_every_tool_has_object_schema_and_description(self, server: GoogleMcpServer) -> None:
        for tool in server.registry.list_tools():
            assert tool.description, tool.name
            assert tool.inputSchema["type"] == "object", tool.name
            assert isinstance(tool.inputSchema["properties"], dict), tool.name

    def test_optional_identifiers_default_to_sentinels(self, server: GoogleMcpServer) -> None:
        schemas = {tool.name: tool.inputSchema for tool in server.registry.list_tools()}

        assert schemas["calendar_list_events"]["properties"]["calendarId"]["default"] == "primary"
        assert schemas["tasks_list_tasks"]["properties"]["taskListId"]["default"] == "@default"
        assert schemas["drive_list"]["properties"]["folderId"]["default"] == "root"
        assert "required" not in schemas["drive_list"]

    def test_required_parameters_use_camel_case(self, server: GoogleMcpServer) -> None:
        schemas = {tool.name: tool.inputSchema for tool in server.registry.list_tools()}

        assert schemas["drive_move"]["required"] == ["fileId", "newParentId"]
        assert schemas["calendar_freebusy"]["required"] == ["timeMin", "timeMax", "calendarIds"]
        assert schemas["docs_insert_image"]["required"] == ["documentId", "imageUrl"]


@pytest.mark.integration
class TestMcpHandlers:
    """Tests for the handlers registered on the low-level MCP server."""

    @pytest.mark.asyncio
    async def test_list_tools_handler(self, server: GoogleMcpServer) -> None:
        handler = server.server.request_handlers[types.ListToolsRequest]

        response = await handler(types.ListToolsRequest(method="tools/list"))

        assert [tool.name for tool in response.root.tools] == EXPECTED_TOOLS

    @pytest.mark.asyncio
    async def test_call_tool_handler_returns_tool_result(
        self, server: GoogleMcpServer, mock_http_client: AsyncMock, make_response
    ) -> None:
        mock_http_client.request.return_value = make_response(status_code=204)
        handler = server.server.request_handlers[types.CallToolRequest]

        response = await handler(
            types.CallToolRequest(
                method="tools/call",
                params=types.CallToolRequestParams(name="drive_delete", arguments={"fileId": "f1"}),
            )
        )

        assert response.root.isError is False
        assert response.root.content[0].text == "File f1 deleted permanently."

    @pytest.mark.asyncio
    async def test_close_releases_http_client(
        self, server: GoogleMcpServer, mock_http_client: AsyncMock
    ) -> None:
        await server.close()

        mock_http_client.aclose.assert_awaited_once()


@pytest.mark.integration
class TestEndToEnd:
    """A tool call through real credentials and the token cache."""

    @pytest.mark.asyncio
    async def test_expired_token_is_refreshed_and_written_back(
        self,
        settings: Settings,
        write_token_file,
        cached_record: dict[str, Any],
        past_expiry_ms: int,
        mock_http_client: AsyncMock,
        make_response,
    ) -> None:
        token_path = write_token_file({**cached_record, "expiry_date": past_expiry_ms})
        new_expiry = datetime(2030, 1, 1)

        def refresh(self: Credentials, request: Any) -> None:
            self.token = "fresh_access_token"
            self.expiry = new_expiry

        server = GoogleMcpServer(
            settings,
            credential_manager=CredentialManager(settings),
            http_client=mock_http_client,
        )
        mock_http_client.request.return_value = make_response(
            {"storageQuota": {}, "user": {"displayName": "Ada", "emailAddress": "ada@example.com"}}
        )

        with patch.object(Credentials, "refresh", autospec=True, side_effect=refresh):
            result = await server.registry.call("drive_about", {})

        assert result.isError is False
        assert result.content[0].text.startswith("User: Ada <ada@example.com>\nStorage Used: N/A")
        headers = mock_http_client.request.call_args.kwargs["headers"]
        assert headers["Authorization"] == "Bearer fresh_access_token"

        on_disk = json.loads(token_path.read_text())
        assert on_disk["access_token"] == "fresh_access_token"
        assert on_disk["refresh_token"] == "cached_refresh_token"
        assert on_disk["expiry_date"] == expiry_to_millis(new_expiry)

    @pytest.mark.asyncio
    async def test_missing_refresh_token_surfaces_as_error(
        self, settings: Settings, mock_http_client: AsyncMock
    ) -> None:
        """Without cached credentials the refresh fails and the call reports it."""
        server = GoogleMcpServer(
            settings,
            credential_manager=CredentialManager(settings),
            http_client=mock_http_client,
        )

        result = await server.registry.call("tasks_list", {})

        assert result.isError is True
        assert result.content[0].text.startswith("Error: ")
        mock_http_client.request.assert_not_called()
        assert not settings.token_path.exists()
