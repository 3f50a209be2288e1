"""Google Sheets tools (6). Results are returned as JSON."""

from typing import Any
from urllib.parse import quote

from pydantic import Field, Json

from google_mcp_server.server.formatting import to_json
from google_mcp_server.server.google_api import GoogleClients
from google_mcp_server.server.registry import ToolParams, ToolRegistry

VALUE_INPUT_OPTION = "USER_ENTERED"


def values_path(spreadsheet_id: str, cell_range: str) -> str:
    return f"spreadsheets/{spreadsheet_id}/values/{quote(cell_range, safe='')}"


class SpreadsheetIdParams(ToolParams):
    spreadsheet_id: str = Field(description="The spreadsheet ID")


class RangeParams(SpreadsheetIdParams):
    range: str = Field(description="Cell range in A1 notation, e.g. 'Sheet1!A1:D10'")


class WriteValuesParams(RangeParams):
    values: Json[list[list[Any]]] = Field(
        description='JSON string of a 2D array, e.g. [["A1","B1"],["A2","B2"]]'
    )


class CreateSpreadsheetParams(ToolParams):
    title: str = Field(description="Title for the new spreadsheet")


def register_sheets_tools(registry: ToolRegistry, google: GoogleClients) -> None:
    """Register the Sheets tools."""

    @registry.tool("sheets_read", "Read data from a Google Spreadsheet", RangeParams)
    async def sheets_read(params: RangeParams) -> str:
        data = await google.sheets().request("GET", values_path(params.spreadsheet_id, params.range))
        return to_json(data.get("values") or [])

    @registry.tool("sheets_write", "Write data to a Google Spreadsheet", WriteValuesParams)
    async def sheets_write(params: WriteValuesParams) -> str:
        data = await google.sheets().request(
            "PUT",
            values_path(params.spreadsheet_id, params.range),
            params={"valueInputOption": VALUE_INPUT_OPTION},
            json_data={"values": params.values},
        )
        return to_json(data)

    @registry.tool("sheets_create", "Create a new Google Spreadsheet", CreateSpreadsheetParams)
    async def sheets_create(params: CreateSpreadsheetParams) -> str:
        data = await google.sheets().request(
            "POST", "spreadsheets", json_data={"properties": {"title": params.title}}
        )
        return to_json(
            {
                "spreadsheetId": data.get("spreadsheetId"),
                "title": (data.get("properties") or {}).get("title"),
                "url": data.get("spreadsheetUrl"),
            }
        )

    @registry.tool("sheets_append", "Append rows to a Google Spreadsheet", WriteValuesParams)
    async def sheets_append(params: WriteValuesParams) -> str:
        data = await google.sheets().request(
            "POST",
            values_path(params.spreadsheet_id, params.range) + ":append",
            params={"valueInputOption": VALUE_INPUT_OPTION},
            json_data={"values": params.values},
        )
        return to_json(data)

    @registry.tool("sheets_clear", "Clear values from a range in a Google Spreadsheet", RangeParams)
    async def sheets_clear(params: RangeParams) -> str:
        data = await google.sheets().request(
            "POST", values_path(params.spreadsheet_id, params.range) + ":clear", json_data={}
        )
        return to_json(data)

    @registry.tool(
        "sheets_get_info",
        "Get spreadsheet metadata (title, sheets, dimensions)",
        SpreadsheetIdParams,
    )
    async def sheets_get_info(params: SpreadsheetIdParams) -> str:
        data = await google.sheets().request(
            "GET",
            f"spreadsheets/{params.spreadsheet_id}",
            params={"fields": "properties,sheets.properties"},
        )
        properties = data.get("properties") or {}

        sheets = []
        for sheet in data.get("sheets") or []:
            sheet_properties = sheet.get("properties") or {}
            grid = sheet_properties.get("gridProperties") or {}
            entry = {
                "title": sheet_properties.get("title"),
                "sheetId": sheet_properties.get("sheetId"),
                "rowCount": grid.get("rowCount"),
                "columnCount": grid.get("columnCount"),
            }
            sheets.append({key: value for key, value in entry.items() if value is not None})

        info = {"title": properties.get("title"), "locale": properties.get("locale"), "sheets": sheets}
        return to_json({key: value for key, value in info.items() if value is not None})
