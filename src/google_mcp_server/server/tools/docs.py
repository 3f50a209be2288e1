"""Google Docs tools (7): create, read, insert text/table/image, find &
replace, and raw batch updates."""

from typing import Any

from pydantic import Field, Json

from google_mcp_server.server.formatting import RULE, to_compact_json
from google_mcp_server.server.google_api import GoogleClients
from google_mcp_server.server.registry import ToolParams, ToolRegistry

DOCUMENT_ID_DESCRIPTION = "The Google Doc document ID"


def extract_text(content: list[dict[str, Any]] | None) -> str:
    """Flatten a Docs body into plain text.

    Paragraph runs are concatenated, table rows become ``cell | cell``
    lines, and section breaks become ``---``.
    """
    parts = []
    for element in content or []:
        if "paragraph" in element:
            runs = element["paragraph"].get("elements", [])
            parts.append("".join((run.get("textRun") or {}).get("content", "") for run in runs))
        elif "table" in element:
            for row in element["table"].get("tableRows", []):
                cells = [extract_text(cell.get("content")).strip() for cell in row.get("tableCells", [])]
                parts.append(" | ".join(cells))
        elif "sectionBreak" in element:
            parts.append("---\n")
    return "".join(parts)


def replies_summary(response: dict[str, Any]) -> str:
    """``Batch update applied. N operation(s) completed.`` plus raw replies."""
    replies = response.get("replies")
    text = f"Batch update applied. {len(replies or [])} operation(s) completed."
    if replies is not None:
        text += "\nReplies: " + to_compact_json(replies)
    return text


class CreateDocParams(ToolParams):
    title: str = Field(description="Title of the new document")
    content: str | None = Field(default=None, description="Initial text content to insert")
    parent_id: str | None = Field(default=None, description="Drive folder ID to create the doc in")


class DocumentIdParams(ToolParams):
    document_id: str = Field(description=DOCUMENT_ID_DESCRIPTION)


class InsertTextParams(DocumentIdParams):
    text: str = Field(description="Text to insert")
    index: int = Field(default=1, description="Character index to insert at (default: 1, start of doc)")
    segment_id: str | None = Field(
        default=None, description="Segment ID for headers/footers (omit for body)"
    )


class DocsBatchUpdateParams(DocumentIdParams):
    requests: Json[list[dict[str, Any]]] = Field(
        description="JSON string of an array of Docs API request objects"
    )


class InsertTableParams(DocumentIdParams):
    rows: int = Field(description="Number of rows")
    columns: int = Field(description="Number of columns")
    index: int = Field(default=1, description="Character index to insert at (default: 1)")


class InsertImageParams(DocumentIdParams):
    image_url: str = Field(description="Public URL of the image to insert")
    index: int = Field(default=1, description="Character index to insert at (default: 1)")
    width: float | None = Field(default=None, description="Image width in points (72 points = 1 inch)")
    height: float | None = Field(default=None, description="Image height in points")


class FindReplaceParams(DocumentIdParams):
    find: str = Field(description="Text to find")
    replace: str = Field(description="Replacement text")
    match_case: bool = Field(default=False, description="Case-sensitive match (default: false)")


async def move_to_folder(google: GoogleClients, file_id: str, parent_id: str) -> None:
    """Re-parent a freshly created Drive file into ``parent_id``."""
    drive = google.drive()
    file = await drive.request("GET", f"files/{file_id}", params={"fields": "parents"})
    await drive.request(
        "PATCH",
        f"files/{file_id}",
        params={
            "addParents": parent_id,
            "removeParents": ",".join(file.get("parents", [])),
            "fields": "id,parents",
        },
        json_data={},
    )


def register_docs_tools(registry: ToolRegistry, google: GoogleClients) -> None:
    """Register the Docs tools."""

    async def _batch_update(document_id: str, requests: list[dict[str, Any]]) -> dict[str, Any]:
        return await google.docs().request(
            "POST", f"documents/{document_id}:batchUpdate", json_data={"requests": requests}
        )

    @registry.tool(
        "docs_create",
        "Create a new Google Doc, optionally with initial content and in a specific folder",
        CreateDocParams,
    )
    async def docs_create(params: CreateDocParams) -> str:
        doc = await google.docs().request("POST", "documents", json_data={"title": params.title})
        document_id = doc.get("documentId")

        if params.content:
            await _batch_update(
                document_id,
                [{"insertText": {"location": {"index": 1}, "text": params.content}}],
            )

        if params.parent_id:
            await move_to_folder(google, document_id, params.parent_id)

        return (
            f"Document created.\nTitle: {doc.get('title')}\nID: {document_id}"
            f"\nURL: https://docs.google.com/document/d/{document_id}/edit"
        )

    @registry.tool(
        "docs_read",
        "Read a Google Doc and return its content as plain text",
        DocumentIdParams,
    )
    async def docs_read(params: DocumentIdParams) -> str:
        doc = await google.docs().request("GET", f"documents/{params.document_id}")
        text = extract_text((doc.get("body") or {}).get("content"))
        return f"Title: {doc.get('title')}\n{RULE}\n{text}"

    @registry.tool(
        "docs_insert_text",
        "Insert text into a Google Doc at a specified position",
        InsertTextParams,
    )
    async def docs_insert_text(params: InsertTextParams) -> str:
        location: dict[str, Any] = {"index": params.index}
        if params.segment_id:
            location["segmentId"] = params.segment_id

        response = await _batch_update(
            params.document_id, [{"insertText": {"location": location, "text": params.text}}]
        )
        return f"Text inserted at index {params.index}. Replies: {len(response.get('replies') or [])}"

    @registry.tool(
        "docs_batch_update",
        "Apply batch update requests to a Google Doc (formatting, tables, images, page breaks, etc.)",
        DocsBatchUpdateParams,
    )
    async def docs_batch_update(params: DocsBatchUpdateParams) -> str:
        response = await _batch_update(params.document_id, params.requests)
        return replies_summary(response)

    @registry.tool(
        "docs_insert_table",
        "Insert a table into a Google Doc at a specified position",
        InsertTableParams,
    )
    async def docs_insert_table(params: InsertTableParams) -> str:
        await _batch_update(
            params.document_id,
            [
                {
                    "insertTable": {
                        "location": {"index": params.index},
                        "rows": params.rows,
                        "columns": params.columns,
                    }
                }
            ],
        )
        return f"Table ({params.rows}x{params.columns}) inserted at index {params.index}."

    @registry.tool(
        "docs_insert_image",
        "Insert an inline image into a Google Doc from a URL",
        InsertImageParams,
    )
    async def docs_insert_image(params: InsertImageParams) -> str:
        request: dict[str, Any] = {
            "location": {"index": params.index},
            "uri": params.image_url,
        }
        if params.width or params.height:
            size = {}
            if params.width:
                size["width"] = {"magnitude": params.width, "unit": "PT"}
            if params.height:
                size["height"] = {"magnitude": params.height, "unit": "PT"}
            request["objectSize"] = size

        response = await _batch_update(params.document_id, [{"insertInlineImage": request}])
        replies = response.get("replies") or [{}]
        image_id = (replies[0].get("insertInlineImage") or {}).get("objectId")

        text = f"Image inserted at index {params.index}."
        if image_id:
            text += f"\nObject ID: {image_id}"
        return text

    @registry.tool("docs_find_replace", "Find and replace text in a Google Doc", FindReplaceParams)
    async def docs_find_replace(params: FindReplaceParams) -> str:
        response = await _batch_update(
            params.document_id,
            [
                {
                    "replaceAllText": {
                        "containsText": {"text": params.find, "matchCase": params.match_case},
                        "replaceText": params.replace,
                    }
                }
            ],
        )
        replies = response.get("replies") or [{}]
        changed = (replies[0].get("replaceAllText") or {}).get("occurrencesChanged") or 0
        return f"Find & replace complete. {changed} occurrence(s) replaced."
