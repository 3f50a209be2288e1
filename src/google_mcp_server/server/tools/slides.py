"""Google Slides tools (6)."""

import uuid
from typing import Any

from pydantic import Field, Json

from google_mcp_server.server.formatting import RULE
from google_mcp_server.server.google_api import GoogleClients
from google_mcp_server.server.registry import ToolParams, ToolRegistry
from google_mcp_server.server.tools.docs import move_to_folder, replies_summary

PRESENTATION_ID_DESCRIPTION = "The presentation ID"


def extract_slide_text(slide: dict[str, Any]) -> str:
    """Concatenate the text runs of every shape on a slide."""
    texts = []
    for element in slide.get("pageElements", []):
        text_elements = ((element.get("shape") or {}).get("text") or {}).get("textElements") or []
        for text_element in text_elements:
            content = (text_element.get("textRun") or {}).get("content")
            if content:
                texts.append(content)
    return "".join(texts).strip()


class CreatePresentationParams(ToolParams):
    title: str = Field(description="Title of the new presentation")
    parent_id: str | None = Field(
        default=None, description="Drive folder ID to create the presentation in"
    )


class PresentationIdParams(ToolParams):
    presentation_id: str = Field(description=PRESENTATION_ID_DESCRIPTION)


class AddSlideParams(PresentationIdParams):
    insertion_index: int | None = Field(
        default=None, description="Position to insert the slide (0-based, default: end)"
    )
    predefined_layout: str = Field(
        default="BLANK",
        description="Layout: BLANK, TITLE, TITLE_AND_BODY, TITLE_AND_TWO_COLUMNS, etc. (default: BLANK)",
    )


class SlidesInsertTextParams(PresentationIdParams):
    object_id: str = Field(description="The object ID of the shape/text box to insert text into")
    text: str = Field(description="Text to insert")
    insertion_index: int = Field(default=0, description="Character index within the shape (default: 0)")


class ReplaceAllTextParams(PresentationIdParams):
    find: str = Field(description="Text to find")
    replace: str = Field(description="Replacement text")
    match_case: bool = Field(default=False, description="Case-sensitive match (default: false)")


class SlidesBatchUpdateParams(PresentationIdParams):
    requests: Json[list[dict[str, Any]]] = Field(
        description="JSON string of an array of Slides API request objects"
    )


def register_slides_tools(registry: ToolRegistry, google: GoogleClients) -> None:
    """Register the Slides tools."""

    async def _batch_update(presentation_id: str, requests: list[dict[str, Any]]) -> dict[str, Any]:
        return await google.slides().request(
            "POST",
            f"presentations/{presentation_id}:batchUpdate",
            json_data={"requests": requests},
        )

    @registry.tool(
        "slides_create",
        "Create a new Google Slides presentation",
        CreatePresentationParams,
    )
    async def slides_create(params: CreatePresentationParams) -> str:
        presentation = await google.slides().request(
            "POST", "presentations", json_data={"title": params.title}
        )
        presentation_id = presentation.get("presentationId")

        if params.parent_id:
            await move_to_folder(google, presentation_id, params.parent_id)

        return (
            f"Presentation created.\nTitle: {presentation.get('title')}\nID: {presentation_id}"
            f"\nSlides: {len(presentation.get('slides') or [])}"
            f"\nURL: https://docs.google.com/presentation/d/{presentation_id}/edit"
        )

    @registry.tool(
        "slides_read",
        "Read a Google Slides presentation and return text content of all slides",
        PresentationIdParams,
    )
    async def slides_read(params: PresentationIdParams) -> str:
        presentation = await google.slides().request(
            "GET", f"presentations/{params.presentation_id}"
        )
        slides = presentation.get("slides") or []

        lines = [f"Title: {presentation.get('title')}", f"Slides: {len(slides)}", RULE]
        for i, slide in enumerate(slides, start=1):
            lines.append(f"\nSlide {i} (ID: {slide.get('objectId')}):")
            lines.append(extract_slide_text(slide) or "(no text content)")
        return "\n".join(lines)

    @registry.tool(
        "slides_add_slide",
        "Add a new slide to a Google Slides presentation",
        AddSlideParams,
    )
    async def slides_add_slide(params: AddSlideParams) -> str:
        object_id = f"slide_{uuid.uuid4().hex[:16]}"
        create_slide: dict[str, Any] = {
            "objectId": object_id,
            "slideLayoutReference": {"predefinedLayout": params.predefined_layout},
        }
        if params.insertion_index is not None:
            create_slide["insertionIndex"] = params.insertion_index

        response = await _batch_update(params.presentation_id, [{"createSlide": create_slide}])
        replies = response.get("replies") or [{}]
        new_slide_id = (replies[0].get("createSlide") or {}).get("objectId") or object_id
        return f"Slide added.\nSlide ID: {new_slide_id}\nLayout: {params.predefined_layout}"

    @registry.tool(
        "slides_insert_text",
        "Insert text into a shape or text box on a Google Slides presentation",
        SlidesInsertTextParams,
    )
    async def slides_insert_text(params: SlidesInsertTextParams) -> str:
        await _batch_update(
            params.presentation_id,
            [
                {
                    "insertText": {
                        "objectId": params.object_id,
                        "text": params.text,
                        "insertionIndex": params.insertion_index,
                    }
                }
            ],
        )
        return f"Text inserted into object {params.object_id}."

    @registry.tool(
        "slides_replace_all_text",
        "Find and replace text across all slides in a Google Slides presentation",
        ReplaceAllTextParams,
    )
    async def slides_replace_all_text(params: ReplaceAllTextParams) -> str:
        response = await _batch_update(
            params.presentation_id,
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
        count = (replies[0].get("replaceAllText") or {}).get("occurrencesChanged") or 0
        return f"Replace complete. {count} occurrence(s) replaced."

    @registry.tool(
        "slides_batch_update",
        "Apply batch update requests to a Google Slides presentation "
        "(text, images, shapes, formatting, etc.)",
        SlidesBatchUpdateParams,
    )
    async def slides_batch_update(params: SlidesBatchUpdateParams) -> str:
        response = await _batch_update(params.presentation_id, params.requests)
        return replies_summary(response)
