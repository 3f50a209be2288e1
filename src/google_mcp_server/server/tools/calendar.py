"""Google Calendar tools (15): events, quick add, move, recurring
instances, free/busy, and calendar management."""

import re
from datetime import datetime, timezone
from typing import Any
from urllib.parse import quote

from pydantic import Field

from google_mcp_server.server.formatting import time_of
from google_mcp_server.server.google_api import GoogleClients
from google_mcp_server.server.registry import NoParams, ToolParams, ToolRegistry

DEFAULT_CALENDAR_ID = "primary"
ALL_DAY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

CALENDAR_ID_DESCRIPTION = "Calendar ID (default: primary)"


def calendar_path(calendar_id: str) -> str:
    """URL path of a calendar; IDs may contain characters such as ``#``."""
    return f"calendars/{quote(calendar_id, safe='@')}"


def utc_now_iso() -> str:
    """Current time as RFC3339 with milliseconds, e.g. 2026-03-01T10:00:00.000Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_event_summary(title: str, event: dict[str, Any]) -> str:
    """Confirmation block for a created or updated event."""
    lines = [
        title,
        f"  ID: {event.get('id')}",
        f"  Summary: {event.get('summary')}",
        f"  Start: {time_of(event.get('start'), '')}",
        f"  End: {time_of(event.get('end'), '')}",
        f"  Location: {event['location']}" if event.get("location") else None,
        f"  Description: {event['description']}" if event.get("description") else None,
        f"  Link: {event.get('htmlLink')}",
    ]
    return "\n".join(line for line in lines if line)


class ListEventsParams(ToolParams):
    max_results: int = Field(default=10, description="Maximum number of events to return (default 10)")
    time_min: str | None = Field(
        default=None, description="Start of time range in ISO 8601 format (defaults to now)"
    )
    time_max: str | None = Field(default=None, description="End of time range in ISO 8601 format")
    calendar_id: str = Field(default=DEFAULT_CALENDAR_ID, description=CALENDAR_ID_DESCRIPTION)


class SearchEventsParams(ListEventsParams):
    query: str = Field(description="Text to search for in events")


class CreateEventParams(ToolParams):
    summary: str = Field(description="Event title (required)")
    start_time: str = Field(
        description="Start time in ISO 8601 (e.g. 2026-03-01T10:00:00-06:00) "
        "or date-only for all-day events (e.g. 2026-03-01)"
    )
    end_time: str = Field(
        description="End time in ISO 8601 (e.g. 2026-03-01T11:00:00-06:00) "
        "or date-only for all-day events (e.g. 2026-03-02)"
    )
    description: str | None = Field(default=None, description="Event description")
    location: str | None = Field(default=None, description="Event location")
    calendar_id: str = Field(default=DEFAULT_CALENDAR_ID, description=CALENDAR_ID_DESCRIPTION)


class UpdateEventParams(ToolParams):
    event_id: str = Field(description="ID of the event to update (required)")
    summary: str | None = Field(default=None, description="New event title")
    start_time: str | None = Field(default=None, description="New start time in ISO 8601 format")
    end_time: str | None = Field(default=None, description="New end time in ISO 8601 format")
    description: str | None = Field(default=None, description="New event description")
    location: str | None = Field(default=None, description="New event location")
    calendar_id: str = Field(default=DEFAULT_CALENDAR_ID, description=CALENDAR_ID_DESCRIPTION)


class EventParams(ToolParams):
    event_id: str = Field(description="ID of the event")
    calendar_id: str = Field(default=DEFAULT_CALENDAR_ID, description=CALENDAR_ID_DESCRIPTION)


class QuickAddParams(ToolParams):
    text: str = Field(description='Natural language event, e.g. "Meeting tomorrow at 3pm"')
    calendar_id: str = Field(default=DEFAULT_CALENDAR_ID, description=CALENDAR_ID_DESCRIPTION)


class MoveEventParams(ToolParams):
    event_id: str = Field(description="ID of the event to move")
    source_calendar_id: str = Field(description="Calendar ID of the source calendar")
    destination_calendar_id: str = Field(description="Calendar ID of the destination calendar")


class RecurringInstancesParams(EventParams):
    max_results: int = Field(default=10, description="Maximum number of instances to return (default 10)")


class FreeBusyParams(ToolParams):
    time_min: str = Field(description="Start time in ISO 8601 format")
    time_max: str = Field(description="End time in ISO 8601 format")
    calendar_ids: str = Field(
        description='Comma-separated calendar IDs (e.g. "primary,work@group.calendar.google.com")'
    )


class CreateCalendarParams(ToolParams):
    summary: str = Field(description="Name/title of the new calendar")
    description: str | None = Field(default=None, description="Description of the calendar")
    time_zone: str | None = Field(default=None, description='Time zone (e.g. "America/New_York")')


class UpdateCalendarParams(ToolParams):
    calendar_id: str = Field(description="ID of the calendar to update")
    summary: str | None = Field(default=None, description="New calendar name")
    description: str | None = Field(default=None, description="New description")
    time_zone: str | None = Field(default=None, description="New time zone")


class CalendarIdParams(ToolParams):
    calendar_id: str = Field(description="ID of the calendar")


def register_calendar_tools(registry: ToolRegistry, google: GoogleClients) -> None:
    """Register the Calendar tools."""

    async def _list_events(params: ListEventsParams, query: str | None = None) -> list[dict[str, Any]]:
        response = await google.calendar().request(
            "GET",
            f"{calendar_path(params.calendar_id)}/events",
            params={
                "q": query,
                "maxResults": params.max_results,
                "timeMin": params.time_min or utc_now_iso(),
                "timeMax": params.time_max,
                "singleEvents": True,
                "orderBy": "startTime",
            },
        )
        return response.get("items", [])

    @registry.tool("calendar_list_events", "List upcoming Google Calendar events", ListEventsParams)
    async def calendar_list_events(params: ListEventsParams) -> str:
        events = await _list_events(params)
        if not events:
            return "No upcoming events found."

        blocks = []
        for i, event in enumerate(events, start=1):
            line = f"{i}. {event.get('summary') or '(No title)'}"
            line += f"\n   ID: {event.get('id')}"
            line += f"\n   Start: {time_of(event.get('start'), 'No start time')}"
            line += f"\n   End: {time_of(event.get('end'), 'No end time')}"
            if event.get("location"):
                line += f"\n   Location: {event['location']}"
            if event.get("description"):
                line += f"\n   Description: {event['description']}"
            blocks.append(line)

        return f"Found {len(events)} event(s):\n\n" + "\n\n".join(blocks)

    @registry.tool(
        "calendar_search_events",
        "Search Google Calendar events by text query (searches summary, description, location, attendees)",
        SearchEventsParams,
    )
    async def calendar_search_events(params: SearchEventsParams) -> str:
        events = await _list_events(params, query=params.query)
        if not events:
            return f'No events found matching "{params.query}".'

        blocks = []
        for i, event in enumerate(events, start=1):
            line = f"{i}. {event.get('summary') or '(No title)'}"
            line += f"\n   ID: {event.get('id')}"
            line += f"\n   Start: {time_of(event.get('start'))}"
            if event.get("location"):
                line += f"\n   Location: {event['location']}"
            blocks.append(line)

        return f'Found {len(events)} event(s) for "{params.query}":\n\n' + "\n\n".join(blocks)

    @registry.tool("calendar_create_event", "Create a new Google Calendar event", CreateEventParams)
    async def calendar_create_event(params: CreateEventParams) -> str:
        all_day = bool(ALL_DAY_PATTERN.match(params.start_time))
        event: dict[str, Any] = {
            "summary": params.summary,
            "start": {"date": params.start_time} if all_day else {"dateTime": params.start_time},
            "end": {"date": params.end_time} if all_day else {"dateTime": params.end_time},
        }
        if params.description:
            event["description"] = params.description
        if params.location:
            event["location"] = params.location

        created = await google.calendar().request(
            "POST", f"{calendar_path(params.calendar_id)}/events", json_data=event
        )
        return format_event_summary("Event created successfully!", created)

    @registry.tool("calendar_update_event", "Update an existing Google Calendar event", UpdateEventParams)
    async def calendar_update_event(params: UpdateEventParams) -> str:
        patch: dict[str, Any] = {}
        if params.summary is not None:
            patch["summary"] = params.summary
        if params.description is not None:
            patch["description"] = params.description
        if params.location is not None:
            patch["location"] = params.location
        if params.start_time:
            patch["start"] = {"dateTime": params.start_time}
        if params.end_time:
            patch["end"] = {"dateTime": params.end_time}

        updated = await google.calendar().request(
            "PATCH",
            f"{calendar_path(params.calendar_id)}/events/{params.event_id}",
            json_data=patch,
        )
        return format_event_summary("Event updated successfully!", updated)

    @registry.tool("calendar_delete_event", "Delete a Google Calendar event", EventParams)
    async def calendar_delete_event(params: EventParams) -> str:
        await google.calendar().request(
            "DELETE", f"{calendar_path(params.calendar_id)}/events/{params.event_id}"
        )
        return f"Event {params.event_id} deleted successfully."

    @registry.tool(
        "calendar_list_calendars",
        "List all Google Calendars accessible to the user",
        NoParams,
    )
    async def calendar_list_calendars(params: NoParams) -> str:
        response = await google.calendar().request("GET", "users/me/calendarList")
        calendars = response.get("items", [])
        if not calendars:
            return "No calendars found."

        blocks = []
        for i, cal in enumerate(calendars, start=1):
            line = f"{i}. {cal.get('summary')}"
            line += f"\n   ID: {cal.get('id')}"
            if cal.get("primary"):
                line += "\n   (Primary)"
            blocks.append(line)

        return f"Found {len(calendars)} calendar(s):\n\n" + "\n\n".join(blocks)

    @registry.tool(
        "calendar_quick_add",
        'Create a Google Calendar event from natural language text (e.g. "Meeting tomorrow at 3pm")',
        QuickAddParams,
    )
    async def calendar_quick_add(params: QuickAddParams) -> str:
        created = await google.calendar().request(
            "POST",
            f"{calendar_path(params.calendar_id)}/events/quickAdd",
            params={"text": params.text},
        )
        return "\n".join(
            [
                "Event created via quick add!",
                f"  ID: {created.get('id')}",
                f"  Summary: {created.get('summary') or '(No title)'}",
                f"  Start: {time_of(created.get('start'))}",
                f"  End: {time_of(created.get('end'))}",
                f"  Link: {created.get('htmlLink')}",
            ]
        )

    @registry.tool(
        "calendar_get_event",
        "Get detailed information about a specific Google Calendar event",
        EventParams,
    )
    async def calendar_get_event(params: EventParams) -> str:
        event = await google.calendar().request(
            "GET", f"{calendar_path(params.calendar_id)}/events/{params.event_id}"
        )
        lines = [
            "Event Details:",
            f"  ID: {event.get('id')}",
            f"  Summary: {event.get('summary') or '(No title)'}",
            f"  Status: {event.get('status')}",
            f"  Start: {time_of(event.get('start'))}",
            f"  End: {time_of(event.get('end'))}",
        ]
        if event.get("location"):
            lines.append(f"  Location: {event['location']}")
        if event.get("description"):
            lines.append(f"  Description: {event['description']}")
        if event.get("creator"):
            lines.append(f"  Creator: {event['creator'].get('email')}")
        if event.get("organizer"):
            lines.append(f"  Organizer: {event['organizer'].get('email')}")
        if event.get("attendees"):
            lines.append("  Attendees:")
            for attendee in event["attendees"]:
                lines.append(
                    f"    - {attendee.get('email')} ({attendee.get('responseStatus') or 'unknown'})"
                )
        if event.get("recurrence"):
            lines.append(f"  Recurrence: {', '.join(event['recurrence'])}")
        if event.get("htmlLink"):
            lines.append(f"  Link: {event['htmlLink']}")
        return "\n".join(lines)

    @registry.tool(
        "calendar_move_event",
        "Move a Google Calendar event from one calendar to another",
        MoveEventParams,
    )
    async def calendar_move_event(params: MoveEventParams) -> str:
        moved = await google.calendar().request(
            "POST",
            f"{calendar_path(params.source_calendar_id)}/events/{params.event_id}/move",
            params={"destination": params.destination_calendar_id},
        )
        return "\n".join(
            [
                "Event moved successfully!",
                f"  ID: {moved.get('id')}",
                f"  Summary: {moved.get('summary') or '(No title)'}",
                f"  From: {params.source_calendar_id}",
                f"  To: {params.destination_calendar_id}",
                f"  Link: {moved.get('htmlLink')}",
            ]
        )

    @registry.tool(
        "calendar_recurring_instances",
        "List instances of a recurring Google Calendar event",
        RecurringInstancesParams,
    )
    async def calendar_recurring_instances(params: RecurringInstancesParams) -> str:
        response = await google.calendar().request(
            "GET",
            f"{calendar_path(params.calendar_id)}/events/{params.event_id}/instances",
            params={"maxResults": params.max_results},
        )
        instances = response.get("items", [])
        if not instances:
            return "No instances found for this recurring event."

        blocks = []
        for i, event in enumerate(instances, start=1):
            line = f"{i}. {event.get('summary') or '(No title)'}"
            line += f"\n   ID: {event.get('id')}"
            line += f"\n   Start: {time_of(event.get('start'))}"
            line += f"\n   End: {time_of(event.get('end'))}"
            if event.get("status"):
                line += f"\n   Status: {event['status']}"
            blocks.append(line)

        return f"Found {len(instances)} instance(s):\n\n" + "\n\n".join(blocks)

    @registry.tool(
        "calendar_freebusy",
        "Check free/busy time for one or more Google Calendars",
        FreeBusyParams,
    )
    async def calendar_freebusy(params: FreeBusyParams) -> str:
        ids = [cal_id.strip() for cal_id in params.calendar_ids.split(",") if cal_id.strip()]
        response = await google.calendar().request(
            "POST",
            "freeBusy",
            json_data={
                "timeMin": params.time_min,
                "timeMax": params.time_max,
                "items": [{"id": cal_id} for cal_id in ids],
            },
        )

        lines = [f"Free/Busy from {params.time_min} to {params.time_max}:\n"]
        for cal_id, data in (response.get("calendars") or {}).items():
            lines.append(f"Calendar: {cal_id}")
            if data.get("errors"):
                lines.append(f"  Errors: {', '.join(err.get('reason', '') for err in data['errors'])}")
            busy = data.get("busy") or []
            if not busy:
                lines.append("  Status: Free (no busy periods)")
            else:
                lines.append(f"  Busy periods ({len(busy)}):")
                for i, period in enumerate(busy, start=1):
                    lines.append(f"    {i}. {period.get('start')} - {period.get('end')}")
            lines.append("")
        return "\n".join(lines)

    @registry.tool("calendar_create_calendar", "Create a new Google Calendar", CreateCalendarParams)
    async def calendar_create_calendar(params: CreateCalendarParams) -> str:
        body: dict[str, Any] = {"summary": params.summary}
        if params.description:
            body["description"] = params.description
        if params.time_zone:
            body["timeZone"] = params.time_zone

        created = await google.calendar().request("POST", "calendars", json_data=body)
        lines = [
            "Calendar created successfully!",
            f"  ID: {created.get('id')}",
            f"  Summary: {created.get('summary')}",
        ]
        if created.get("description"):
            lines.append(f"  Description: {created['description']}")
        if created.get("timeZone"):
            lines.append(f"  Time Zone: {created['timeZone']}")
        return "\n".join(lines)

    @registry.tool(
        "calendar_update_calendar",
        "Update a Google Calendar (name, description, time zone)",
        UpdateCalendarParams,
    )
    async def calendar_update_calendar(params: UpdateCalendarParams) -> str:
        patch: dict[str, Any] = {}
        if params.summary is not None:
            patch["summary"] = params.summary
        if params.description is not None:
            patch["description"] = params.description
        if params.time_zone is not None:
            patch["timeZone"] = params.time_zone

        updated = await google.calendar().request(
            "PATCH", calendar_path(params.calendar_id), json_data=patch
        )
        return (
            f"Calendar updated.\n  ID: {updated.get('id')}\n  Summary: {updated.get('summary')}"
            f"\n  Time Zone: {updated.get('timeZone') or 'N/A'}"
        )

    @registry.tool(
        "calendar_delete_calendar",
        "Delete a Google Calendar (cannot delete primary)",
        CalendarIdParams,
    )
    async def calendar_delete_calendar(params: CalendarIdParams) -> str:
        await google.calendar().request("DELETE", calendar_path(params.calendar_id))
        return f"Calendar {params.calendar_id} deleted successfully."

    @registry.tool(
        "calendar_clear",
        "Clear all events from a Google Calendar (removes all events but keeps the calendar)",
        CalendarIdParams,
    )
    async def calendar_clear(params: CalendarIdParams) -> str:
        await google.calendar().request("POST", f"{calendar_path(params.calendar_id)}/clear")
        return f"All events cleared from calendar {params.calendar_id}."
