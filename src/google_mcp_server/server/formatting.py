"""Text helpers shared by the tool handlers."""

import json
from typing import Any

RULE = "─" * 40


def to_json(value: Any) -> str:
    """Pretty-print a value as 2-space indented JSON."""
    return json.dumps(value, indent=2, ensure_ascii=False)


def to_compact_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def flag(value: Any) -> str:
    """Render a truthy/falsy API field as ``true``/``false``."""
    return "true" if value else "false"


def format_bytes(value: Any) -> str:
    """Human-readable size for a byte count reported as a string or number."""
    if not value:
        return "N/A"
    num = float(value)
    if num >= 1073741824:
        return f"{num / 1073741824:.2f} GB"
    if num >= 1048576:
        return f"{num / 1048576:.2f} MB"
    if num >= 1024:
        return f"{num / 1024:.2f} KB"
    return f"{int(num)} bytes"


def time_of(moment: dict[str, Any] | None, fallback: str = "N/A") -> str:
    """Pick ``dateTime`` or ``date`` from a Calendar start/end object."""
    moment = moment or {}
    return moment.get("dateTime") or moment.get("date") or fallback
