"""Unit tests for shared text helpers."""

import pytest

from google_mcp_server.server.formatting import RULE, flag, format_bytes, time_of, to_json


@pytest.mark.unit
class TestFormatBytes:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, "N/A"),
            ("0", "0 bytes"),
            ("512", "512 bytes"),
            ("2048", "2.00 KB"),
            (5 * 1048576, "5.00 MB"),
            ("16106127360", "15.00 GB"),
        ],
    )
    def test_should_scale_units(self, value, expected: str) -> None:
        assert format_bytes(value) == expected


@pytest.mark.unit
class TestHelpers:
    def test_rule_is_forty_box_drawing_characters(self) -> None:
        assert RULE == "─" * 40

    def test_flag_renders_lowercase_booleans(self) -> None:
        assert flag(True) == "true"
        assert flag(None) == "false"

    def test_to_json_keeps_unicode(self) -> None:
        assert to_json({"name": "Zoë"}) == '{\n  "name": "Zoë"\n}'

    def test_time_of_prefers_date_time(self) -> None:
        assert time_of({"dateTime": "2026-03-01T10:00:00Z", "date": "2026-03-01"}) == (
            "2026-03-01T10:00:00Z"
        )
        assert time_of({"date": "2026-03-01"}) == "2026-03-01"
        assert time_of(None) == "N/A"
        assert time_of({}, "No start time") == "No start time"
