"""Unit tests for the UTC time helpers used by SLA checks."""
from datetime import datetime, timedelta, timezone

from helpdesk.utils.time import add_hours, format_iso, is_past, parse_iso


def test_parse_offset_timestamp_to_utc():
    parsed = parse_iso("2026-03-01T16:00:00+07:00")
    assert parsed == datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


def test_format_uses_z_suffix():
    assert format_iso(datetime(2026, 3, 1, 9, 0)) == "2026-03-01T09:00:00Z"


def test_add_hours():
    start = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
    assert add_hours(start, 168) == start + timedelta(days=7)


def test_is_past_is_strict():
    now = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
    assert not is_past(now, now)
    assert is_past(now - timedelta(seconds=1), now)
    assert not is_past(None, now)
