"""Time Utilities - UTC timestamps and SLA arithmetic"""
from datetime import datetime, timezone, timedelta
from typing import Optional
from dateutil import parser as date_parser


def utc_now() -> datetime:
    """Current time, timezone-aware UTC"""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Attach UTC to naive datetimes; convert aware ones to UTC"""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_iso(dt: datetime) -> str:
    """ISO 8601 in UTC with a trailing Z, as the helpdesk backend sends it"""
    return ensure_utc(dt).isoformat().replace("+00:00", "Z")


def parse_iso(value: str) -> datetime:
    """
    Parse an ISO 8601 timestamp from the backend

    Args:
        value: e.g. "2026-03-01T09:00:00Z" or "2026-03-01T16:00:00+07:00"

    Returns:
        Aware datetime in UTC
    """
    return ensure_utc(date_parser.isoparse(value))


def add_hours(dt: datetime, hours: int) -> datetime:
    return dt + timedelta(hours=hours)


def is_past(due_at: Optional[datetime], now: Optional[datetime] = None) -> bool:
    """
    Check whether a due datetime is strictly before `now`

    A missing due date is never past. Naive datetimes are treated as UTC.
    """
    if not due_at:
        return False
    reference = ensure_utc(now) if now is not None else utc_now()
    return reference > ensure_utc(due_at)
