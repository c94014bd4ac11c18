"""Parsing and formatting of event timestamps."""

from datetime import datetime, timezone, tzinfo
from typing import Optional

from dateutil import parser, tz


def parse_event_date(value: Optional[str], default_tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """
    Parse an ISO-8601 event date into an aware datetime.

    Naive values are read in `default_tz`, host local time if not given.
    Returns None for anything that is not a valid ISO-8601 string.
    """
    if not value or not isinstance(value, str):
        return None

    try:
        parsed = parser.isoparse(value.strip())
    except (ValueError, TypeError, OverflowError):
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=default_tz or tz.tzlocal())
    return parsed


def format_event_date(dt: datetime) -> str:
    """Format a datetime as a UTC ISO-8601 string with millisecond precision."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=tz.tzlocal())
    utc = dt.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def normalize_event_date(value: Optional[str], default_tz: Optional[tzinfo] = None) -> Optional[str]:
    """Re-format a provider date string, or None if it cannot be parsed."""
    parsed = parse_event_date(value, default_tz)
    if parsed is None:
        return None
    return format_event_date(parsed)


def event_day(value: Optional[str], zone: Optional[tzinfo] = None) -> str:
    """
    Calendar day of an event date in `zone`, host local time if not given.

    Unparseable dates, and dates that fall off the calendar when shifted
    into the zone, yield the trimmed lowercase text instead.
    """
    parsed = parse_event_date(value)
    if parsed is not None:
        try:
            return parsed.astimezone(zone or tz.tzlocal()).date().isoformat()
        except (OverflowError, ValueError, OSError):
            pass
    return (value or "").strip().lower()
