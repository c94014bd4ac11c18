"""
Relative timeframe filtering for fetched events.

Windows start at the beginning of the current local calendar day:
- today:   [today, today + 24h)
- week:    [today, today + 7d]
- month:   [today, today + 1 calendar month]
- 3months: [today, today + 3 calendar months]

Any other value passes all events through unfiltered.
"""

from datetime import datetime, time, timedelta
from enum import Enum
from typing import Optional

from dateutil import tz
from dateutil.relativedelta import relativedelta

from .dates import parse_event_date
from .models import Event


class Timeframe(str, Enum):
    """Named relative date windows."""

    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    THREE_MONTHS = "3months"


def start_of_today(now: Optional[datetime] = None) -> datetime:
    """
    Midnight of the current calendar day, as an aware datetime.

    Naive or missing `now` means host local time. The offset is looked up
    for midnight itself, so it can differ from `now`'s on a DST change day.
    """
    if now is None:
        now = datetime.now(tz.tzlocal())
    elif now.tzinfo is None:
        now = now.replace(tzinfo=tz.tzlocal())
    return datetime.combine(now.date(), time(), tzinfo=now.tzinfo)


def _window(timeframe: Timeframe, today: datetime) -> tuple[datetime, bool]:
    """Return (upper bound, upper bound inclusive) for a timeframe."""
    if timeframe is Timeframe.TODAY:
        return today + timedelta(hours=24), False
    if timeframe is Timeframe.WEEK:
        return today + timedelta(days=7), True
    if timeframe is Timeframe.MONTH:
        return today + relativedelta(months=1), True
    return today + relativedelta(months=3), True


def get_events_by_timeframe(
    events: list[Event],
    timeframe: Optional[str],
    now: Optional[datetime] = None,
) -> list[Event]:
    """
    Narrow events to a named window relative to today.

    Args:
        events: Already-fetched events
        timeframe: "today", "week", "month" or "3months"; anything else
            returns the events unfiltered
        now: Reference time, defaults to the current local time

    Returns:
        Events inside the window, in input order
    """
    try:
        frame = Timeframe(timeframe)
    except ValueError:
        return list(events)

    today = start_of_today(now)
    upper, inclusive = _window(frame, today)

    filtered = []
    for event in events:
        when = parse_event_date(event.date)
        if when is None or when < today:
            continue
        if when < upper or (inclusive and when == upper):
            filtered.append(event)
    return filtered
