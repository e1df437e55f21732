# src/lucid/tasks/datetime_reconciler.py

"""
Conversion between a task's textual (date, time) pair and a calendar datetime.

The textual form is authoritative; the datetime is what the calendar renders
and what a drag-reschedule hands back. Seconds are not representable in the
textual form, so a round-trip is exact to the minute.

An absent time means "all-day". to_timestamp() returns the start of that day,
but the all-day flag itself must be carried by the caller (a task with
time "12:00 AM" is not an all-day task).
"""

from __future__ import annotations

import logging
from datetime import date, datetime

logger = logging.getLogger(__name__)

# Tried in order. strptime month/AM-PM names follow the process locale.
DATE_FORMATS: tuple[str, ...] = (
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%b %d %Y",
    "%d %B %Y",
    "%Y-%m-%d",
    "%m/%d/%Y",
)

TIME_FORMATS: tuple[str, ...] = (
    "%I:%M %p",
    "%I:%M%p",
    "%I %p",
    "%I%p",
    "%H:%M",
    "%H:%M:%S",
)


def _squash(s: str) -> str:
    return " ".join(str(s).split())


def _parse_with(value: str, formats: tuple[str, ...]) -> datetime | None:
    for fmt in formats:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


def to_timestamp(date_text: str | None, time_text: str | None) -> datetime | None:
    """
    Combine date and time text into one naive local datetime.

    Returns None (and logs) when either part does not parse, including
    impossible dates such as "February 30, 2024". Never raises.
    """
    date_s = _squash(date_text or "")
    if not date_s:
        logger.warning("Missing date text; task is not renderable on the calendar.")
        return None

    day = _parse_with(date_s, DATE_FORMATS)
    if day is None:
        logger.warning("Invalid date string: %r", date_text)
        return None

    time_s = _squash(time_text or "")
    if not time_s:
        return day

    clock = _parse_with(time_s.upper(), TIME_FORMATS)
    if clock is None:
        logger.warning("Invalid time string: %r (date=%r)", time_text, date_text)
        return None

    return day.replace(hour=clock.hour, minute=clock.minute, second=0, microsecond=0)


def format_date(ts: date) -> str:
    """'Month Day, Year' with the long month name, e.g. 'July 26, 2024'."""
    return f"{ts:%B} {ts.day}, {ts.year:04d}"


def format_time(ts: datetime) -> str:
    """'H:MM AM/PM', 12-hour clock without a leading zero on the hour."""
    hour12 = ts.hour % 12 or 12
    suffix = "AM" if ts.hour < 12 else "PM"
    return f"{hour12}:{ts.minute:02d} {suffix}"


def from_timestamp(ts: datetime, is_all_day: bool) -> tuple[str, str | None]:
    """Render a datetime back into (date_text, time_text); all-day drops the time."""
    if is_all_day:
        return format_date(ts), None
    return format_date(ts), format_time(ts)
