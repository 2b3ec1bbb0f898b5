"""Matching attendance dates to event dates, and season labels."""

from collections.abc import Collection
from datetime import date, timedelta

# Probe order matters: when several event dates fall inside the window the
# earliest offset in this sequence wins.
MATCH_OFFSETS = (-2, -1, 1, 2)


def match_event_date(attendance_date: str, event_dates: Collection[str]) -> str | None:
    """Find the event an attendance date belongs to.

    Attendance is sometimes recorded a day or two off the official event
    date. An exact match is preferred, then each offset in MATCH_OFFSETS is
    tried in order.

    Args:
        attendance_date: ISO date the attendance was recorded on
        event_dates: Known ISO event dates

    Returns:
        The matched event date, or None if none is within two days
    """
    if attendance_date in event_dates:
        return attendance_date

    base = date.fromisoformat(attendance_date)
    for offset in MATCH_OFFSETS:
        candidate = (base + timedelta(days=offset)).isoformat()
        if candidate in event_dates:
            return candidate

    return None


def season_label(date_str: str) -> str:
    """Label a date with its racing season.

    March through June is spring and September through October is fall.
    Anything else is reported as unknown.
    """
    day = date.fromisoformat(date_str)
    if 3 <= day.month <= 6:
        return f"Spring {day.year}"
    if 9 <= day.month <= 10:
        return f"Fall {day.year}"
    return f"Unknown {day.year}"
