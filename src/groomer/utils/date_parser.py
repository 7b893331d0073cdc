"""Parsing of human-entered dates and times for the CLI."""

from datetime import date, datetime, time, timedelta
from typing import Optional

from dateutil import parser as date_parser

from groomer.utils.time_windows import window_for

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports:
    - Absolute dates: "2025-03-10", "March 10, 2025", etc.
    - Relative dates: "today", "yesterday", "tomorrow"
    - Weekdays: "next monday" (strictly after today), "last friday"
      (strictly before today)

    Args:
        date_str: Date string in various formats
        today: Reference day, defaults to the local current date

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = today or date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    for prefix, direction in (("next ", 1), ("last ", -1)):
        if date_str.startswith(prefix) and date_str[len(prefix):] in WEEKDAYS:
            target = WEEKDAYS.index(date_str[len(prefix):])
            if direction > 0:
                days = (target - today.weekday()) % 7 or 7
            else:
                days = -((today.weekday() - target) % 7 or 7)
            return today + timedelta(days=days)

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_time(time_str: str) -> time:
    """Parse "HH:MM" or "HH:MM:SS" into a time with no fraction."""
    try:
        return time.fromisoformat(time_str.strip()).replace(microsecond=0)
    except ValueError as e:
        raise ValueError(f"Could not parse time '{time_str}': {e}")


def parse_datetime(value: str, today: Optional[date] = None) -> datetime:
    """Parse a local date-time such as "2025-03-10T09:00", "tomorrow 09:30" or "now".

    The result is always naive. A missing time means midnight.

    Raises:
        ValueError: If the value cannot be parsed or carries a zone offset
    """
    text = value.strip()
    if text.lower() == "now":
        return datetime.now().replace(microsecond=0)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        parsed = None

    if parsed is None:
        day_part, _, time_part = text.rpartition(" ")
        if day_part and ":" in time_part:
            parsed = datetime.combine(parse_date(day_part, today), parse_time(time_part))
        else:
            parsed = datetime.combine(parse_date(text, today), time.min)

    if parsed.tzinfo is not None:
        raise ValueError(f"Timestamps are local time; drop the zone from '{value}'")
    return parsed.replace(microsecond=0)


def parse_window(period: str, anchor: Optional[str] = None) -> tuple[datetime, datetime]:
    """Resolve a period name and optional anchor date into a ``(from, to)`` pair.

    Raises:
        ValueError: If the period or the anchor cannot be parsed
    """
    anchor_date = parse_date(anchor) if anchor else date.today()
    return window_for(period, anchor_date)
