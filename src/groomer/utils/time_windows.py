"""Day, week, month and year boundaries in local civil time.

Every function takes a ``date`` or a naive ``datetime`` and returns a naive
``datetime``. Weeks run Monday through Sunday. Values cross the wire in the
``YYYY-MM-DDTHH:mm:ss`` form produced by :func:`to_iso_local`; the store
compares them as local time, so no offset or zone suffix is ever emitted.
"""

from datetime import date, datetime, time, timedelta
from typing import Union

from dateutil.relativedelta import relativedelta

DateLike = Union[date, datetime]

ISO_LOCAL_FORMAT = "%Y-%m-%dT%H:%M:%S"
ISO_DATE_FORMAT = "%Y-%m-%d"

END_OF_DAY = time(23, 59, 59, 999000)

PERIODS = ("day", "week", "month", "year")


def _as_date(d: DateLike) -> date:
    if isinstance(d, datetime):
        return d.date()
    return d


def start_of_day(d: DateLike) -> datetime:
    """Return 00:00:00.000 of the given day."""
    return datetime.combine(_as_date(d), time.min)


def end_of_day(d: DateLike) -> datetime:
    """Return 23:59:59.999 of the given day."""
    return datetime.combine(_as_date(d), END_OF_DAY)


def add_days(d: DateLike, days: int) -> DateLike:
    return d + timedelta(days=days)


def add_months(d: DateLike, months: int) -> DateLike:
    return d + relativedelta(months=months)


def add_years(d: DateLike, years: int) -> DateLike:
    return d + relativedelta(years=years)


def start_of_week(d: DateLike) -> datetime:
    """Return the start of the Monday on or before ``d``.

    Sunday belongs to the week that started six days earlier.
    """
    day = _as_date(d)
    return start_of_day(day - timedelta(days=day.weekday()))


def end_of_week(d: DateLike) -> datetime:
    """Return the end of the Sunday closing the week of ``d``."""
    return end_of_day(start_of_week(d) + timedelta(days=6))


def start_of_month(d: DateLike) -> datetime:
    return start_of_day(_as_date(d).replace(day=1))


def end_of_month(d: DateLike) -> datetime:
    first = _as_date(d).replace(day=1)
    return end_of_day(first + relativedelta(months=1) - timedelta(days=1))


def start_of_year(d: DateLike) -> datetime:
    return start_of_day(_as_date(d).replace(month=1, day=1))


def end_of_year(d: DateLike) -> datetime:
    return end_of_day(_as_date(d).replace(month=12, day=31))


def window_for(period: str, anchor: DateLike) -> tuple[datetime, datetime]:
    """Return the ``(from, to)`` window of ``period`` containing ``anchor``.

    Args:
        period: One of "day", "week", "month", "year"
        anchor: Any date inside the wanted window

    Raises:
        ValueError: If period is not recognized
    """
    period = period.strip().lower()
    if period == "day":
        return start_of_day(anchor), end_of_day(anchor)
    elif period == "week":
        return start_of_week(anchor), end_of_week(anchor)
    elif period == "month":
        return start_of_month(anchor), end_of_month(anchor)
    elif period == "year":
        return start_of_year(anchor), end_of_year(anchor)
    raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")


def to_iso_local(value: DateLike) -> str:
    """Serialize to ``YYYY-MM-DDTHH:mm:ss`` with no zone and no fraction."""
    if not isinstance(value, datetime):
        value = start_of_day(value)
    if value.tzinfo is not None:
        raise ValueError("Timestamps must be naive local time, got an aware datetime")
    return value.strftime(ISO_LOCAL_FORMAT)


def parse_iso_local(value: str) -> datetime:
    """Parse a naive local timestamp as sent by the store.

    Fractional seconds are accepted and dropped; a zone suffix is rejected.
    """
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError as e:
        raise ValueError(f"Could not parse timestamp '{value}': {e}")
    if parsed.tzinfo is not None:
        raise ValueError(f"Expected a naive local timestamp, got '{value}'")
    return parsed.replace(microsecond=0)


def to_iso_date(value: DateLike) -> str:
    return _as_date(value).strftime(ISO_DATE_FORMAT)


def parse_iso_date(value: str) -> date:
    try:
        return datetime.strptime(value.strip(), ISO_DATE_FORMAT).date()
    except ValueError as e:
        raise ValueError(f"Could not parse date '{value}': {e}")


def format_time_hhmm(value: Union[str, datetime]) -> str:
    """Return ``HH:MM`` from a timestamp or its wire form."""
    if isinstance(value, datetime):
        return value.strftime("%H:%M")
    return value[11:16]
