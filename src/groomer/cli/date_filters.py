"""CLI helpers for date range resolution."""

from datetime import date, datetime

import click

from groomer.utils.date_parser import parse_date, parse_datetime
from groomer.utils.time_windows import end_of_day, start_of_day, window_for


def _has_time_part(text: str) -> bool:
    """True when the user typed a clock time, not just a day."""
    text = text.strip()
    return text.lower() == "now" or ":" in text


def resolve_cli_window(
    ctx,
    *,
    period: str | None,
    anchor: str | None,
    start: str | None,
    end: str | None,
    default_period: str | None = "day",
) -> tuple[datetime | None, datetime | None]:
    """Resolve a CLI window from a period (+ anchor date) or explicit bounds.

    A bare date given as --to covers that whole day.
    """
    if period and (start or end):
        click.echo(
            "Error: Period options (--day, --week, --month, --year) cannot be combined with --from or --to.",
            err=True,
        )
        ctx.exit(1)

    anchor_date = date.today()
    if anchor:
        try:
            anchor_date = parse_date(anchor)
        except ValueError as e:
            click.echo(f"Error: Invalid date: {e}", err=True)
            ctx.exit(1)

    if start or end:
        try:
            range_start = parse_datetime(start) if start else start_of_day(anchor_date)
            range_end = parse_datetime(end) if end else end_of_day(anchor_date)
        except ValueError as e:
            click.echo(f"Error: Invalid range: {e}", err=True)
            ctx.exit(1)
        if end and not _has_time_part(end):
            range_end = end_of_day(range_end)
        return range_start, range_end

    chosen = period or default_period
    if chosen is None:
        return None, None
    return window_for(chosen, anchor_date)
