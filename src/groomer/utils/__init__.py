"""Utility functions for groomer."""

from groomer.utils.date_parser import parse_date, parse_datetime
from groomer.utils.amount_parser import parse_amount
from groomer.utils.time_windows import to_iso_local, window_for

__all__ = ["parse_date", "parse_datetime", "parse_amount", "to_iso_local", "window_for"]
