"""Tests for CLI date window helper."""

from datetime import date, datetime

import click
import pytest

from groomer.cli.date_filters import resolve_cli_window


def _ctx() -> click.Context:
    return click.Context(click.Command("test"))


def test_bare_end_date_covers_whole_day():
    start, end = resolve_cli_window(
        _ctx(), period=None, anchor=None, start="2025-03-01", end="2025-03-10"
    )
    assert start == datetime(2025, 3, 1)
    assert end == datetime(2025, 3, 10, 23, 59, 59, 999000)


@pytest.mark.parametrize("value", ["2025-03-10T00:00", "2025-03-10 00:00", "2025-03-10T00:00:00"])
def test_explicit_midnight_end_is_kept(value):
    _, end = resolve_cli_window(_ctx(), period=None, anchor=None, start="2025-03-01", end=value)
    assert end == datetime(2025, 3, 10, 0, 0)


def test_relative_end_date_is_widened():
    _, end = resolve_cli_window(
        _ctx(), period=None, anchor=None, start="2025-03-01", end="march 10, 2025"
    )
    assert end == datetime(2025, 3, 10, 23, 59, 59, 999000)


def test_period_uses_anchor():
    start, end = resolve_cli_window(
        _ctx(), period="week", anchor="2025-03-12", start=None, end=None
    )
    assert start == datetime(2025, 3, 10)
    assert end.date() == date(2025, 3, 16)


def test_period_with_range_is_rejected(capsys):
    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_window(_ctx(), period="day", anchor=None, start=None, end="2025-03-10")

    assert excinfo.value.exit_code == 1
    assert "cannot be combined" in capsys.readouterr().err
