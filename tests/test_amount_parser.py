"""Tests for amount parser."""

from decimal import Decimal

import pytest

from groomer.utils.amount_parser import parse_amount


@pytest.mark.parametrize(
    "text, expected",
    [
        ("40", Decimal("40.00")),
        ("40.5", Decimal("40.50")),
        ("S/ 35.00", Decimal("35.00")),
        ("S/.35", Decimal("35.00")),
        ("$12.99", Decimal("12.99")),
        ("1,200.50", Decimal("1200.50")),
        ("0", Decimal("0.00")),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "abc", "-5", "NaN"])
def test_parse_amount_rejects(text):
    with pytest.raises(ValueError):
        parse_amount(text)
