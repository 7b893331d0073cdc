"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

CURRENCY_MARKERS = re.compile(r"(S/\.?|PEN|USD|[$€£])", re.IGNORECASE)


def parse_amount(amount_str: str) -> Decimal:
    """Parse a price or paid amount into a non-negative Decimal.

    Handles:
    - "40", "40.5", "40.50"
    - "S/ 40.00", "S/.40", "$40"
    - "1,200.50"

    Raises:
        ValueError: If the string is empty, malformed or negative
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    cleaned = CURRENCY_MARKERS.sub("", amount_str.strip())
    cleaned = cleaned.replace(",", "").strip()

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")

    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if amount < 0:
        raise ValueError(f"Amount cannot be negative: '{amount_str}'")
    return amount.quantize(Decimal("0.01"))
