"""Visit total and payment balance rules.

The store recomputes and persists these values; the functions here let the
caller show them before submitting and reject inconsistent input early.
"""

from decimal import Decimal
from typing import Iterable, Optional

from groomer.domain.entities import Payment, PaymentStatus, VisitItem, VisitItemCategory
from groomer.domain.errors import ValidationError

ZERO = Decimal("0")

TREATMENT_CATEGORIES = frozenset({VisitItemCategory.TREATMENT})


def visit_total(items: Iterable[VisitItem]) -> Decimal:
    """Sum of item prices; zero for no items."""
    return sum((item.price for item in items), ZERO)


def payment_balance(total: Decimal, amount_paid: Optional[Decimal]) -> Decimal:
    """Remaining amount owed, never below zero."""
    return max(ZERO, total - (amount_paid or ZERO))


def expected_payment_status(total: Decimal, amount_paid: Optional[Decimal]) -> PaymentStatus:
    """Status implied by the amounts alone."""
    paid = amount_paid or ZERO
    if payment_balance(total, paid) == ZERO:
        return PaymentStatus.PAID
    if paid > ZERO:
        return PaymentStatus.PARTIAL
    return PaymentStatus.PENDING


def check_items(items: Iterable[VisitItem]) -> None:
    """Reject negative prices and treatment details on non-treatment lines.

    Raises:
        ValidationError: On the first offending item
    """
    for position, item in enumerate(items, start=1):
        if item.price is None or item.price < ZERO:
            raise ValidationError(f"Item {position}: price must be zero or more")
        if item.treatment_detail is not None and item.category not in TREATMENT_CATEGORIES:
            raise ValidationError(
                f"Item {position}: treatment detail is only allowed on "
                f"{', '.join(sorted(c.value for c in TREATMENT_CATEGORIES))} items"
            )


def check_payment(payment: Optional[Payment], total: Decimal) -> None:
    """Validate a payment against the visit total.

    - PENDING: nothing collected
    - PARTIAL: 0 < amount paid < total
    - PAID: balance is zero

    The supplied status is never rewritten here.

    Raises:
        ValidationError: If the payment is inconsistent
    """
    if payment is None:
        return

    paid = payment.amount_paid
    if paid is not None and paid < ZERO:
        raise ValidationError("Amount paid cannot be negative")

    if payment.status is PaymentStatus.PENDING:
        if paid is not None and paid != ZERO:
            raise ValidationError("A PENDING payment cannot have an amount paid")
    elif payment.status is PaymentStatus.PARTIAL:
        if paid is None or not (ZERO < paid < total):
            raise ValidationError(
                f"A PARTIAL payment needs an amount paid between 0 and the total ({total})"
            )
    elif payment.status is PaymentStatus.PAID:
        if payment_balance(total, paid) != ZERO:
            raise ValidationError(
                f"A PAID payment must cover the total ({total}); "
                f"balance would be {payment_balance(total, paid)}"
            )
