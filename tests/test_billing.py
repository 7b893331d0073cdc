"""Tests for visit totals and payment consistency."""

from decimal import Decimal

import pytest

from groomer.domain.billing import (
    check_items,
    check_payment,
    expected_payment_status,
    payment_balance,
    visit_total,
)
from groomer.domain.entities import (
    Payment,
    PaymentMethod,
    PaymentStatus,
    TreatmentDetail,
    VisitItem,
    VisitItemCategory,
)
from groomer.domain.errors import ValidationError

BATH = VisitItem(category=VisitItemCategory.BATH, price=Decimal("35.00"))
HAIRCUT = VisitItem(category=VisitItemCategory.HAIRCUT, price=Decimal("40.00"))


def test_total_is_sum_of_prices():
    assert visit_total([BATH, HAIRCUT]) == Decimal("75.00")
    assert visit_total([]) == Decimal("0")


def test_balance_never_negative():
    assert payment_balance(Decimal("75"), Decimal("30")) == Decimal("45")
    assert payment_balance(Decimal("75"), None) == Decimal("75")
    assert payment_balance(Decimal("75"), Decimal("100")) == Decimal("0")


def test_expected_status():
    total = Decimal("75")
    assert expected_payment_status(total, None) is PaymentStatus.PENDING
    assert expected_payment_status(total, Decimal("30")) is PaymentStatus.PARTIAL
    assert expected_payment_status(total, Decimal("75")) is PaymentStatus.PAID


def test_check_items_rejects_negative_price():
    with pytest.raises(ValidationError, match="Item 2"):
        check_items([BATH, VisitItem(category=VisitItemCategory.OTHER, price=Decimal("-1"))])


def test_treatment_detail_only_on_treatment_items():
    detail = TreatmentDetail(treatment_type_text="Deworming")
    check_items([VisitItem(VisitItemCategory.TREATMENT, Decimal("25"), detail)])
    with pytest.raises(ValidationError, match="treatment detail"):
        check_items([VisitItem(VisitItemCategory.BATH, Decimal("25"), detail)])


def test_paid_must_cover_total():
    total = Decimal("75")
    check_payment(Payment(PaymentStatus.PAID, PaymentMethod.CASH, Decimal("75")), total)
    with pytest.raises(ValidationError, match="PAID"):
        check_payment(Payment(PaymentStatus.PAID, PaymentMethod.CASH, Decimal("70")), total)


def test_partial_must_be_strictly_between():
    total = Decimal("75")
    check_payment(Payment(PaymentStatus.PARTIAL, PaymentMethod.CARD, Decimal("30")), total)
    for paid in (None, Decimal("0"), Decimal("75")):
        with pytest.raises(ValidationError, match="PARTIAL"):
            check_payment(Payment(PaymentStatus.PARTIAL, PaymentMethod.CARD, paid), total)


def test_pending_has_nothing_paid():
    total = Decimal("75")
    check_payment(Payment(PaymentStatus.PENDING), total)
    check_payment(Payment(PaymentStatus.PENDING, amount_paid=Decimal("0")), total)
    with pytest.raises(ValidationError):
        check_payment(Payment(PaymentStatus.PENDING, amount_paid=Decimal("10")), total)


def test_negative_amount_paid():
    with pytest.raises(ValidationError, match="negative"):
        check_payment(Payment(PaymentStatus.PAID, amount_paid=Decimal("-1")), Decimal("0"))


def test_no_payment_is_fine():
    check_payment(None, Decimal("75"))
