"""Visit domain service."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import TYPE_CHECKING, Optional, Sequence

from groomer.domain.billing import check_items, check_payment, payment_balance, visit_total
from groomer.domain.entities import (
    Envelope,
    Payment,
    Visit,
    VisitItem,
    VisitItemCategory,
)
from groomer.domain.errors import ValidationError

if TYPE_CHECKING:
    from groomer.store.base import Store

logger = logging.getLogger(__name__)


def _check_visited_at(visited_at: datetime) -> None:
    if not isinstance(visited_at, datetime):
        raise ValidationError("Visit time must be a date-time")
    if visited_at.tzinfo is not None:
        raise ValidationError("Visit time must be local time without a time zone")


def _clean_notes(notes: Optional[str]) -> Optional[str]:
    if notes is None:
        return None
    notes = notes.strip()
    return notes or None


def preview_payment(items: Sequence[VisitItem], payment: Optional[Payment]) -> Optional[Payment]:
    """Return ``payment`` with the balance the store will compute.

    The status is kept as supplied.
    """
    if payment is None:
        return None
    return replace(payment, balance=payment_balance(visit_total(items), payment.amount_paid))


class VisitService:
    """Service for recording completed visits and their payments.

    Items and payment are always sent whole: an update replaces the entire
    item list and the payment, never individual lines.
    """

    def __init__(self, store: Store):
        """Initialize visit service.

        Args:
            store: Store instance
        """
        self.store = store

    def _validate(self, items: Sequence[VisitItem], payment: Optional[Payment]) -> None:
        check_items(items)
        check_payment(payment, visit_total(items))

    def create_visit(
        self,
        pet_id: int,
        visited_at: datetime,
        items: Sequence[VisitItem],
        payment: Optional[Payment] = None,
        notes: Optional[str] = None,
        appointment_id: Optional[int] = None,
        auto_create_appointment: bool = False,
    ) -> Envelope[Visit]:
        """Record a visit with its items and payment.

        Args:
            pet_id: Pet ID
            visited_at: Local time of the visit
            items: Ordered service lines
            payment: Optional payment
            notes: Optional notes
            appointment_id: Appointment this visit fulfils, if any
            auto_create_appointment: For walk-ins, ask the store to create
                an ATTENDED appointment alongside the visit

        Returns:
            Envelope with the stored visit (total and balance from the store)

        Raises:
            ValidationError: On inconsistent input, including appointment_id
                combined with auto_create_appointment
        """
        if pet_id is None or pet_id <= 0:
            raise ValidationError("A pet must be selected")
        if appointment_id is not None and auto_create_appointment:
            raise ValidationError(
                "Choose either an existing appointment or auto-create one, not both"
            )
        _check_visited_at(visited_at)
        items = list(items)
        self._validate(items, payment)

        result = self.store.create_visit(
            pet_id=pet_id,
            visited_at=visited_at,
            items=items,
            payment=payment,
            notes=_clean_notes(notes),
            appointment_id=appointment_id,
            auto_create_appointment=auto_create_appointment,
        )
        visit = result.data
        logger.info(
            "Recorded visit %s for pet %s (total %s, appointment %s)",
            visit.id,
            pet_id,
            visit.total_amount,
            visit.appointment_id,
        )
        return result

    def update_visit(
        self,
        visit_id: int,
        visited_at: datetime,
        items: Sequence[VisitItem],
        payment: Optional[Payment] = None,
        notes: Optional[str] = None,
    ) -> Envelope[Visit]:
        """Replace a visit's time, notes, items and payment.

        Raises:
            ValidationError: On inconsistent input
            NotFoundError: If the visit does not exist
        """
        _check_visited_at(visited_at)
        items = list(items)
        self._validate(items, payment)

        result = self.store.update_visit(
            visit_id=visit_id,
            visited_at=visited_at,
            items=items,
            payment=payment,
            notes=_clean_notes(notes),
        )
        logger.info("Updated visit %s (total %s)", visit_id, result.data.total_amount)
        return result

    def get_visit(self, visit_id: int) -> Envelope[Visit]:
        """Get visit by ID.

        Raises:
            NotFoundError: If the visit does not exist
        """
        return self.store.get_visit(visit_id)

    def list_visits(
        self,
        pet_id: Optional[int] = None,
        category: Optional[VisitItemCategory] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Envelope[list[Visit]]:
        """List visits for a pet or for a date range.

        With ``pet_id`` the pet's whole history is returned and ``start``/``end``
        are ignored; ``category`` keeps only visits having an item of that
        category. Without ``pet_id`` both ``start`` and ``end`` are required.

        Raises:
            ValidationError: If neither a pet nor a full range is given
        """
        if pet_id is not None:
            result = self.store.list_visits_by_pet(pet_id, category)
            if category is None:
                return result
            return replace(result, data=[v for v in result.data if v.has_category(category)])

        if start is None or end is None:
            raise ValidationError("List visits by pet, or give both range start and end")
        if start > end:
            raise ValidationError("Range start must not be after range end")
        result = self.store.list_visits_by_range(start, end)
        if category is None:
            return result
        return replace(result, data=[v for v in result.data if v.has_category(category)])
