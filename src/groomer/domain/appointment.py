"""Appointment domain service."""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional, Union

from groomer.domain.booking import BookingIntent
from groomer.domain.entities import Appointment, AppointmentStatus, Envelope, PaymentMethod
from groomer.domain.errors import ValidationError
from groomer.utils.time_windows import window_for

if TYPE_CHECKING:
    from groomer.store.base import Store

logger = logging.getLogger(__name__)


def _clean_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _require_text(value: Optional[str], what: str) -> str:
    clean = _clean_text(value)
    if clean is None:
        raise ValidationError(f"{what} cannot be empty")
    return clean


class AppointmentService:
    """Service for booking and moving appointments through their lifecycle.

    Every interval-changing call goes to the store with the caller's
    ``force_overlap`` flag, even when the caller believes the slot is free.
    Only PENDING appointments can be changed; the store enforces this. A
    transition out of a terminal state is a ConflictError, while editing a
    terminal appointment is reported as NotFoundError.
    """

    def __init__(self, store: Store):
        """Initialize appointment service.

        Args:
            store: Store instance
        """
        self.store = store

    def create_appointment(
        self,
        pet_id: int,
        start_at: datetime,
        end_at: datetime,
        notes: Optional[str] = None,
        force_overlap: bool = False,
    ) -> Envelope[Appointment]:
        """Book a new appointment.

        Args:
            pet_id: Pet ID
            start_at: Local start time
            end_at: Local end time
            notes: Optional notes
            force_overlap: Book even if the interval overlaps another booking

        Returns:
            Envelope with the PENDING appointment

        Raises:
            ValidationError: If pet_id is invalid or start >= end
            ConflictError: If the slot is taken and force_overlap is False
        """
        if pet_id is None or pet_id <= 0:
            raise ValidationError("A pet must be selected")
        intent = BookingIntent(start_at, end_at, force_overlap)

        result = self.store.create_appointment(
            pet_id=pet_id,
            start_at=intent.start_at,
            end_at=intent.end_at,
            notes=_clean_text(notes),
            force_overlap=intent.force_overlap,
        )
        logger.info(
            "Booked appointment %s for pet %s%s",
            result.data.id,
            pet_id,
            " (overlap forced)" if force_overlap else "",
        )
        return result

    def edit_appointment(
        self,
        appointment_id: int,
        start_at: datetime,
        end_at: datetime,
        notes: Optional[str] = None,
        force_overlap: bool = False,
    ) -> Envelope[Appointment]:
        """Replace interval and notes of a PENDING appointment.

        Raises:
            ValidationError: If start >= end
            NotFoundError: If the appointment does not exist or is not PENDING
            ConflictError: If the interval overlaps another booking
        """
        intent = BookingIntent(start_at, end_at, force_overlap)
        result = self.store.update_appointment(
            appointment_id=appointment_id,
            start_at=intent.start_at,
            end_at=intent.end_at,
            notes=_clean_text(notes),
            force_overlap=intent.force_overlap,
        )
        logger.info("Edited appointment %s", appointment_id)
        return result

    def reschedule_appointment(
        self,
        appointment_id: int,
        start_at: datetime,
        end_at: datetime,
        reason: str,
        force_overlap: bool = False,
    ) -> Envelope[Appointment]:
        """Move a PENDING appointment, recording why.

        Raises:
            ValidationError: If reason is empty or start >= end
            NotFoundError: If the appointment does not exist
            ConflictError: On overlap or if the appointment is not PENDING
        """
        clean_reason = _require_text(reason, "Reschedule reason")
        intent = BookingIntent(start_at, end_at, force_overlap)
        result = self.store.reschedule_appointment(
            appointment_id=appointment_id,
            start_at=intent.start_at,
            end_at=intent.end_at,
            reason=clean_reason,
            force_overlap=intent.force_overlap,
        )
        logger.info("Rescheduled appointment %s: %s", appointment_id, clean_reason)
        return result

    def cancel_appointment(
        self,
        appointment_id: int,
        reason: str,
        charge_method: Optional[Union[PaymentMethod, str]] = None,
        charge_amount: Optional[Decimal] = None,
    ) -> Envelope[Appointment]:
        """Cancel a PENDING appointment.

        The charge fields record a cancellation fee. Either may be given
        without the other; the store decides whether that is acceptable.

        Raises:
            ValidationError: If reason is empty, the method is unknown or
                the amount is negative
            NotFoundError: If the appointment does not exist
            ConflictError: If the appointment is not PENDING
        """
        clean_reason = _require_text(reason, "Cancellation reason")

        method = None
        if charge_method is not None:
            try:
                method = PaymentMethod(charge_method)
            except ValueError:
                raise ValidationError(
                    f"Unknown charge method '{charge_method}'. "
                    f"Use one of: {', '.join(m.value for m in PaymentMethod)}"
                )
        if charge_amount is not None and charge_amount < 0:
            raise ValidationError("Charge amount cannot be negative")

        result = self.store.cancel_appointment(
            appointment_id=appointment_id,
            reason=clean_reason,
            charge_method=method,
            charge_amount=charge_amount,
        )
        logger.info("Canceled appointment %s: %s", appointment_id, clean_reason)
        return result

    def attend_appointment(self, appointment_id: int) -> Envelope[Appointment]:
        """Mark a PENDING appointment as attended.

        Not idempotent: a second call fails in the store.
        """
        result = self.store.attend_appointment(appointment_id)
        logger.info("Attended appointment %s", appointment_id)
        return result

    def get_appointment(self, appointment_id: int) -> Envelope[Appointment]:
        """Get appointment by ID.

        Raises:
            NotFoundError: If the appointment does not exist
        """
        return self.store.get_appointment(appointment_id)

    def list_appointments(
        self,
        start: datetime,
        end: datetime,
        status: Optional[AppointmentStatus] = None,
    ) -> Envelope[list[Appointment]]:
        """List appointments starting within ``[start, end]``.

        Raises:
            ValidationError: If start is after end
        """
        if start > end:
            raise ValidationError("Range start must not be after range end")
        return self.store.list_appointments(start=start, end=end, status=status)

    def list_for_window(
        self,
        period: str,
        anchor: date,
        status: Optional[AppointmentStatus] = None,
    ) -> Envelope[list[Appointment]]:
        """List appointments of the day/week/month/year containing ``anchor``."""
        try:
            start, end = window_for(period, anchor)
        except ValueError as e:
            raise ValidationError(str(e))
        return self.list_appointments(start, end, status)
