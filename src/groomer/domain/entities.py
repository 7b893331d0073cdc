"""Domain model entities for groomer.

These are pure data classes representing business concepts, independent of
how the store persists or transmits them. Timestamps are naive local
datetimes: the business reasons in its own civil time and never attaches
a zone.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class AppointmentStatus(str, Enum):
    """Appointment lifecycle state. PENDING is the only non-terminal state."""

    PENDING = "PENDING"
    ATTENDED = "ATTENDED"
    CANCELED = "CANCELED"

    @property
    def is_terminal(self) -> bool:
        return self is not AppointmentStatus.PENDING


class VisitItemCategory(str, Enum):
    BATH = "BATH"
    HAIRCUT = "HAIRCUT"
    TREATMENT = "TREATMENT"
    OTHER = "OTHER"


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    PARTIAL = "PARTIAL"
    PAID = "PAID"


class PaymentMethod(str, Enum):
    CASH = "CASH"
    CARD = "CARD"
    MOBILE_BANKING = "MOBILE_BANKING"


@dataclass(frozen=True)
class Appointment:
    """Booked time slot for a pet."""

    id: int
    pet_id: int
    start_at: datetime
    end_at: datetime
    status: AppointmentStatus
    notes: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status is AppointmentStatus.PENDING


@dataclass(frozen=True)
class TreatmentDetail:
    """Treatment sub-record of a visit item.

    Treatment type and medicine may each be a catalog reference, free text,
    or both.
    """

    treatment_type_id: Optional[int] = None
    treatment_type_text: Optional[str] = None
    medicine_id: Optional[int] = None
    medicine_text: Optional[str] = None
    next_date: Optional[date] = None


@dataclass(frozen=True)
class VisitItem:
    """One billable service line within a visit."""

    category: VisitItemCategory
    price: Decimal
    treatment_detail: Optional[TreatmentDetail] = None
    id: Optional[int] = None


@dataclass(frozen=True)
class Payment:
    """Payment sub-record of a visit. ``balance`` is filled in by the store."""

    status: PaymentStatus
    method: Optional[PaymentMethod] = None
    amount_paid: Optional[Decimal] = None
    balance: Optional[Decimal] = None


@dataclass(frozen=True)
class Visit:
    """Completed service record for a pet."""

    id: int
    pet_id: int
    appointment_id: Optional[int]
    visited_at: datetime
    total_amount: Decimal
    notes: Optional[str] = None
    items: tuple[VisitItem, ...] = ()
    payment: Optional[Payment] = None
    pet_name: Optional[str] = None

    @property
    def is_walk_in(self) -> bool:
        return self.appointment_id is None

    def has_category(self, category: VisitItemCategory) -> bool:
        return any(item.category == category for item in self.items)


@dataclass(frozen=True)
class Pet:
    """Pet as seen by the booking workflow. Owned by a client."""

    id: int
    code: str
    client_id: int
    name: str
    species: Optional[str] = None
    size: Optional[str] = None
    temperament: Optional[str] = None
    weight: Optional[Decimal] = None
    notes: Optional[str] = None
    main_photo_url: Optional[str] = None


@dataclass(frozen=True)
class CatalogItem:
    """Entry of a named catalog (zones, treatment types, medicines)."""

    id: int
    name: str
    normalized_name: Optional[str] = None


@dataclass(frozen=True)
class PageMeta:
    """Pagination metadata attached to list responses."""

    page: Optional[int] = None
    size: Optional[int] = None
    total_elements: Optional[int] = None
    total_pages: Optional[int] = None
    sort: Optional[str] = None


@dataclass(frozen=True)
class Envelope(Generic[T]):
    """Store response: primary payload, optional paging, optional warnings."""

    data: T
    meta: Optional[PageMeta] = None
    warnings: tuple[str, ...] = field(default_factory=tuple)
