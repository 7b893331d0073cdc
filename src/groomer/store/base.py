"""Abstract store interface.

The store is the authoritative backend: it assigns ids, decides whether a
requested interval overlaps existing bookings, guards state transitions and
recomputes visit totals and balances. Every operation returns an
:class:`Envelope` so warnings and paging reach the caller, and failures are
raised as :mod:`groomer.domain.errors` types.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence

# Import entities directly to avoid circular import through domain/__init__.py
from groomer.domain.entities import (
    Appointment,
    AppointmentStatus,
    CatalogItem,
    Envelope,
    Payment,
    PaymentMethod,
    Pet,
    Visit,
    VisitItem,
    VisitItemCategory,
)


class Store(ABC):
    """Abstract store interface for groomer."""

    @abstractmethod
    def connect(self) -> None:
        """Open the connection to the store."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Release the connection to the store."""
        pass

    # Appointment operations
    @abstractmethod
    def create_appointment(
        self,
        pet_id: int,
        start_at: datetime,
        end_at: datetime,
        notes: Optional[str] = None,
        force_overlap: bool = False,
    ) -> Envelope[Appointment]:
        """Book a new PENDING appointment.

        Raises ConflictError on overlap unless ``force_overlap`` is set.
        """
        pass

    @abstractmethod
    def get_appointment(self, appointment_id: int) -> Envelope[Appointment]:
        """Get appointment by ID. Raises NotFoundError."""
        pass

    @abstractmethod
    def list_appointments(
        self,
        start: datetime,
        end: datetime,
        status: Optional[AppointmentStatus] = None,
    ) -> Envelope[list[Appointment]]:
        """List appointments starting within ``[start, end]``."""
        pass

    @abstractmethod
    def update_appointment(
        self,
        appointment_id: int,
        start_at: datetime,
        end_at: datetime,
        notes: Optional[str] = None,
        force_overlap: bool = False,
    ) -> Envelope[Appointment]:
        """Replace interval and notes of a PENDING appointment."""
        pass

    @abstractmethod
    def reschedule_appointment(
        self,
        appointment_id: int,
        start_at: datetime,
        end_at: datetime,
        reason: str,
        force_overlap: bool = False,
    ) -> Envelope[Appointment]:
        """Move a PENDING appointment, leaving an audit record with ``reason``."""
        pass

    @abstractmethod
    def cancel_appointment(
        self,
        appointment_id: int,
        reason: str,
        charge_method: Optional[PaymentMethod] = None,
        charge_amount: Optional[Decimal] = None,
    ) -> Envelope[Appointment]:
        """Transition a PENDING appointment to CANCELED."""
        pass

    @abstractmethod
    def attend_appointment(self, appointment_id: int) -> Envelope[Appointment]:
        """Transition a PENDING appointment to ATTENDED."""
        pass

    # Visit operations
    @abstractmethod
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
        """Create a visit with its items and payment in one operation."""
        pass

    @abstractmethod
    def get_visit(self, visit_id: int) -> Envelope[Visit]:
        """Get visit by ID. Raises NotFoundError."""
        pass

    @abstractmethod
    def update_visit(
        self,
        visit_id: int,
        visited_at: datetime,
        items: Sequence[VisitItem],
        payment: Optional[Payment] = None,
        notes: Optional[str] = None,
    ) -> Envelope[Visit]:
        """Replace a visit's fields, items and payment as a whole."""
        pass

    @abstractmethod
    def list_visits_by_pet(
        self, pet_id: int, category: Optional[VisitItemCategory] = None
    ) -> Envelope[list[Visit]]:
        """Full visit history of a pet, optionally by item category."""
        pass

    @abstractmethod
    def list_visits_by_range(self, start: datetime, end: datetime) -> Envelope[list[Visit]]:
        """Visits with ``visited_at`` within ``[start, end]``."""
        pass

    # Pet operations
    @abstractmethod
    def create_pet(
        self,
        client_id: int,
        name: str,
        species: Optional[str] = None,
        size: Optional[str] = None,
        temperament: Optional[str] = None,
        weight: Optional[Decimal] = None,
        notes: Optional[str] = None,
    ) -> Envelope[Pet]:
        """Register a pet for a client."""
        pass

    @abstractmethod
    def get_pet(self, pet_id: int) -> Envelope[Pet]:
        """Get pet by ID. Raises NotFoundError."""
        pass

    @abstractmethod
    def list_pets(self, client_id: Optional[int] = None) -> Envelope[list[Pet]]:
        """List pets, optionally for one client."""
        pass

    # Catalog operations
    @abstractmethod
    def list_catalog(self, path: str) -> Envelope[list[CatalogItem]]:
        """List entries of the catalog at ``path``."""
        pass

    @abstractmethod
    def create_catalog_item(self, path: str, name: str) -> Envelope[CatalogItem]:
        """Add an entry to the catalog at ``path``."""
        pass

    @abstractmethod
    def update_catalog_item(self, path: str, item_id: int, name: str) -> Envelope[CatalogItem]:
        """Rename an entry of the catalog at ``path``."""
        pass
