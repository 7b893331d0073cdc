"""Shared domain error messages and error types."""

from typing import Any, Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling. Errors that come back from the
    store keep the HTTP status (when there was one) and the decoded body so
    callers can display the original diagnostic.
    """

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        details: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.details = details


class ValidationError(DomainError):
    """Invalid input detected before anything is sent to the store."""


class NotFoundError(DomainError):
    """Referenced entity does not exist or is not visible to the caller."""


class ConflictError(DomainError):
    """Interval overlap or an illegal state transition reported by the store."""


class TransportError(DomainError):
    """Network, timeout or server-side failure. Retrying may help."""


class UnauthorizedError(DomainError):
    """Credentials missing, expired or insufficient."""


def appointment_not_found(appointment_id: int) -> str:
    """Return message for missing appointment."""
    return f"Appointment {appointment_id} not found"


def appointment_not_pending(appointment_id: int, status: str) -> str:
    """Return message for a transition out of a terminal state."""
    return f"Appointment {appointment_id} is {status}; only PENDING appointments can change"


def appointment_overlap(start: str, end: str, count: int) -> str:
    """Return message for an interval that intersects existing bookings."""
    return (
        f"Interval {start} - {end} overlaps {count} existing "
        f"appointment{'s' if count != 1 else ''}"
    )


def visit_not_found(visit_id: int) -> str:
    """Return message for missing visit."""
    return f"Visit {visit_id} not found"


def pet_not_found(pet_id: int) -> str:
    """Return message for missing pet."""
    return f"Pet {pet_id} not found"


def catalog_item_not_found(path: str, item_id: int) -> str:
    """Return message for missing catalog entry."""
    return f"Catalog entry {item_id} not found in '{path}'"
