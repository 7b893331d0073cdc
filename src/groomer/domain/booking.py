"""Booking conflict protocol.

The store owns the overlap decision. The caller only validates that an
interval is well formed and states whether an overlap is acceptable
(``force_overlap``); the store answers with a ConflictError or commits.
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, TypeVar

from groomer.domain.errors import (
    ConflictError,
    DomainError,
    NotFoundError,
    TransportError,
    ValidationError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def validate_interval(start_at: datetime, end_at: datetime) -> None:
    """Check an interval before it is sent anywhere.

    Raises:
        ValidationError: If either end is missing, zone-aware, or start >= end
    """
    if not isinstance(start_at, datetime) or not isinstance(end_at, datetime):
        raise ValidationError("Start and end must be date-times")
    if start_at.tzinfo is not None or end_at.tzinfo is not None:
        raise ValidationError("Start and end must be local times without a time zone")
    if start_at >= end_at:
        raise ValidationError(f"Start ({start_at:%Y-%m-%d %H:%M}) must be before end ({end_at:%Y-%m-%d %H:%M})")


@dataclass(frozen=True)
class BookingIntent:
    """Requested interval plus the caller's stance on overlaps."""

    start_at: datetime
    end_at: datetime
    force_overlap: bool = False

    def __post_init__(self):
        validate_interval(self.start_at, self.end_at)

    def with_override(self) -> "BookingIntent":
        return replace(self, force_overlap=True)


def book_with_override(
    attempt: Callable[[bool], T],
    confirm: Callable[[ConflictError], bool],
    force_overlap: bool = False,
) -> T:
    """Run a booking, offering to force it through on conflict.

    ``attempt`` is called with the force flag. If it raises ConflictError
    and ``confirm`` accepts, it is called once more with force set.

    Raises:
        ConflictError: If the conflict was not confirmed
    """
    try:
        return attempt(force_overlap)
    except ConflictError as e:
        if force_overlap or not confirm(e):
            raise
        logger.warning("Booking conflict confirmed by caller, retrying with override: %s", e)
        return attempt(True)


def offers_override(error: DomainError) -> bool:
    """True when the caller may retry the same request with force set."""
    return isinstance(error, ConflictError)


def is_retryable(error: DomainError) -> bool:
    """True when retrying the same request later may succeed."""
    return isinstance(error, TransportError)


def is_final(error: DomainError) -> bool:
    """True when retrying the same request is pointless."""
    return isinstance(error, (ValidationError, NotFoundError))
