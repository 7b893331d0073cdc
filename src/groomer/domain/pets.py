"""Pet lookups used by the booking workflow."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING, Callable, Optional

from groomer.domain.entities import Envelope, Pet
from groomer.domain.errors import ValidationError
from groomer.utils.coalesce import LatestQuery
from groomer.utils.memo import MemoTable

if TYPE_CHECKING:
    from groomer.store.base import Store

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 50


def pet_matches(pet: Pet, query: str) -> bool:
    """Case-insensitive match on name, code, pet ID or client ID."""
    q = query.strip().lower()
    if not q:
        return True
    return (
        q in (pet.name or "").lower()
        or q in (pet.code or "").lower()
        or q in str(pet.id)
        or q in str(pet.client_id)
    )


class PetService:
    """Service for finding pets to book or record visits for.

    Single-pet lookups are memoized per pet ID; concurrent lookups of the
    same pet share one store call.
    """

    def __init__(self, store: Store, cache_size: int = 256):
        self.store = store
        self._pets: MemoTable[int, Pet] = MemoTable(self._load_pet, maxsize=cache_size)

    def _load_pet(self, pet_id: int) -> Pet:
        return self.store.get_pet(pet_id).data

    def get_pet(self, pet_id: int) -> Pet:
        """Get pet by ID.

        Raises:
            NotFoundError: If the pet does not exist
        """
        return self._pets.get(pet_id)

    def forget(self, pet_id: Optional[int] = None) -> None:
        """Drop cached pets after they were changed elsewhere."""
        self._pets.invalidate(pet_id)

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
        """Register a pet for a client.

        Raises:
            ValidationError: If name is empty or weight is negative
        """
        if not name or not name.strip():
            raise ValidationError("Pet name cannot be empty")
        if weight is not None and weight < 0:
            raise ValidationError("Weight cannot be negative")
        result = self.store.create_pet(
            client_id=client_id,
            name=name.strip(),
            species=species,
            size=size,
            temperament=temperament,
            weight=weight,
            notes=notes,
        )
        logger.info("Registered pet %s (%s)", result.data.id, result.data.name)
        return result

    def list_pets(self, client_id: Optional[int] = None) -> Envelope[list[Pet]]:
        """List pets, optionally for one client."""
        return self.store.list_pets(client_id)

    def search_pets(self, query: str, limit: int = SEARCH_LIMIT) -> list[Pet]:
        """Filter all pets by ``query``; at most ``limit`` results."""
        pets = self.store.list_pets().data
        return [pet for pet in pets if pet_matches(pet, query)][:limit]


class PetPicker:
    """Search-as-you-type pet selection.

    Only the result of the newest query is kept in ``results``; slower
    answers to earlier queries are discarded.
    """

    def __init__(
        self,
        service: PetService,
        delay: float = 0.35,
        on_error: Optional[Callable[[Exception], None]] = None,
    ):
        self.service = service
        self.results: list[Pet] = []
        self.query = ""
        self.error: Optional[Exception] = None
        self._latest: LatestQuery[str, list[Pet]] = LatestQuery(
            fetch=self.service.search_pets,
            apply=self._apply,
            delay=delay,
            on_error=on_error or self._record_error,
        )

    def _apply(self, pets: list[Pet]) -> None:
        self.results = pets
        self.error = None

    def _record_error(self, error: Exception) -> None:
        logger.error("Pet search failed: %s", error)
        self.results = []
        self.error = error

    def search(self, query: str) -> int:
        """Submit a query; returns its generation number."""
        self.query = query
        return self._latest.submit(query)

    def close(self) -> None:
        self._latest.cancel()
