"""Named catalogs: zones, treatment types and medicines."""

from __future__ import annotations

import logging
import unicodedata
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

from groomer.domain.entities import CatalogItem, Envelope
from groomer.domain.errors import ValidationError

if TYPE_CHECKING:
    from groomer.store.base import Store

logger = logging.getLogger(__name__)


def normalize_name(name: str) -> str:
    """Lowercase, accent-free, single-spaced form used for uniqueness."""
    decomposed = unicodedata.normalize("NFKD", name)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return " ".join(stripped.lower().split())


class NamedCatalog(ABC):
    """A list of named entries addressed by a resource path.

    Subclasses bind one concrete catalog by providing ``path`` and ``label``.
    """

    def __init__(self, store: Store):
        self.store = store

    @property
    @abstractmethod
    def path(self) -> str:
        """Resource path of the catalog, e.g. "zones"."""

    @property
    @abstractmethod
    def label(self) -> str:
        """Human-readable catalog name."""

    def list(self) -> Envelope[list[CatalogItem]]:
        return self.store.list_catalog(self.path)

    def create(self, name: str) -> Envelope[CatalogItem]:
        clean = self._clean(name)
        result = self.store.create_catalog_item(self.path, clean)
        logger.info("Added '%s' to %s (ID: %s)", clean, self.path, result.data.id)
        return result

    def update(self, item_id: int, name: str) -> Envelope[CatalogItem]:
        clean = self._clean(name)
        result = self.store.update_catalog_item(self.path, item_id, clean)
        logger.info("Renamed %s entry %s to '%s'", self.path, item_id, clean)
        return result

    def find(self, name: str) -> Optional[CatalogItem]:
        """Return the entry whose normalized name matches ``name``."""
        wanted = normalize_name(name)
        for item in self.list().data:
            if normalize_name(item.normalized_name or item.name) == wanted:
                return item
        return None

    def _clean(self, name: str) -> str:
        clean = " ".join((name or "").split())
        if not clean:
            raise ValidationError(f"{self.label} name cannot be empty")
        return clean


class ZoneCatalog(NamedCatalog):
    path = "zones"
    label = "Zone"


class TreatmentTypeCatalog(NamedCatalog):
    path = "treatment-types"
    label = "Treatment type"


class MedicineCatalog(NamedCatalog):
    path = "medicines"
    label = "Medicine"


CATALOGS: dict[str, type[NamedCatalog]] = {
    cls.path: cls for cls in (ZoneCatalog, TreatmentTypeCatalog, MedicineCatalog)
}


def catalog_for(path: str, store: Store) -> NamedCatalog:
    """Return the catalog bound to ``path``.

    Raises:
        ValidationError: If no catalog lives at ``path``
    """
    try:
        return CATALOGS[path](store)
    except KeyError:
        raise ValidationError(
            f"Unknown catalog '{path}'. Known catalogs: {', '.join(sorted(CATALOGS))}"
        )
