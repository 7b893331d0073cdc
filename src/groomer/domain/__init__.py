"""Domain layer for groomer application."""

from groomer.domain.appointment import AppointmentService
from groomer.domain.visit import VisitService
from groomer.domain.pets import PetService
from groomer.domain.catalog import NamedCatalog, catalog_for

__all__ = [
    "AppointmentService",
    "VisitService",
    "PetService",
    "NamedCatalog",
    "catalog_for",
]
