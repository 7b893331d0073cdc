"""Store layer for groomer application."""

from groomer.store.base import Store
from groomer.store.factories import create_sqlite_store, create_store

__all__ = ["Store", "create_sqlite_store", "create_store"]
