"""Store factory functions."""

import logging
from typing import Optional

from groomer.config import Settings
from groomer.session import SessionContext
from groomer.store.base import Store
from groomer.store.http_store import HttpStore
from groomer.store.sqlalchemy_store import SQLAlchemyStore

logger = logging.getLogger(__name__)


def create_sqlite_store(database_path: Optional[str] = None) -> SQLAlchemyStore:
    """Create a local SQLite store.

    Args:
        database_path: Path to SQLite database file. If None, checks
            GROOMER_DB_PATH, then defaults to ~/.groomer/groomer.db

    Returns:
        SQLAlchemyStore instance configured for SQLite
    """
    path = Settings.from_env(db_path=database_path).resolved_db_path()
    return SQLAlchemyStore(f"sqlite:///{path}")


def create_store(settings: Settings, session: Optional[SessionContext] = None) -> Store:
    """Create the store described by ``settings``.

    The REST backend is used when an API URL is configured; otherwise the
    local SQLite store.
    """
    if settings.uses_http:
        if session is None:
            session = SessionContext()
            if settings.token:
                session.start(settings.token)
        logger.debug("Using REST store at %s", settings.api_url)
        return HttpStore(settings.api_url, session=session, timeout=settings.timeout)

    path = settings.resolved_db_path()
    logger.debug("Using SQLite store at %s", path)
    return SQLAlchemyStore(f"sqlite:///{path}")
