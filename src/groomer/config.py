"""Runtime settings resolved from the environment."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_TIMEOUT = 15.0


@dataclass(frozen=True)
class Settings:
    """Where the store lives and how to talk to it.

    When ``api_url`` is set the REST backend is used; otherwise a local
    SQLite store at ``db_path`` is.
    """

    api_url: Optional[str] = None
    db_path: Optional[str] = None
    token: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = "WARNING"

    @property
    def uses_http(self) -> bool:
        return bool(self.api_url)

    @classmethod
    def from_env(cls, **overrides) -> "Settings":
        """Build settings from GROOMER_* variables; non-None overrides win."""
        values = {
            "api_url": _clean(os.environ.get("GROOMER_API_URL")),
            "db_path": _clean(os.environ.get("GROOMER_DB_PATH")),
            "token": _clean(os.environ.get("GROOMER_TOKEN")),
            "timeout": _parse_timeout(os.environ.get("GROOMER_TIMEOUT")),
            "log_level": (_clean(os.environ.get("GROOMER_LOG_LEVEL")) or "WARNING").upper(),
        }
        for key, value in overrides.items():
            if value is not None:
                values[key] = value
        return cls(**values)

    def resolved_db_path(self) -> str:
        """Return the SQLite path, defaulting to ~/.groomer/groomer.db."""
        if self.db_path:
            return self.db_path
        db_dir = Path.home() / ".groomer"
        db_dir.mkdir(exist_ok=True)
        return str(db_dir / "groomer.db")


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _parse_timeout(value: Optional[str]) -> float:
    value = _clean(value)
    if value is None:
        return DEFAULT_TIMEOUT
    try:
        timeout = float(value)
    except ValueError:
        raise ValueError(f"GROOMER_TIMEOUT must be a number of seconds, got '{value}'")
    if timeout <= 0:
        raise ValueError("GROOMER_TIMEOUT must be positive")
    return timeout
