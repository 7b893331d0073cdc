"""Tests for settings resolution."""

import pytest

from groomer.config import DEFAULT_TIMEOUT, Settings


def test_defaults_use_local_store():
    settings = Settings.from_env()
    assert not settings.uses_http
    assert settings.timeout == DEFAULT_TIMEOUT
    assert settings.log_level == "WARNING"


def test_environment_is_read(monkeypatch):
    monkeypatch.setenv("GROOMER_API_URL", "http://localhost:8080/api/v1")
    monkeypatch.setenv("GROOMER_TOKEN", "secret")
    monkeypatch.setenv("GROOMER_TIMEOUT", "3.5")
    monkeypatch.setenv("GROOMER_LOG_LEVEL", "debug")
    settings = Settings.from_env()
    assert settings.uses_http
    assert settings.token == "secret"
    assert settings.timeout == 3.5
    assert settings.log_level == "DEBUG"


def test_overrides_win_over_environment(monkeypatch):
    monkeypatch.setenv("GROOMER_DB_PATH", "/tmp/env.db")
    assert Settings.from_env(db_path="/tmp/cli.db").resolved_db_path() == "/tmp/cli.db"
    assert Settings.from_env(db_path=None).db_path == "/tmp/env.db"


@pytest.mark.parametrize("value", ["soon", "0", "-2"])
def test_invalid_timeout(monkeypatch, value):
    monkeypatch.setenv("GROOMER_TIMEOUT", value)
    with pytest.raises(ValueError, match="GROOMER_TIMEOUT"):
        Settings.from_env()
