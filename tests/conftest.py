"""Shared pytest fixtures for groomer tests."""

import os
import tempfile
from datetime import datetime

import pytest

from groomer.domain.appointment import AppointmentService
from groomer.domain.pets import PetService
from groomer.domain.visit import VisitService
from groomer.store.factories import create_sqlite_store


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's GROOMER_* settings out of tests."""
    for name in (
        "GROOMER_API_URL",
        "GROOMER_DB_PATH",
        "GROOMER_TOKEN",
        "GROOMER_TIMEOUT",
        "GROOMER_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def temp_store():
    """Create a temporary SQLite store for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    store = create_sqlite_store(database_path=db_path)
    # Store the path for tests that drive the CLI against the same file
    store.database_path = db_path
    store.connect()

    yield store

    store.disconnect()
    store.session_factory.kw["bind"].dispose()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def appointment_service(temp_store):
    return AppointmentService(temp_store)


@pytest.fixture
def visit_service(temp_store):
    return VisitService(temp_store)


@pytest.fixture
def pet_service(temp_store):
    return PetService(temp_store)


@pytest.fixture
def sample_pet(pet_service):
    """Create a sample pet for testing."""
    return pet_service.create_pet(client_id=1, name="Firulais", species="DOG").data


@pytest.fixture
def other_pet(pet_service):
    return pet_service.create_pet(client_id=2, name="Michi", species="CAT").data


@pytest.fixture
def morning():
    """09:00 on a fixed Monday."""
    return datetime(2025, 3, 10, 9, 0)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
