"""Tests for CLI commands run against a temporary local store."""

from datetime import datetime

import pytest

from groomer.cli.main import cli
from groomer.domain.entities import AppointmentStatus


@pytest.fixture
def run(cli_runner, temp_store):
    """Invoke the CLI against the temporary store."""

    def invoke(*args, **kwargs):
        return cli_runner.invoke(cli, ["--db-path", temp_store.database_path, *args], **kwargs)

    return invoke


def created_id(output):
    """Extract the ID from 'Created appointment 3' style output."""
    first = output.strip().splitlines()[0]
    return int(first.rsplit(" ", 1)[-1])


def test_help_does_not_need_store(cli_runner):
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "appointment" in result.output
    assert "visit" in result.output


def test_appointment_lifecycle(run, sample_pet, appointment_service):
    result = run(
        "appointment", "create", "--pet", str(sample_pet.id),
        "--start", "2025-03-10T09:00", "--end", "2025-03-10T09:30",
    )
    assert result.exit_code == 0, result.output
    appointment_id = created_id(result.output)
    assert "PENDING" in result.output

    result = run("appointment", "list", "--week", "--date", "2025-03-12")
    assert result.exit_code == 0
    assert f"ID: {appointment_id:4d}" in result.output

    result = run("appointment", "attend", str(appointment_id))
    assert result.exit_code == 0
    assert "attended" in result.output

    status = appointment_service.get_appointment(appointment_id).data.status
    assert status is AppointmentStatus.ATTENDED

    result = run("appointment", "attend", str(appointment_id))
    assert result.exit_code == 1
    assert "only PENDING" in result.output


def test_conflict_hint_and_force(run, sample_pet, other_pet):
    args = ["--start", "2025-03-10T09:00", "--duration", "30"]
    assert run("appointment", "create", "--pet", str(sample_pet.id), *args).exit_code == 0

    result = run("appointment", "create", "--pet", str(other_pet.id), *args)
    assert result.exit_code == 1
    assert "overlaps" in result.output
    assert "--force" in result.output

    result = run("appointment", "create", "--pet", str(other_pet.id), *args, "--force")
    assert result.exit_code == 0
    assert "Warning:" in result.output


def test_confirm_overlap_prompt(run, sample_pet, other_pet):
    args = ["--start", "2025-03-10T09:00", "--duration", "30"]
    run("appointment", "create", "--pet", str(sample_pet.id), *args)

    result = run(
        "appointment", "create", "--pet", str(other_pet.id), *args, "--confirm-overlap",
        input="y\n",
    )
    assert result.exit_code == 0, result.output
    assert "Created appointment" in result.output


def test_reschedule_and_cancel(run, sample_pet):
    result = run(
        "appointment", "create", "--pet", str(sample_pet.id), "--start", "2025-03-10T09:00"
    )
    appointment_id = created_id(result.output)

    result = run(
        "appointment", "reschedule", str(appointment_id),
        "--start", "2025-03-11T10:00", "--reason", "Owner traveling",
    )
    assert result.exit_code == 0, result.output
    assert "2025-03-11 10:00-10:30" in result.output

    result = run(
        "appointment", "cancel", str(appointment_id), "--reason", "No show",
        "--charge-method", "cash", "--charge-amount", "S/ 10",
    )
    assert result.exit_code == 0, result.output
    assert "Cancellation fee: 10.00" in result.output

    result = run("appointment", "show", str(appointment_id))
    assert "CANCELED" in result.output


def test_period_and_range_are_exclusive(run):
    result = run("appointment", "list", "--day", "--from", "2025-03-01")
    assert result.exit_code == 1
    assert "cannot be combined" in result.output


def test_invalid_start_time(run, sample_pet):
    result = run("appointment", "create", "--pet", str(sample_pet.id), "--start", "whenever")
    assert result.exit_code == 1
    assert "Invalid date/time" in result.output


def test_visit_create_and_show(run, sample_pet):
    result = run(
        "visit", "create", "--pet", str(sample_pet.id), "--at", "2025-03-10T09:00",
        "--item", "BATH:35", "--item", "haircut:40",
        "--pay-status", "PARTIAL", "--pay-method", "CARD", "--paid", "30",
    )
    assert result.exit_code == 0, result.output
    visit_id = created_id(result.output)
    assert "Balance: 45.00" in result.output

    result = run("visit", "show", str(visit_id))
    assert "75.00" in result.output
    assert "HAIRCUT" in result.output

    result = run("visit", "list", "--pet", str(sample_pet.id))
    assert "Found 1 visit(s)" in result.output


def test_visit_walk_in_with_treatment(run, sample_pet):
    result = run(
        "visit", "create", "--pet", str(sample_pet.id), "--at", "2025-03-10T09:00",
        "--walk-in", "--item", "TREATMENT:25", "--treatment-type", "Deworming",
        "--next-date", "2025-06-10",
    )
    assert result.exit_code == 0, result.output
    assert "Appointment:" in result.output
    assert "Treatment: Deworming" in result.output
    assert "Next: 2025-06-10" in result.output

    result = run("visit", "list", "--month", "--date", "2025-03-01", "--category", "TREATMENT")
    assert "Found 1 visit(s)" in result.output


def test_visit_bad_item(run, sample_pet):
    result = run("visit", "create", "--pet", str(sample_pet.id), "--item", "NAILS:10")
    assert result.exit_code == 1
    assert "Unknown category" in result.output


def test_visit_inconsistent_payment(run, sample_pet):
    result = run(
        "visit", "create", "--pet", str(sample_pet.id), "--item", "BATH:35",
        "--pay-status", "PAID", "--paid", "20",
    )
    assert result.exit_code == 1
    assert "PAID payment must cover" in result.output


def test_pet_commands(run):
    result = run("pet", "add", "--client", "4", "--name", "Toby", "--species", "DOG")
    assert result.exit_code == 0, result.output
    assert "Registered pet 'Toby'" in result.output

    result = run("pet", "search", "tob")
    assert "Toby" in result.output

    result = run("pet", "show", "999")
    assert result.exit_code == 1
    assert "Pet 999 not found" in result.output


def test_catalog_commands(run):
    result = run("catalog", "create", "medicines", "Drontal")
    assert result.exit_code == 0, result.output

    result = run("catalog", "create", "medicines", "drontal")
    assert result.exit_code == 1

    result = run("catalog", "list", "medicines")
    assert "Drontal" in result.output

    result = run("catalog", "list", "colors")
    assert result.exit_code == 2
