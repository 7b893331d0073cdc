"""Appointment commands."""

from datetime import datetime, timedelta

import click

from groomer.cli.date_filters import resolve_cli_window
from groomer.cli.error_handling import echo_warnings, handle_domain_error
from groomer.domain.appointment import AppointmentService
from groomer.domain.booking import book_with_override
from groomer.domain.entities import Appointment, AppointmentStatus, PaymentMethod
from groomer.domain.errors import DomainError
from groomer.utils.amount_parser import parse_amount
from groomer.utils.date_parser import parse_datetime
from groomer.utils.time_windows import format_time_hhmm

STATUS_CHOICES = click.Choice([s.value for s in AppointmentStatus], case_sensitive=False)
METHOD_CHOICES = click.Choice([m.value for m in PaymentMethod], case_sensitive=False)


def _parse_interval(ctx, start: str, end: str | None, duration: int | None) -> tuple[datetime, datetime]:
    if end is not None and duration is not None:
        click.echo("Error: Use either --end or --duration, not both.", err=True)
        ctx.exit(1)
    try:
        start_at = parse_datetime(start)
        if end is not None:
            end_at = parse_datetime(end)
        else:
            end_at = start_at + timedelta(minutes=duration or 30)
    except ValueError as e:
        click.echo(f"Error: Invalid date/time: {e}", err=True)
        ctx.exit(1)
    return start_at, end_at


def _confirm_overlap(enabled: bool):
    def confirm(error: DomainError) -> bool:
        if not enabled:
            return False
        click.echo(f"Conflict: {error}", err=True)
        return click.confirm("Book anyway?", default=False)

    return confirm


def format_appointment(appt: Appointment) -> str:
    """One-line appointment summary."""
    line = (
        f"ID: {appt.id:4d} | {appt.start_at:%Y-%m-%d} "
        f"{format_time_hhmm(appt.start_at)}-{format_time_hhmm(appt.end_at)} | "
        f"Pet: {appt.pet_id:4d} | {appt.status.value:8s}"
    )
    if appt.notes:
        line += f" | {appt.notes}"
    return line


@click.group()
def appointment_group():
    """Book and manage appointments."""
    pass


@appointment_group.command("create")
@click.option("--pet", "pet_id", type=int, required=True, help="Pet ID")
@click.option("--start", required=True, help="Start (e.g. '2025-03-10T09:00' or 'tomorrow 09:00')")
@click.option("--end", help="End time (defaults to start + duration)")
@click.option("--duration", type=int, help="Duration in minutes (default 30)")
@click.option("--notes", help="Notes")
@click.option("--force", is_flag=True, help="Book even if the slot overlaps another booking")
@click.option("--confirm-overlap", is_flag=True, help="Ask before forcing on conflict")
@click.pass_context
def create_appointment(
    ctx,
    pet_id: int,
    start: str,
    end: str | None,
    duration: int | None,
    notes: str | None,
    force: bool,
    confirm_overlap: bool,
):
    """Book a new appointment.

    Examples:
        groomer appointment create --pet 7 --start "2025-03-10T09:00" --end "2025-03-10T09:30"
        groomer appointment create --pet 7 --start "tomorrow 10:00" --duration 45 --force
    """
    service = AppointmentService(ctx.obj["store"])
    start_at, end_at = _parse_interval(ctx, start, end, duration)

    try:
        result = book_with_override(
            lambda forced: service.create_appointment(
                pet_id=pet_id, start_at=start_at, end_at=end_at, notes=notes, force_overlap=forced
            ),
            _confirm_overlap(confirm_overlap),
            force_overlap=force,
        )
    except DomainError as e:
        handle_domain_error(ctx, e, offer_force=True)

    echo_warnings(result)
    click.echo(f"Created appointment {result.data.id}")
    click.echo(f"  {format_appointment(result.data)}")


@appointment_group.command("edit")
@click.argument("appointment_id", type=int)
@click.option("--start", required=True, help="New start")
@click.option("--end", help="New end")
@click.option("--duration", type=int, help="Duration in minutes (default 30)")
@click.option("--notes", help="Notes (replaces existing notes)")
@click.option("--force", is_flag=True, help="Accept an overlapping slot")
@click.option("--confirm-overlap", is_flag=True, help="Ask before forcing on conflict")
@click.pass_context
def edit_appointment(
    ctx,
    appointment_id: int,
    start: str,
    end: str | None,
    duration: int | None,
    notes: str | None,
    force: bool,
    confirm_overlap: bool,
):
    """Change time and notes of a pending appointment."""
    service = AppointmentService(ctx.obj["store"])
    start_at, end_at = _parse_interval(ctx, start, end, duration)

    try:
        result = book_with_override(
            lambda forced: service.edit_appointment(
                appointment_id, start_at=start_at, end_at=end_at, notes=notes, force_overlap=forced
            ),
            _confirm_overlap(confirm_overlap),
            force_overlap=force,
        )
    except DomainError as e:
        handle_domain_error(ctx, e, offer_force=True)

    echo_warnings(result)
    click.echo(f"Updated appointment {appointment_id}")
    click.echo(f"  {format_appointment(result.data)}")


@appointment_group.command("reschedule")
@click.argument("appointment_id", type=int)
@click.option("--start", required=True, help="New start")
@click.option("--end", help="New end")
@click.option("--duration", type=int, help="Duration in minutes (default 30)")
@click.option("--reason", required=True, help="Why the appointment moves")
@click.option("--force", is_flag=True, help="Accept an overlapping slot")
@click.option("--confirm-overlap", is_flag=True, help="Ask before forcing on conflict")
@click.pass_context
def reschedule_appointment(
    ctx,
    appointment_id: int,
    start: str,
    end: str | None,
    duration: int | None,
    reason: str,
    force: bool,
    confirm_overlap: bool,
):
    """Move a pending appointment to another slot, recording the reason."""
    service = AppointmentService(ctx.obj["store"])
    start_at, end_at = _parse_interval(ctx, start, end, duration)

    try:
        result = book_with_override(
            lambda forced: service.reschedule_appointment(
                appointment_id, start_at=start_at, end_at=end_at, reason=reason, force_overlap=forced
            ),
            _confirm_overlap(confirm_overlap),
            force_overlap=force,
        )
    except DomainError as e:
        handle_domain_error(ctx, e, offer_force=True)

    echo_warnings(result)
    click.echo(f"Rescheduled appointment {appointment_id}")
    click.echo(f"  {format_appointment(result.data)}")


@appointment_group.command("cancel")
@click.argument("appointment_id", type=int)
@click.option("--reason", required=True, help="Cancellation reason")
@click.option("--charge-method", type=METHOD_CHOICES, help="Method of a cancellation fee")
@click.option("--charge-amount", help="Amount of a cancellation fee")
@click.pass_context
def cancel_appointment(
    ctx,
    appointment_id: int,
    reason: str,
    charge_method: str | None,
    charge_amount: str | None,
):
    """Cancel a pending appointment, optionally recording a fee."""
    service = AppointmentService(ctx.obj["store"])

    amount = None
    if charge_amount is not None:
        try:
            amount = parse_amount(charge_amount)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)

    try:
        result = service.cancel_appointment(
            appointment_id,
            reason=reason,
            charge_method=charge_method.upper() if charge_method else None,
            charge_amount=amount,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    echo_warnings(result)
    click.echo(f"Canceled appointment {appointment_id}")
    if amount is not None:
        click.echo(f"  Cancellation fee: {amount:,.2f}")


@appointment_group.command("attend")
@click.argument("appointment_id", type=int)
@click.pass_context
def attend_appointment(ctx, appointment_id: int):
    """Mark a pending appointment as attended."""
    service = AppointmentService(ctx.obj["store"])
    try:
        result = service.attend_appointment(appointment_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    echo_warnings(result)
    click.echo(f"Appointment {appointment_id} marked as attended")


@appointment_group.command("show")
@click.argument("appointment_id", type=int)
@click.pass_context
def show_appointment(ctx, appointment_id: int):
    """Show one appointment."""
    service = AppointmentService(ctx.obj["store"])
    try:
        result = service.get_appointment(appointment_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    echo_warnings(result)
    click.echo(format_appointment(result.data))


@appointment_group.command("list")
@click.option("--day", "period", flag_value="day", help="Whole day of --date (default)")
@click.option("--week", "period", flag_value="week", help="Monday-Sunday week of --date")
@click.option("--month", "period", flag_value="month", help="Month of --date")
@click.option("--year", "period", flag_value="year", help="Year of --date")
@click.option("--date", "anchor", help="Reference date (default today)")
@click.option("--from", "start", help="Range start (overrides period)")
@click.option("--to", "end", help="Range end (overrides period)")
@click.option("--status", type=STATUS_CHOICES, help="Only this status")
@click.pass_context
def list_appointments(
    ctx,
    period: str | None,
    anchor: str | None,
    start: str | None,
    end: str | None,
    status: str | None,
):
    """List appointments in a day, week, month, year or explicit range.

    Examples:
        groomer appointment list
        groomer appointment list --week --date 2025-03-12
        groomer appointment list --from 2025-03-01 --to 2025-03-31 --status PENDING
    """
    service = AppointmentService(ctx.obj["store"])
    range_start, range_end = resolve_cli_window(
        ctx, period=period, anchor=anchor, start=start, end=end
    )

    try:
        result = service.list_appointments(
            range_start,
            range_end,
            status=AppointmentStatus(status.upper()) if status else None,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    echo_warnings(result)
    if not result.data:
        click.echo("No appointments found.")
        return

    click.echo(f"\nAppointments {range_start:%Y-%m-%d} to {range_end:%Y-%m-%d}:")
    click.echo("-" * 70)
    for appt in result.data:
        click.echo(format_appointment(appt))


def register_commands(cli):
    """Register appointment commands with main CLI."""
    cli.add_command(appointment_group, name="appointment")
