"""Visit commands."""

from datetime import date
from decimal import Decimal
from typing import Optional

import click

from groomer.cli.date_filters import resolve_cli_window
from groomer.cli.error_handling import echo_warnings, handle_domain_error
from groomer.domain.entities import (
    Payment,
    PaymentMethod,
    PaymentStatus,
    TreatmentDetail,
    Visit,
    VisitItem,
    VisitItemCategory,
)
from groomer.domain.errors import DomainError
from groomer.domain.visit import VisitService
from groomer.utils.amount_parser import parse_amount
from groomer.utils.date_parser import parse_date, parse_datetime

CATEGORY_CHOICES = click.Choice([c.value for c in VisitItemCategory], case_sensitive=False)
PAY_STATUS_CHOICES = click.Choice([s.value for s in PaymentStatus], case_sensitive=False)
METHOD_CHOICES = click.Choice([m.value for m in PaymentMethod], case_sensitive=False)


def parse_item(text: str) -> VisitItem:
    """Parse ``CATEGORY:PRICE`` into a visit item.

    Raises:
        ValueError: If the category or the price is invalid
    """
    category, sep, price = text.partition(":")
    if not sep:
        raise ValueError(f"Expected CATEGORY:PRICE, got '{text}'")
    try:
        parsed_category = VisitItemCategory(category.strip().upper())
    except ValueError:
        raise ValueError(
            f"Unknown category '{category}'. Use one of: "
            f"{', '.join(c.value for c in VisitItemCategory)}"
        )
    return VisitItem(category=parsed_category, price=parse_amount(price))


def _reference(value: Optional[str]) -> tuple[Optional[int], Optional[str]]:
    """A number refers to a catalog entry; anything else is free text."""
    if value is None:
        return None, None
    value = value.strip()
    if value.isdigit():
        return int(value), None
    return None, value or None


def build_treatment(
    treatment_type: Optional[str], medicine: Optional[str], next_date: Optional[date]
) -> Optional[TreatmentDetail]:
    if treatment_type is None and medicine is None and next_date is None:
        return None
    type_id, type_text = _reference(treatment_type)
    medicine_id, medicine_text = _reference(medicine)
    return TreatmentDetail(
        treatment_type_id=type_id,
        treatment_type_text=type_text,
        medicine_id=medicine_id,
        medicine_text=medicine_text,
        next_date=next_date,
    )


def _collect_items(
    ctx,
    item_texts: tuple[str, ...],
    treatment_type: Optional[str],
    medicine: Optional[str],
    next_date: Optional[str],
) -> list[VisitItem]:
    try:
        items = [parse_item(text) for text in item_texts]
        detail = build_treatment(
            treatment_type, medicine, parse_date(next_date) if next_date else None
        )
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    if detail is None:
        return items
    if not any(item.category is VisitItemCategory.TREATMENT for item in items):
        click.echo("Error: Treatment options need a TREATMENT item.", err=True)
        ctx.exit(1)
    return [
        VisitItem(category=item.category, price=item.price, treatment_detail=detail)
        if item.category is VisitItemCategory.TREATMENT
        else item
        for item in items
    ]


def _build_payment(
    ctx, status: Optional[str], method: Optional[str], paid: Optional[str]
) -> Optional[Payment]:
    if status is None:
        if method is not None or paid is not None:
            click.echo("Error: --pay-method and --paid need --pay-status.", err=True)
            ctx.exit(1)
        return None
    amount: Optional[Decimal] = None
    if paid is not None:
        try:
            amount = parse_amount(paid)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)
    return Payment(
        status=PaymentStatus(status.upper()),
        method=PaymentMethod(method.upper()) if method else None,
        amount_paid=amount,
    )


def format_visit(visit: Visit) -> str:
    """One-line visit summary."""
    pet = visit.pet_name or f"Pet {visit.pet_id}"
    line = (
        f"ID: {visit.id:4d} | {visit.visited_at:%Y-%m-%d %H:%M} | {pet:20s} | "
        f"Total: {visit.total_amount:10,.2f}"
    )
    if visit.payment is not None:
        line += f" | {visit.payment.status.value}"
    if visit.is_walk_in:
        line += " | walk-in"
    return line


def _echo_visit_detail(visit: Visit) -> None:
    click.echo(format_visit(visit))
    if visit.appointment_id is not None:
        click.echo(f"  Appointment: {visit.appointment_id}")
    for item in visit.items:
        click.echo(f"  {item.category.value:10s} {item.price:10,.2f}")
        detail = item.treatment_detail
        if detail is not None:
            kind = detail.treatment_type_text or detail.treatment_type_id or "-"
            medicine = detail.medicine_text or detail.medicine_id or "-"
            click.echo(f"    Treatment: {kind} | Medicine: {medicine}")
            if detail.next_date:
                click.echo(f"    Next: {detail.next_date:%Y-%m-%d}")
    payment = visit.payment
    if payment is not None:
        method = payment.method.value if payment.method else "-"
        paid = payment.amount_paid or Decimal("0")
        balance = payment.balance if payment.balance is not None else Decimal("0")
        click.echo(
            f"  Payment: {payment.status.value} via {method} | "
            f"Paid: {paid:,.2f} | Balance: {balance:,.2f}"
        )
    if visit.notes:
        click.echo(f"  Notes: {visit.notes}")


@click.group()
def visit_group():
    """Record completed visits and payments."""
    pass


def _visit_options(func):
    """Options shared by create and update."""
    options = [
        click.option(
            "--item",
            "items",
            multiple=True,
            required=True,
            help="Service line as CATEGORY:PRICE (repeatable), e.g. BATH:35.00",
        ),
        click.option("--treatment-type", help="Treatment type ID or free text"),
        click.option("--medicine", help="Medicine ID or free text"),
        click.option("--next-date", help="Date of the next treatment"),
        click.option("--pay-status", type=PAY_STATUS_CHOICES, help="Payment status"),
        click.option("--pay-method", type=METHOD_CHOICES, help="Payment method"),
        click.option("--paid", help="Amount paid"),
        click.option("--notes", help="Notes"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@visit_group.command("create")
@click.option("--pet", "pet_id", type=int, required=True, help="Pet ID")
@click.option("--at", "visited_at", default="now", help="Visit time (default now)")
@click.option("--appointment", "appointment_id", type=int, help="Appointment this visit fulfils")
@click.option("--walk-in", is_flag=True, help="Create an attended appointment for a walk-in")
@_visit_options
@click.pass_context
def create_visit(
    ctx,
    pet_id: int,
    visited_at: str,
    appointment_id: Optional[int],
    walk_in: bool,
    items: tuple[str, ...],
    treatment_type: Optional[str],
    medicine: Optional[str],
    next_date: Optional[str],
    pay_status: Optional[str],
    pay_method: Optional[str],
    paid: Optional[str],
    notes: Optional[str],
):
    """Record a visit.

    Examples:
        groomer visit create --pet 7 --appointment 12 --item BATH:35 --item HAIRCUT:40 --pay-status PAID --pay-method CASH --paid 75
        groomer visit create --pet 7 --walk-in --item TREATMENT:25 --treatment-type "Deworming" --next-date "2025-06-01"
    """
    service = VisitService(ctx.obj["store"])
    try:
        at = parse_datetime(visited_at)
    except ValueError as e:
        click.echo(f"Error: Invalid date/time: {e}", err=True)
        ctx.exit(1)
    visit_items = _collect_items(ctx, items, treatment_type, medicine, next_date)
    payment = _build_payment(ctx, pay_status, pay_method, paid)

    try:
        result = service.create_visit(
            pet_id=pet_id,
            visited_at=at,
            items=visit_items,
            payment=payment,
            notes=notes,
            appointment_id=appointment_id,
            auto_create_appointment=walk_in,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    echo_warnings(result)
    click.echo(f"Created visit {result.data.id}")
    _echo_visit_detail(result.data)


@visit_group.command("update")
@click.argument("visit_id", type=int)
@click.option("--at", "visited_at", required=True, help="Visit time")
@_visit_options
@click.pass_context
def update_visit(
    ctx,
    visit_id: int,
    visited_at: str,
    items: tuple[str, ...],
    treatment_type: Optional[str],
    medicine: Optional[str],
    next_date: Optional[str],
    pay_status: Optional[str],
    pay_method: Optional[str],
    paid: Optional[str],
    notes: Optional[str],
):
    """Replace a visit's items, payment and notes.

    The given items replace all existing items.
    """
    service = VisitService(ctx.obj["store"])
    try:
        at = parse_datetime(visited_at)
    except ValueError as e:
        click.echo(f"Error: Invalid date/time: {e}", err=True)
        ctx.exit(1)
    visit_items = _collect_items(ctx, items, treatment_type, medicine, next_date)
    payment = _build_payment(ctx, pay_status, pay_method, paid)

    try:
        result = service.update_visit(
            visit_id, visited_at=at, items=visit_items, payment=payment, notes=notes
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    echo_warnings(result)
    click.echo(f"Updated visit {visit_id}")
    _echo_visit_detail(result.data)


@visit_group.command("show")
@click.argument("visit_id", type=int)
@click.pass_context
def show_visit(ctx, visit_id: int):
    """Show a visit with its items and payment."""
    service = VisitService(ctx.obj["store"])
    try:
        result = service.get_visit(visit_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    echo_warnings(result)
    _echo_visit_detail(result.data)


@visit_group.command("list")
@click.option("--pet", "pet_id", type=int, help="Whole history of this pet")
@click.option("--category", type=CATEGORY_CHOICES, help="Only visits with an item of this category")
@click.option("--day", "period", flag_value="day", help="Whole day of --date (default)")
@click.option("--week", "period", flag_value="week", help="Monday-Sunday week of --date")
@click.option("--month", "period", flag_value="month", help="Month of --date")
@click.option("--year", "period", flag_value="year", help="Year of --date")
@click.option("--date", "anchor", help="Reference date (default today)")
@click.option("--from", "start", help="Range start")
@click.option("--to", "end", help="Range end")
@click.pass_context
def list_visits(
    ctx,
    pet_id: Optional[int],
    category: Optional[str],
    period: Optional[str],
    anchor: Optional[str],
    start: Optional[str],
    end: Optional[str],
):
    """List visits of a pet, or visits in a date range.

    Examples:
        groomer visit list --pet 7 --category TREATMENT
        groomer visit list --month --date 2025-03-01
    """
    service = VisitService(ctx.obj["store"])
    chosen = VisitItemCategory(category.upper()) if category else None

    if pet_id is not None:
        range_start = range_end = None
    else:
        range_start, range_end = resolve_cli_window(
            ctx, period=period, anchor=anchor, start=start, end=end
        )

    try:
        result = service.list_visits(
            pet_id=pet_id, category=chosen, start=range_start, end=range_end
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    echo_warnings(result)
    if not result.data:
        click.echo("No visits found.")
        return

    total = sum((v.total_amount for v in result.data), Decimal("0"))
    click.echo(f"\nFound {len(result.data)} visit(s):")
    click.echo("-" * 80)
    for v in result.data:
        click.echo(format_visit(v))
    click.echo("-" * 80)
    click.echo(f"Total: {total:,.2f}")


def register_commands(cli):
    """Register visit commands with main CLI."""
    cli.add_command(visit_group, name="visit")
