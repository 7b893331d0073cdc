"""Pet commands."""

from typing import Optional

import click

from groomer.cli.error_handling import echo_warnings, handle_domain_error
from groomer.domain.entities import Pet
from groomer.domain.errors import DomainError
from groomer.domain.pets import SEARCH_LIMIT, PetService
from groomer.utils.amount_parser import parse_amount


def format_pet(pet: Pet) -> str:
    line = f"ID: {pet.id:4d} | {pet.code:10s} | {pet.name:20s} | Client: {pet.client_id}"
    if pet.species:
        line += f" | {pet.species}"
    return line


@click.group()
def pet_group():
    """Find and register pets."""
    pass


@pet_group.command("add")
@click.option("--client", "client_id", type=int, required=True, help="Client ID")
@click.option("--name", required=True, help="Pet name")
@click.option("--species", help="Species, e.g. DOG")
@click.option("--size", help="Size, e.g. SMALL")
@click.option("--temperament", help="Temperament")
@click.option("--weight", help="Weight in kg")
@click.option("--notes", help="Notes")
@click.pass_context
def add_pet(
    ctx,
    client_id: int,
    name: str,
    species: Optional[str],
    size: Optional[str],
    temperament: Optional[str],
    weight: Optional[str],
    notes: Optional[str],
):
    """Register a pet for a client."""
    service = PetService(ctx.obj["store"])
    parsed_weight = None
    if weight is not None:
        try:
            parsed_weight = parse_amount(weight)
        except ValueError as e:
            click.echo(f"Error: Invalid weight: {e}", err=True)
            ctx.exit(1)

    try:
        result = service.create_pet(
            client_id=client_id,
            name=name,
            species=species,
            size=size,
            temperament=temperament,
            weight=parsed_weight,
            notes=notes,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    echo_warnings(result)
    click.echo(f"Registered pet '{result.data.name}' (ID: {result.data.id}, code {result.data.code})")


@pet_group.command("show")
@click.argument("pet_id", type=int)
@click.pass_context
def show_pet(ctx, pet_id: int):
    """Show one pet."""
    service = PetService(ctx.obj["store"])
    try:
        pet = service.get_pet(pet_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(format_pet(pet))
    for label, value in (
        ("Size", pet.size),
        ("Temperament", pet.temperament),
        ("Weight", pet.weight),
        ("Notes", pet.notes),
    ):
        if value is not None:
            click.echo(f"  {label}: {value}")


@pet_group.command("list")
@click.option("--client", "client_id", type=int, help="Only pets of this client")
@click.pass_context
def list_pets(ctx, client_id: Optional[int]):
    """List pets."""
    service = PetService(ctx.obj["store"])
    try:
        result = service.list_pets(client_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    echo_warnings(result)
    if not result.data:
        click.echo("No pets found.")
        return
    for pet in result.data:
        click.echo(format_pet(pet))


@pet_group.command("search")
@click.argument("query")
@click.option("--limit", type=int, default=SEARCH_LIMIT, show_default=True, help="Maximum results")
@click.pass_context
def search_pets(ctx, query: str, limit: int):
    """Search pets by name, code, pet ID or client ID."""
    service = PetService(ctx.obj["store"])
    try:
        pets = service.search_pets(query, limit=limit)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not pets:
        click.echo(f"No pets match '{query}'.")
        return
    for pet in pets:
        click.echo(format_pet(pet))


def register_commands(cli):
    """Register pet commands with main CLI."""
    cli.add_command(pet_group, name="pet")
