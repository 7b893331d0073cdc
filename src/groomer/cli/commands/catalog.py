"""Catalog commands for zones, treatment types and medicines."""

import click

from groomer.cli.error_handling import echo_warnings, handle_domain_error
from groomer.domain.catalog import CATALOGS, catalog_for
from groomer.domain.errors import DomainError

PATH_CHOICES = click.Choice(sorted(CATALOGS))


@click.group()
def catalog_group():
    """Manage named catalogs."""
    pass


@catalog_group.command("list")
@click.argument("path", type=PATH_CHOICES)
@click.pass_context
def list_catalog(ctx, path: str):
    """List entries of a catalog.

    Example:
        groomer catalog list medicines
    """
    catalog = catalog_for(path, ctx.obj["store"])
    try:
        result = catalog.list()
    except DomainError as e:
        handle_domain_error(ctx, e)

    echo_warnings(result)
    if not result.data:
        click.echo(f"No entries in {path}.")
        return
    for item in result.data:
        click.echo(f"ID: {item.id:4d} | {item.name}")


@catalog_group.command("create")
@click.argument("path", type=PATH_CHOICES)
@click.argument("name")
@click.pass_context
def create_catalog_item(ctx, path: str, name: str):
    """Add an entry to a catalog."""
    catalog = catalog_for(path, ctx.obj["store"])
    try:
        result = catalog.create(name)
    except DomainError as e:
        handle_domain_error(ctx, e)

    echo_warnings(result)
    click.echo(f"Created {catalog.label.lower()} '{result.data.name}' (ID: {result.data.id})")


@catalog_group.command("update")
@click.argument("path", type=PATH_CHOICES)
@click.argument("item_id", type=int)
@click.argument("name")
@click.pass_context
def update_catalog_item(ctx, path: str, item_id: int, name: str):
    """Rename a catalog entry."""
    catalog = catalog_for(path, ctx.obj["store"])
    try:
        result = catalog.update(item_id, name)
    except DomainError as e:
        handle_domain_error(ctx, e)

    echo_warnings(result)
    click.echo(f"Updated {catalog.label.lower()} {item_id} to '{result.data.name}'")


def register_commands(cli):
    """Register catalog commands with main CLI."""
    cli.add_command(catalog_group, name="catalog")
