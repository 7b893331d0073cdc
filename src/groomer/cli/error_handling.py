"""CLI error handling helpers."""

import click

from groomer.domain.booking import is_retryable, offers_override
from groomer.domain.entities import Envelope
from groomer.domain.errors import DomainError, UnauthorizedError


def handle_domain_error(
    ctx: click.Context, error: DomainError | ValueError, offer_force: bool = False
) -> None:
    """Render a domain error and exit with failure.

    Args:
        ctx: Click context
        error: The error to report
        offer_force: The command books a slot and accepts --force
    """
    click.echo(f"Error: {error}", err=True)
    if isinstance(error, DomainError):
        if offer_force and offers_override(error):
            click.echo("Use --force to book anyway.", err=True)
        elif is_retryable(error):
            click.echo("The store could not be reached or failed; try again later.", err=True)
        elif isinstance(error, UnauthorizedError):
            click.echo("Sign in again (set GROOMER_TOKEN or pass --token).", err=True)
    ctx.exit(1)


def echo_warnings(envelope: Envelope) -> None:
    """Print warnings attached to a store response."""
    for warning in envelope.warnings:
        click.echo(f"Warning: {warning}", err=True)
