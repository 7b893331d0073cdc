"""Main CLI entry point."""

import logging

import click

from groomer.config import Settings
from groomer.session import SessionContext
from groomer.store.factories import create_store

# Import and register all commands at module level
from groomer.cli.commands import (
    appointment,
    visit,
    pet,
    catalog,
)


def configure_logging(level: str) -> None:
    """Configure root logging once for the CLI process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


@click.group()
@click.option(
    "--api-url",
    help="Grooming API base URL, e.g. http://localhost:8080/api/v1 (overrides GROOMER_API_URL)",
    envvar="GROOMER_API_URL",
)
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to local database file when no API URL is set (overrides GROOMER_DB_PATH)",
    envvar="GROOMER_DB_PATH",
)
@click.option("--token", help="Bearer token for the API (overrides GROOMER_TOKEN)", envvar="GROOMER_TOKEN")
@click.option("--timeout", type=float, help="Request timeout in seconds (overrides GROOMER_TIMEOUT)")
@click.option("--verbose", "-v", is_flag=True, help="Log debug output")
@click.pass_context
def cli(
    ctx,
    api_url: str | None,
    db_path: str | None,
    token: str | None,
    timeout: float | None,
    verbose: bool,
):
    """Groomer - appointments and visits for a grooming business.

    Book time slots, move them through their lifecycle, and record completed
    visits with their services and payments.
    """
    ctx.ensure_object(dict)

    try:
        settings = Settings.from_env(
            api_url=api_url,
            db_path=db_path,
            token=token,
            timeout=timeout,
            log_level="DEBUG" if verbose else None,
        )
    except ValueError as e:
        raise click.UsageError(str(e))
    configure_logging(settings.log_level)

    # Connect to the store only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        session = SessionContext()
        if settings.token:
            session.start(settings.token)
        store = create_store(settings, session=session)
        store.connect()
        ctx.obj["settings"] = settings
        ctx.obj["session"] = session
        ctx.obj["store"] = store
        ctx.call_on_close(store.disconnect)


# Register all commands
appointment.register_commands(cli)
visit.register_commands(cli)
pet.register_commands(cli)
catalog.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
