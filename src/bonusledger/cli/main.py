"""Main CLI entry point."""

import click
from bonusledger.database.factories import create_database
from bonusledger.logging_config import configure_logging

# Import and register all commands at module level
from bonusledger.cli.commands import (
    client,
    vin,
    purchase,
    sales,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to SQLite database file (overrides BONUSLEDGER_DB_PATH environment variable)",
    envvar="BONUSLEDGER_DB_PATH",
)
@click.option(
    "--database-url",
    help="SQLAlchemy database URL; takes precedence over --db-path",
    envvar="BONUSLEDGER_DATABASE_URL",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity",
    envvar="BONUSLEDGER_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, database_url: str | None, log_level: str):
    """Bonusledger - loyalty bonus ledger for retail clients.

    Record purchases, redeem and accrue bonuses, refund purchases and review
    daily sales.
    """
    ctx.ensure_object(dict)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        configure_logging(log_level)
        db = create_database(database_url=database_url, database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
client.register_commands(cli)
vin.register_commands(cli)
purchase.register_commands(cli)
sales.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
