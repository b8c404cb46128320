"""Main CLI entry point."""

import click
from lotledger.config.logging import configure_logging
from lotledger.database.factories import create_sqlite_database

# Import and register all commands at module level
from lotledger.cli.commands import (
    catalog,
    client,
    entity,
    lot,
    dashboard,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides LOTLEDGER_DB_PATH environment variable)",
    envvar="LOTLEDGER_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    envvar="LOTLEDGER_LOG_LEVEL",
    help="Log level (overrides LOTLEDGER_LOG_LEVEL environment variable)",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str | None):
    """Lotledger - Auction brokerage ledger.

    Track clients, auction entities and their lots, record purchases and
    payments, and keep each buyer's 0.5% commission in sync with the lots.
    """
    ctx.ensure_object(dict)
    configure_logging(level=log_level.upper() if log_level else None)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
client.register_commands(cli)
entity.register_commands(cli)
lot.register_commands(cli)
dashboard.register_commands(cli)
catalog.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
