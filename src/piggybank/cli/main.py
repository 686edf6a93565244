"""Main CLI entry point."""

import click

from piggybank.database.factories import (
    DEFAULT_OWNER_ID,
    create_database,
    create_sqlite_database,
)
from piggybank.logging_config import configure_logging, get_logger

# Import and register all commands at module level
from piggybank.cli.commands import (
    account,
    init_accounts,
    split,
    transaction,
)

logger = get_logger(__name__)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to SQLite database file (overrides PIGGYBANK_DB_PATH environment variable)",
    envvar="PIGGYBANK_DB_PATH",
)
@click.option(
    "--db-url",
    help="SQLAlchemy database URL; takes precedence over --db-path (PIGGYBANK_DB_URL)",
    envvar="PIGGYBANK_DB_URL",
)
@click.option(
    "--owner",
    type=click.UUID,
    default=str(DEFAULT_OWNER_ID),
    show_default=True,
    help="Owner ID whose ledger is used (PIGGYBANK_OWNER)",
    envvar="PIGGYBANK_OWNER",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging level for messages on stderr (PIGGYBANK_LOG_LEVEL)",
    envvar="PIGGYBANK_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, db_url: str | None, owner, log_level: str):
    """Piggybank - Double-entry bookkeeping for personal finances.

    Organize money in a chart of accounts and record balanced
    transactions made of two or more splits.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        if db_url:
            db = create_database(database_url=db_url)
        else:
            db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["owner_id"] = owner
        ctx.call_on_close(db.disconnect)
        logger.debug("Running '%s' for owner %s", ctx.invoked_subcommand, owner)


# Register all commands
account.register_commands(cli)
init_accounts.register_commands(cli)
split.register_commands(cli)
transaction.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
