"""Main CLI entry point."""

import click
from budgetledger.database.factories import create_sqlite_database
from budgetledger.logger import DEFAULT_LOG_LEVEL, configure_logging

# Import and register all commands at module level
from budgetledger.cli.commands import (
    owner,
    account,
    transaction,
    import_cmd,
    reconcile,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides BUDGETLEDGER_DB_PATH environment variable)",
    envvar="BUDGETLEDGER_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=DEFAULT_LOG_LEVEL,
    show_default=True,
    help="Log level for messages written to stderr",
    envvar="BUDGETLEDGER_LOG_LEVEL",
)
@click.option(
    "--log-json",
    is_flag=True,
    help="Write log messages as JSON lines",
    envvar="BUDGETLEDGER_LOG_JSON",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str, log_json: bool):
    """Budgetledger - Bank statement import and reconciliation.

    Import bank statements into account ledgers, review duplicates and
    matches against manual entries, keep transfers in sync across accounts,
    and reconcile against statements.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level, json_output=log_json)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
owner.register_commands(cli)
account.register_commands(cli)
transaction.register_commands(cli)
import_cmd.register_commands(cli)
reconcile.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
