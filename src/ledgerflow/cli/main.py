"""Main CLI entry point."""

import click
from ledgerflow.database.factories import create_sqlite_database
from ledgerflow.logging_setup import LOG_LEVEL_ENV_VAR, configure_logging

# Import and register all commands at module level
from ledgerflow.cli.commands import (
    account,
    lookups,
    rule,
    import_cmd,
    reconcile,
    view,
)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides LEDGERFLOW_DB_PATH environment variable)",
    envvar="LEDGERFLOW_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    envvar=LOG_LEVEL_ENV_VAR,
    default="WARNING",
    show_default=True,
    help="Logging verbosity (overrides LEDGERFLOW_LOG_LEVEL environment variable)",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str):
    """Ledgerflow - Bank statement import and reconciliation.

    Import CSV exports from banks and card issuers into a local ledger,
    classify them with ordered rules, skip duplicates, and reconcile the
    ledger against later statements.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
lookups.register_commands(cli)
rule.register_commands(cli)
import_cmd.register_commands(cli)
reconcile.register_commands(cli)
view.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
