"""Statement reconciliation command."""

import click
from ledgerflow.cli.account_resolution import resolve_account_or_exit
from ledgerflow.cli.date_filters import period_option, resolve_cli_date_range
from ledgerflow.cli.error_handling import handle_domain_error
from ledgerflow.cli.formatting import format_transaction
from ledgerflow.domain.account import AccountService
from ledgerflow.domain.errors import DomainError
from ledgerflow.domain.reconcile_service import ReconciliationService


@click.command("reconcile")
@click.argument("statement", type=click.File("r", encoding="utf-8-sig"))
@click.option("--account", required=True, help="Account name or ID to reconcile")
@click.option("--start-date", help="Start of the ledger view (YYYY-MM-DD)")
@click.option("--end-date", help="End of the ledger view (YYYY-MM-DD)")
@period_option
@click.pass_context
def reconcile_statement(
    ctx, statement, account: str, start_date: str | None, end_date: str | None, period: str | None
):
    """Compare a statement with the ledger.

    STATEMENT is a CSV/TSV file, or '-' to read pasted text from stdin.
    Entries match when their dates are at most two days apart and their
    amounts differ by less than a cent.
    """
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, AccountService(db), account)
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period=period
    )

    try:
        result = ReconciliationService(db).reconcile_text(
            statement.read(), account_id, start_date=start, end_date=end
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"\nMatched: {len(result.matched)}")
    for pair in result.matched:
        click.echo(f"  {format_transaction(pair.statement)}")

    click.echo(f"\nOn statement but not in ledger: {len(result.missing_in_app)}")
    for txn in result.missing_in_app:
        click.echo(f"  {format_transaction(txn)}")

    click.echo(f"\nIn ledger but not on statement: {len(result.missing_in_statement)}")
    for txn in result.missing_in_statement:
        click.echo(f"  {format_transaction(txn)}")

    if result.is_clean:
        click.echo("\nStatement and ledger agree.")


def register_commands(cli):
    """Register reconcile command with main CLI."""
    cli.add_command(reconcile_statement)
