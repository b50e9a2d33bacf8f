"""Ledger viewing command."""

import click
from ledgerflow.cli.account_resolution import resolve_account_or_exit
from ledgerflow.cli.date_filters import period_option, resolve_cli_date_range
from ledgerflow.cli.formatting import format_transaction
from ledgerflow.domain.account import AccountService


@click.command("view")
@click.option("--account", help="Account name or ID")
@click.option("--start-date", help="Start date (YYYY-MM-DD)")
@click.option("--end-date", help="End date (YYYY-MM-DD)")
@period_option
@click.option("--verbose", "-v", is_flag=True, help="Show IDs, classification and source")
@click.pass_context
def view_transactions(
    ctx, account: str | None, start_date: str | None, end_date: str | None, period: str | None, verbose: bool
):
    """View ledger transactions, newest first."""
    db = ctx.obj["db"]
    account_service = AccountService(db)

    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, account_service, account)
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period=period
    )

    transactions = db.list_transactions(account_id=account_id, start_date=start, end_date=end)
    if not transactions:
        click.echo("No transactions found.")
        return

    accounts = account_service.account_names()
    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 100)
    click.echo(f"{'Date':<12} {'Amount':>16}  {'Description':<32} Account")
    click.echo("-" * 100)
    for txn in transactions:
        click.echo(f"{format_transaction(txn)} {accounts.get(txn.account_id, 'Unknown')}")
        if verbose:
            click.echo(f"    ID: {txn.id}")
            click.echo(f"    Original: {txn.original_description}")
            click.echo(
                f"    Type: {txn.type_id} | Category: {txn.category_id} | Payee: {txn.payee_id}"
                f" | Rule: {txn.applied_rule_id}"
            )
            click.echo(
                f"    Cash flow: {txn.cash_flow.value} | Liability: {txn.liability.value}"
                f" | Payment: {txn.is_payment} | Transfer: {txn.is_internal_transfer}"
            )
            if txn.source_label:
                click.echo(f"    Source: {txn.source_label}")


def register_commands(cli):
    """Register view command with main CLI."""
    cli.add_command(view_transactions)
