"""Account management commands."""

import click
from ledgerflow.cli.error_handling import handle_domain_error
from ledgerflow.domain.account import AccountService
from ledgerflow.domain.entities import AccountCategory
from ledgerflow.domain.errors import DomainError
from ledgerflow.domain.normalizer import DEFAULT_CURRENCY


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--category",
    required=True,
    type=click.Choice([c.value for c in AccountCategory], case_sensitive=False),
    help="Account category; credit_card and loan accounts are liabilities",
)
@click.option(
    "--currency",
    envvar="LEDGERFLOW_CURRENCY",
    default=DEFAULT_CURRENCY,
    show_default=True,
    help="Currency code (overrides LEDGERFLOW_CURRENCY environment variable)",
)
@click.pass_context
def create_account(ctx, name: str, category: str, currency: str):
    """Create a new account.

    Examples:
        ledgerflow account create "Everyday Checking" --category checking
        ledgerflow account create "Rewards Visa" --category credit_card
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    try:
        account_id = service.create_account(name=name, category=category.lower(), currency=currency)
        click.echo(f"Created account '{name}' (ID: {account_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts."""
    db = ctx.obj["db"]
    service = AccountService(db)

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 60)
    for acc in accounts:
        click.echo(f"ID: {acc.id:3d} | {acc.name:20s} | {acc.category.value:12s} | {acc.currency}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
