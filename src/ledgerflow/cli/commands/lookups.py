"""Transaction type, category and payee commands."""

import click
from ledgerflow.cli.error_handling import handle_domain_error
from ledgerflow.domain.entities import BalanceEffect
from ledgerflow.domain.errors import DomainError
from ledgerflow.domain.lookups import CategoryService, PayeeService, TransactionTypeService


@click.group()
def type_group():
    """Manage transaction types."""
    pass


@type_group.command("init")
@click.pass_context
def init_types(ctx):
    """Create the default Income, Expense and Transfer types."""
    service = TransactionTypeService(ctx.obj["db"])
    created = service.init_defaults()
    if created:
        click.echo(f"Created transaction types: {', '.join(created)}")
    else:
        click.echo("Default transaction types already exist.")


@type_group.command("create")
@click.argument("name")
@click.option(
    "--effect",
    required=True,
    type=click.Choice([e.value for e in BalanceEffect], case_sensitive=False),
    help="Balance effect of the type",
)
@click.pass_context
def create_type(ctx, name: str, effect: str):
    """Create a transaction type."""
    service = TransactionTypeService(ctx.obj["db"])
    try:
        type_id = service.create_type(name, effect.lower())
        click.echo(f"Created transaction type '{name}' (ID: {type_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@type_group.command("list")
@click.pass_context
def list_types(ctx):
    """List transaction types."""
    types = TransactionTypeService(ctx.obj["db"]).list_types()
    if not types:
        click.echo("No transaction types found. Run 'ledgerflow type init' to create the defaults.")
        return
    for txn_type in types:
        click.echo(f"ID: {txn_type.id:3d} | {txn_type.name:20s} | {txn_type.balance_effect.value}")


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("create")
@click.argument("name")
@click.pass_context
def create_category(ctx, name: str):
    """Create a new category."""
    service = CategoryService(ctx.obj["db"])
    try:
        category_id = service.create_category(name)
        click.echo(f"Created category '{name}' (ID: {category_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@category_group.command("list")
@click.pass_context
def list_categories(ctx):
    """List all categories."""
    categories = CategoryService(ctx.obj["db"]).list_categories()
    if not categories:
        click.echo("No categories found.")
        return
    for category in categories:
        click.echo(f"ID: {category.id:3d} | {category.name}")


@click.group()
def payee_group():
    """Manage payees."""
    pass


@payee_group.command("create")
@click.argument("name")
@click.pass_context
def create_payee(ctx, name: str):
    """Create a new payee."""
    service = PayeeService(ctx.obj["db"])
    try:
        payee_id = service.create_payee(name)
        click.echo(f"Created payee '{name}' (ID: {payee_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@payee_group.command("list")
@click.pass_context
def list_payees(ctx):
    """List all payees."""
    payees = PayeeService(ctx.obj["db"]).list_payees()
    if not payees:
        click.echo("No payees found.")
        return
    for payee in payees:
        click.echo(f"ID: {payee.id:3d} | {payee.name}")


def register_commands(cli):
    """Register lookup table commands with main CLI."""
    cli.add_command(type_group, name="type")
    cli.add_command(category_group, name="category")
    cli.add_command(payee_group, name="payee")
