"""Classification rule commands."""

import click
from ledgerflow.cli.account_resolution import resolve_account_or_exit
from ledgerflow.cli.error_handling import handle_domain_error
from ledgerflow.cli.formatting import format_rule, format_transaction
from ledgerflow.domain.account import AccountService
from ledgerflow.domain.errors import DomainError
from ledgerflow.domain.rule_service import RuleService


@click.group()
def rule_group():
    """Manage classification rules.

    Rules are evaluated in order; the first matching rule wins.
    """
    pass


@rule_group.command("import")
@click.argument("rule_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def import_rules(ctx, rule_file: str):
    """Append rules from a JSON file to the end of the rule order.

    The file holds a list of rule objects, for example:

    \b
        [{"name": "Streaming",
          "conditions": [{"field": "description", "operator": "contains",
                          "value": "netflix || hulu"}],
          "setCategoryId": 3}]
    """
    service = RuleService(ctx.obj["db"])
    try:
        rule_ids = service.import_file(rule_file)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Imported {len(rule_ids)} rule(s)")


@rule_group.command("list")
@click.pass_context
def list_rules(ctx):
    """List rules in evaluation order."""
    rules = RuleService(ctx.obj["db"]).list_rules()
    if not rules:
        click.echo("No rules found.")
        return
    for position, rule in enumerate(rules, start=1):
        click.echo(f"{position:3d}. (ID: {rule.id}) {format_rule(rule)}")


@rule_group.command("delete")
@click.argument("rule_id", type=int)
@click.pass_context
def delete_rule(ctx, rule_id: int):
    """Delete a rule."""
    service = RuleService(ctx.obj["db"])
    try:
        service.delete_rule(rule_id)
        click.echo(f"Deleted rule {rule_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@rule_group.command("move")
@click.argument("rule_id", type=int)
@click.argument("position", type=int)
@click.pass_context
def move_rule(ctx, rule_id: int, position: int):
    """Move a rule to POSITION (1 = evaluated first)."""
    service = RuleService(ctx.obj["db"])
    try:
        service.move_rule(rule_id, position)
        click.echo(f"Moved rule {rule_id} to position {position}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@rule_group.command("preview")
@click.argument("rule_id", type=int)
@click.option("--account", help="Only preview against this account (name or ID)")
@click.pass_context
def preview_rule(ctx, rule_id: int, account: str | None):
    """Show which ledger transactions a rule would change.

    Nothing is modified.
    """
    db = ctx.obj["db"]
    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, AccountService(db), account)

    try:
        pairs = RuleService(db).preview_rule(rule_id, account_id=account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not pairs:
        click.echo("Rule would not change any transactions.")
        return

    click.echo(f"Rule would change {len(pairs)} transaction(s):")
    for original, updated in pairs:
        click.echo(f"  {format_transaction(original)}")
        changes = []
        for field in ("category_id", "payee_id", "type_id", "description"):
            before, after = getattr(original, field), getattr(updated, field)
            if before != after:
                changes.append(f"{field}: {before} -> {after}")
        click.echo(f"      {'; '.join(changes)}")


def register_commands(cli):
    """Register rule commands with main CLI."""
    cli.add_command(rule_group, name="rule")
