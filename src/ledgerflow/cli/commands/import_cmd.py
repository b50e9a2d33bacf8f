"""Statement import command."""

from dataclasses import replace

import click
from ledgerflow.cli.account_resolution import resolve_account_or_exit
from ledgerflow.cli.date_filters import resolve_cli_date_range
from ledgerflow.cli.error_handling import handle_domain_error
from ledgerflow.cli.formatting import format_transaction
from ledgerflow.domain.account import AccountService
from ledgerflow.domain.entities import ConflictType
from ledgerflow.domain.errors import DomainError
from ledgerflow.domain.import_service import ImportService, StagedImport

CONFLICT_LABELS = {
    ConflictType.NONE: "",
    ConflictType.BATCH: "dup in file",
    ConflictType.DATABASE: "in ledger",
    ConflictType.REVERSAL: "reversal?",
}


def print_staged(staged: StagedImport) -> None:
    """Print the verification table for a staged batch."""
    click.echo(f"\nStaged {len(staged.batch)} transaction(s) from '{staged.source_label}':")
    click.echo("-" * 100)
    click.echo(f"{'#':>4} {'':1} {'Date':<12} {'Amount':>16}  {'Description':<32} {'Conflict':<12} Rule")
    click.echo("-" * 100)
    for record in staged.batch:
        txn = record.transaction
        mark = "-" if record.is_ignored else "+"
        note = CONFLICT_LABELS[record.conflict]
        if record.outside_window:
            note = note or "out of range"
        rule = txn.applied_rule_id if txn.applied_rule_id is not None else ""
        click.echo(f"{record.staging_id:>4} {mark:1} {format_transaction(txn)} {note:<12} {rule}")

    reversals = staged.batch.reversal_candidates()
    if reversals:
        ids = ", ".join(str(r.staging_id) for r in reversals)
        click.echo(f"\nPossible reversals (charge and refund on the same day): {ids}")


@click.command("import")
@click.argument("statement_file", type=click.Path(exists=True, dir_okay=False, allow_dash=True))
@click.option("--account", required=True, help="Account name or ID to import into")
@click.option(
    "--user",
    envvar="LEDGERFLOW_USER",
    default="default",
    show_default=True,
    help="User the transactions belong to (overrides LEDGERFLOW_USER)",
)
@click.option("--include", type=int, multiple=True, help="Staging number to import even if flagged")
@click.option("--exclude", type=int, multiple=True, help="Staging number to skip")
@click.option("--start-date", help="Skip transactions before this date")
@click.option("--end-date", help="Skip transactions after this date")
@click.option("--dry-run", is_flag=True, help="Show the staged transactions without importing")
@click.option("--yes", "-y", is_flag=True, help="Import without asking for confirmation")
@click.pass_context
def import_statement(
    ctx,
    statement_file: str,
    account: str,
    user: str,
    include: tuple[int, ...],
    exclude: tuple[int, ...],
    start_date: str | None,
    end_date: str | None,
    dry_run: bool,
    yes: bool,
):
    """Import transactions from a bank or card statement export.

    Rows are normalized, classified by the stored rules and checked for
    duplicates. Records marked '-' are skipped: duplicates of the ledger
    or of an earlier row, rows a rule marked to skip, and rows outside the
    date range. Use --include/--exclude with the '#' numbers to override.

    Pass - as STATEMENT_FILE to read pasted text from stdin (with --yes).

    Examples:
        ledgerflow import checking.csv --account "Everyday Checking"
        pbpaste | ledgerflow import - --account 1 --yes
        ledgerflow import visa.csv --account 2 --exclude 4 --yes
    """
    db = ctx.obj["db"]
    service = ImportService(db)
    account_id = resolve_account_or_exit(ctx, AccountService(db), account)
    start, end = resolve_cli_date_range(ctx, start_date=start_date, end_date=end_date)

    try:
        if statement_file == "-":
            text = click.get_text_stream("stdin").read()
            staged = service.stage_text(
                text, account_id, user_id=user, start_date=start, end_date=end
            )
        else:
            staged = service.stage_file(
                statement_file, account_id, user_id=user, start_date=start, end_date=end
            )
        batch = staged.batch.set_ignored(include, False).set_ignored(exclude, True)
        staged = replace(staged, batch=batch)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    print_staged(staged)
    confirmed = staged.batch.confirmed()
    click.echo(f"\n{len(confirmed)} of {len(staged.batch)} transaction(s) selected for import.")

    if dry_run:
        click.echo("Dry run: nothing imported.")
        return
    if not confirmed:
        click.echo("Nothing to import.")
        return
    if not yes and not click.confirm(f"Import into '{staged.account.name}'?", default=True):
        click.echo("Import cancelled.")
        return

    result = service.commit(staged)
    click.echo("\nImport complete:")
    click.echo(f"  Added: {len(result.added)} transactions")
    click.echo(f"  Duplicates: {len(result.duplicates)}")
    for pair in result.duplicates:
        click.echo(f"    {format_transaction(pair.new)}", err=True)


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_statement)
