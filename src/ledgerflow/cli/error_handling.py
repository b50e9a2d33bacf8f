"""CLI error handling helpers."""

import click

from ledgerflow.domain.errors import DomainError, StatementParseError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    if isinstance(error, StatementParseError) and error.retryable:
        click.echo("Fix the statement text and run the command again.", err=True)
    ctx.exit(1)
