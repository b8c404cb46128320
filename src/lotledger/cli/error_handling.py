"""CLI error handling helpers."""

import click

from lotledger.domain.errors import DomainError, ReconciliationError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    if isinstance(error, ReconciliationError):
        click.echo(f"Run 'lotledger entity sync {error.entity_id}' to retry.", err=True)
    ctx.exit(1)
