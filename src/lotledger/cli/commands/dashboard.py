"""Dashboard command."""

import click
from lotledger.domain.balance import compute_financial_summary, compute_upcoming_deadline
from lotledger.domain.client import ClientService
from lotledger.domain.entities import DeadlineStatus, Namespace
from lotledger.domain.entity import EntityService
from lotledger.utils.money import format_currency

STATUS_LABELS = {
    DeadlineStatus.OVERDUE: "OVERDUE",
    DeadlineStatus.PENDING: "pending",
    DeadlineStatus.UPCOMING: "upcoming",
}


@click.command("dashboard")
@click.option(
    "--include-overdue",
    is_flag=True,
    help="Consider entities whose payment deadline has already passed",
)
@click.pass_context
def dashboard(ctx, include_overdue: bool):
    """Show balance totals and the next 70% payment due."""
    db = ctx.obj["db"]
    client_service = ClientService(db)
    entity_service = EntityService(db)

    for namespace in Namespace:
        summary = compute_financial_summary(client_service.list_clients(namespace))
        click.echo(f"\n{namespace.value.capitalize()} clients:")
        click.echo(f"  Total debit:  {format_currency(summary.total_debit)}")
        click.echo(f"  Total credit: {format_currency(summary.total_credit)}")
        click.echo(f"  Net balance:  {format_currency(summary.net_balance)}")

    upcoming = compute_upcoming_deadline(
        entity_service.list_entities(archived=None), include_overdue=include_overdue
    )
    click.echo("\nNext payment due:")
    if upcoming is None:
        click.echo("  None")
        return
    click.echo(
        f"  {upcoming.entity.name} / lot {upcoming.lot.lot_number} ({upcoming.lot.name}): "
        f"{format_currency(upcoming.lot.value70)} by {upcoming.deadline:%Y-%m-%d} "
        f"[{STATUS_LABELS[upcoming.status]}]"
    )


def register_commands(cli):
    """Register dashboard command with main CLI."""
    cli.add_command(dashboard)
