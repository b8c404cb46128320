"""Entity (auction session) commands."""

import click
from lotledger.cli.error_handling import handle_domain_error
from lotledger.cli.parsing import parse_date_or_exit
from lotledger.cli.resolution import resolve_entity_or_exit
from lotledger.domain.balance import compute_entity_aggregates, payment_deadline
from lotledger.domain.commission import CommissionService, compute_commission
from lotledger.domain.entities import SyncAction, SyncOutcome
from lotledger.domain.entity import EntityService, sorted_lots
from lotledger.domain.errors import DomainError
from lotledger.utils.money import format_currency

SYNC_MESSAGES = {
    SyncAction.UPDATED: "Commission updated",
    SyncAction.REMOVED: "Commission removed",
    SyncAction.CREATED: "Commission added",
    SyncAction.CREATED_CLIENT: "Buyer client created with commission",
    SyncAction.NONE: "No commission",
}


def echo_sync(outcome: SyncOutcome) -> None:
    click.echo(f"{SYNC_MESSAGES[outcome.action]}: {format_currency(outcome.commission)}")


@click.group()
def entity_group():
    """Manage auction entities."""
    pass


@entity_group.command("create")
@click.argument("name", metavar="ENTITY_NAME")
@click.option("--date", "date_str", required=True, help="Auction date (YYYY-MM-DD)")
@click.option("--buyer", help="Buyer client name")
@click.pass_context
def create_entity(ctx, name: str, date_str: str, buyer: str | None):
    """Create a new entity.

    Examples:
        lotledger entity create "Auction-7" --date 2024-03-01 --buyer "Ahmed"
    """
    service = EntityService(ctx.obj["db"])
    auction_date = parse_date_or_exit(ctx, date_str, "auction date")
    try:
        entity_id = service.create_entity(name, auction_date, buyer_name=buyer)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created entity '{name.strip()}' (ID: {entity_id})")


@entity_group.command("list")
@click.option("--archived", is_flag=True, help="List fully archived entities instead")
@click.pass_context
def list_entities(ctx, archived: bool):
    """List entities with their active totals."""
    service = EntityService(ctx.obj["db"])
    entities = service.list_entities(archived=archived)
    if not entities:
        click.echo("No entities found.")
        return

    click.echo("\nEntities:")
    click.echo("-" * 100)
    for entity in entities:
        totals = compute_entity_aggregates(entity.lots, active_only=not archived)
        click.echo(
            f"{entity.id:<32} | {entity.name:20s} | {entity.auction_date:%Y-%m-%d} | "
            f"Buyer: {entity.buyer_name or '-':15s} | Total: {format_currency(totals.total_value)}"
        )


@entity_group.command("show")
@click.argument("entity", metavar="ENTITY")
@click.pass_context
def show_entity(ctx, entity: str):
    """Show an entity with its lots.

    ENTITY can be an entity name or ID.
    """
    service = EntityService(ctx.obj["db"])
    entity_id = resolve_entity_or_exit(ctx, service, entity)
    entity_obj = service.require_entity(entity_id)
    totals = compute_entity_aggregates(entity_obj.lots, active_only=True)

    click.echo(f"\n{entity_obj.name}")
    click.echo(f"  Auction date: {entity_obj.auction_date:%Y-%m-%d}")
    click.echo(f"  Payment deadline: {payment_deadline(entity_obj):%Y-%m-%d}")
    click.echo(f"  Buyer: {entity_obj.buyer_name or '-'}")
    click.echo("-" * 100)
    click.echo(
        f"{'ID':<16} {'Lot':<8} {'Name':<20} {'Qty':<8} {'Total':>14} {'30%':>12} {'70%':>12}  Status"
    )
    for lot in sorted_lots(entity_obj):
        status = []
        if lot.is_archived:
            status.append("loaded" if lot.loading_details else "archived")
        if lot.is_70_paid:
            status.append("70% paid")
        click.echo(
            f"{lot.id:<16} {lot.lot_number:<8} {lot.name[:20]:<20} {lot.quantity[:8]:<8} "
            f"{format_currency(lot.total_value):>14} {format_currency(lot.value30):>12} "
            f"{format_currency(lot.value70):>12}  {', '.join(status)}"
        )
    click.echo("-" * 100)
    click.echo(f"Active total: {format_currency(totals.total_value)}")
    click.echo(f"30% total: {format_currency(totals.total30)}")
    click.echo(f"70% total: {format_currency(totals.total70)}")
    click.echo(f"70% remaining: {format_currency(totals.remaining70)}")
    click.echo(f"Commission: {format_currency(compute_commission(entity_obj.lots))}")


@entity_group.command("edit")
@click.argument("entity", metavar="ENTITY")
@click.option("--name", help="New entity name")
@click.option("--buyer", help="New buyer name (empty string removes the buyer)")
@click.option("--date", "date_str", help="New auction date")
@click.pass_context
def edit_entity(ctx, entity: str, name: str | None, buyer: str | None, date_str: str | None):
    """Edit an entity and resync its commission."""
    service = EntityService(ctx.obj["db"])
    entity_id = resolve_entity_or_exit(ctx, service, entity)

    kwargs = {}
    if name is not None:
        kwargs["name"] = name
    if buyer is not None:
        kwargs["buyer_name"] = buyer
    if date_str is not None:
        kwargs["auction_date"] = parse_date_or_exit(ctx, date_str, "auction date")
    if not kwargs:
        click.echo("Error: Nothing to update. Use --name, --buyer or --date.", err=True)
        ctx.exit(1)

    try:
        outcome = service.update_entity(entity_id, **kwargs)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated entity {entity}")
    echo_sync(outcome)


@entity_group.command("delete")
@click.argument("entity", metavar="ENTITY")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_entity(ctx, entity: str, yes: bool) -> None:
    """Delete an entity and its lots."""
    service = EntityService(ctx.obj["db"])
    entity_id = resolve_entity_or_exit(ctx, service, entity)
    entity_obj = service.require_entity(entity_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete entity '{entity_obj.name}' and {len(entity_obj.lots)} lot(s)?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_entity(entity_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted entity '{entity_obj.name}'")


@entity_group.command("sync")
@click.argument("entity", metavar="ENTITY")
@click.pass_context
def sync_entity(ctx, entity: str):
    """Recompute an entity's buyer commission."""
    db = ctx.obj["db"]
    entity_id = resolve_entity_or_exit(ctx, EntityService(db), entity)
    try:
        outcome = CommissionService(db).sync_entity(entity_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    echo_sync(outcome)


def register_commands(cli):
    """Register entity commands with main CLI."""
    cli.add_command(entity_group, name="entity")
