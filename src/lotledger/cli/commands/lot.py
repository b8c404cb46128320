"""Lot commands."""

import click
from lotledger.cli.error_handling import handle_domain_error
from lotledger.cli.parsing import parse_amount_or_exit, parse_date_or_exit
from lotledger.cli.resolution import resolve_entity_or_exit
from lotledger.domain.entity import EntityService
from lotledger.domain.errors import DomainError
from lotledger.utils.money import format_currency


@click.group()
def lot_group():
    """Manage lots within an entity."""
    pass


@lot_group.command("add")
@click.argument("entity", metavar="ENTITY")
@click.option("--number", "lot_number", required=True, help="Lot number")
@click.option("--name", required=True, help="Lot name")
@click.option("--total", required=True, help="Total lot value")
@click.option("--value30", required=True, help="30% down payment value")
@click.option("--value70", help="70% remainder (defaults to total - value30)")
@click.option("--quantity", default="", help="Quantity (free text)")
@click.pass_context
def add_lot(
    ctx,
    entity: str,
    lot_number: str,
    name: str,
    total: str,
    value30: str,
    value70: str | None,
    quantity: str,
):
    """Add a lot to an entity.

    Examples:
        lotledger lot add "Auction-7" --number 12 --name "Copper" --total 10000 --value30 3000
    """
    service = EntityService(ctx.obj["db"])
    entity_id = resolve_entity_or_exit(ctx, service, entity)
    total_value = parse_amount_or_exit(ctx, total, "total")
    v30 = parse_amount_or_exit(ctx, value30, "value30")
    v70 = parse_amount_or_exit(ctx, value70, "value70") if value70 is not None else None
    try:
        lot = service.add_lot(
            entity_id,
            lot_number=lot_number,
            name=name,
            total_value=total_value,
            value30=v30,
            value70=v70,
            quantity=quantity,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Added lot {lot.lot_number} (ID: {lot.id})")
    click.echo(f"  Total: {format_currency(lot.total_value)}")
    click.echo(f"  30%: {format_currency(lot.value30)}  70%: {format_currency(lot.value70)}")


@lot_group.command("edit")
@click.argument("entity", metavar="ENTITY")
@click.argument("lot_id", metavar="LOT_ID")
@click.option("--number", "lot_number", help="New lot number")
@click.option("--name", help="New lot name")
@click.option("--quantity", help="New quantity")
@click.option("--total", help="New total value")
@click.option("--value30", help="New 30% value")
@click.option("--value70", help="New 70% value (defaults to total - value30)")
@click.pass_context
def edit_lot(
    ctx,
    entity: str,
    lot_id: str,
    lot_number: str | None,
    name: str | None,
    quantity: str | None,
    total: str | None,
    value30: str | None,
    value70: str | None,
):
    """Edit a lot."""
    service = EntityService(ctx.obj["db"])
    entity_id = resolve_entity_or_exit(ctx, service, entity)
    try:
        lot = service.update_lot(
            entity_id,
            lot_id,
            lot_number=lot_number,
            name=name,
            quantity=quantity,
            total_value=parse_amount_or_exit(ctx, total, "total") if total else None,
            value30=parse_amount_or_exit(ctx, value30, "value30") if value30 else None,
            value70=parse_amount_or_exit(ctx, value70, "value70") if value70 else None,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated lot {lot.lot_number}")


@lot_group.command("delete")
@click.argument("entity", metavar="ENTITY")
@click.argument("lot_id", metavar="LOT_ID")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_lot(ctx, entity: str, lot_id: str, yes: bool):
    """Delete a lot."""
    service = EntityService(ctx.obj["db"])
    entity_id = resolve_entity_or_exit(ctx, service, entity)
    if not yes and not click.confirm(f"Are you sure you want to delete lot {lot_id}?"):
        click.echo("Deletion cancelled.")
        return
    try:
        service.delete_lot(entity_id, lot_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted lot {lot_id}")


@lot_group.command("archive")
@click.argument("entity", metavar="ENTITY")
@click.argument("lot_id", metavar="LOT_ID")
@click.pass_context
def archive_lot(ctx, entity: str, lot_id: str):
    """Toggle a lot between archived and active."""
    service = EntityService(ctx.obj["db"])
    entity_id = resolve_entity_or_exit(ctx, service, entity)
    try:
        lot = service.toggle_lot_archive(entity_id, lot_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    state = "archived" if lot.is_archived else "active"
    click.echo(f"Lot {lot.lot_number} is now {state}")


@lot_group.command("load")
@click.argument("entity", metavar="ENTITY")
@click.argument("lot_id", metavar="LOT_ID")
@click.option("--loader", required=True, help="Name of who loaded the lot")
@click.option("--date", "date_str", default="today", help="Loading date")
@click.pass_context
def load_lot(ctx, entity: str, lot_id: str, loader: str, date_str: str):
    """Mark a lot as loaded (this archives it)."""
    service = EntityService(ctx.obj["db"])
    entity_id = resolve_entity_or_exit(ctx, service, entity)
    loading_date = parse_date_or_exit(ctx, date_str, "loading date")
    try:
        lot = service.mark_lot_loaded(entity_id, lot_id, loader, loading_date)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Lot {lot.lot_number} loaded by {loader}")


@lot_group.command("pay70")
@click.argument("entity", metavar="ENTITY")
@click.argument("lot_id", metavar="LOT_ID")
@click.option("--payer", required=True, help="Name of who paid the 70% remainder")
@click.option("--date", "date_str", default="today", help="Payment date")
@click.pass_context
def pay70_lot(ctx, entity: str, lot_id: str, payer: str, date_str: str):
    """Mark a lot's 70% remainder as paid."""
    service = EntityService(ctx.obj["db"])
    entity_id = resolve_entity_or_exit(ctx, service, entity)
    payment_date = parse_date_or_exit(ctx, date_str, "payment date")
    try:
        lot = service.mark_70_paid(entity_id, lot_id, payer, payment_date)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Lot {lot.lot_number}: 70% ({format_currency(lot.value70)}) paid by {payer}")


def register_commands(cli):
    """Register lot commands with main CLI."""
    cli.add_command(lot_group, name="lot")
