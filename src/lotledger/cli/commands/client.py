"""Client management commands."""

import click
from lotledger.cli.error_handling import handle_domain_error
from lotledger.cli.parsing import (
    parse_amount_or_exit,
    parse_date_or_exit,
    parse_item_or_exit,
)
from lotledger.cli.resolution import namespace_from_flag, resolve_client_or_exit
from lotledger.domain.client import ClientService
from lotledger.domain.entities import BalanceLabel, PaymentRequest
from lotledger.domain.errors import DomainError
from lotledger.utils.money import format_currency

BALANCE_LABELS = {
    BalanceLabel.DEBIT: "debit (مدين)",
    BalanceLabel.CREDIT: "credit (دائن)",
}

work_option = click.option(
    "--work", is_flag=True, help="Use work clients instead of advance clients"
)


def format_balance(service: ClientService, client) -> str:
    view = service.client_balance(client)
    return f"{format_currency(view.magnitude)} {BALANCE_LABELS[view.label]}"


@click.group()
def client_group():
    """Manage clients and their ledgers."""
    pass


@client_group.command("create")
@click.argument("name", metavar="CLIENT_NAME")
@click.option("--phone", help="Phone number")
@work_option
@click.pass_context
def create_client(ctx, name: str, phone: str | None, work: bool):
    """Create a new client.

    Examples:
        lotledger client create "Ahmed"
        lotledger client create "Workshop" --work --phone 0100000000
    """
    service = ClientService(ctx.obj["db"])
    namespace = namespace_from_flag(work)
    try:
        client_id = service.create_client(namespace, name, phone=phone)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created client '{name.strip()}' (ID: {client_id})")


@client_group.command("list")
@click.option("--archived", is_flag=True, help="List archived clients instead")
@work_option
@click.pass_context
def list_clients(ctx, archived: bool, work: bool):
    """List clients with their balances."""
    service = ClientService(ctx.obj["db"])
    clients = service.list_clients(namespace_from_flag(work), archived=archived)
    if not clients:
        click.echo("No clients found.")
        return

    click.echo("\nClients:")
    click.echo("-" * 80)
    for client in clients:
        buyer = " [buyer]" if client.is_buyer else ""
        click.echo(
            f"{client.id:<32} | {client.name + buyer:24s} | {format_balance(service, client)}"
        )


@client_group.command("show")
@click.argument("client", metavar="CLIENT")
@work_option
@click.pass_context
def show_client(ctx, client: str, work: bool):
    """Show a client's transactions and balance.

    CLIENT can be a client name or ID.
    """
    service = ClientService(ctx.obj["db"])
    namespace = namespace_from_flag(work)
    client_id = resolve_client_or_exit(ctx, service, namespace, client)
    client_obj = service.require_client(namespace, client_id)

    click.echo(f"\n{client_obj.name}")
    if client_obj.phone:
        click.echo(f"  Phone: {client_obj.phone}")
    if client_obj.is_archived:
        click.echo(f"  Archived ({client_obj.archive_type.value if client_obj.archive_type else '-'})")
    click.echo("-" * 100)
    if not client_obj.transactions:
        click.echo("No transactions.")
    for txn in client_obj.transactions:
        flags = "settled" if txn.is_settled else "open"
        if txn.is_commission:
            flags += ", commission"
        click.echo(
            f"{txn.id:<20} {txn.date:%Y-%m-%d}  {format_currency(txn.amount):>14}  "
            f"[{flags}] {txn.notes}"
        )
        for item in txn.items:
            click.echo(
                f"{'':<22}- {item.name}: {format_currency(item.quantity)} kg x "
                f"{format_currency(item.price_per_kilo)}"
            )
    click.echo("-" * 100)
    click.echo(f"Balance: {format_balance(service, client_obj)}")


@client_group.command("rename")
@click.argument("client", metavar="CLIENT")
@click.argument("new_name", metavar="NEW_NAME")
@work_option
@click.pass_context
def rename_client(ctx, client: str, new_name: str, work: bool) -> None:
    """Rename a client.

    Renaming an advance client also updates the buyer name of its entities.
    """
    service = ClientService(ctx.obj["db"])
    namespace = namespace_from_flag(work)
    client_id = resolve_client_or_exit(ctx, service, namespace, client)
    try:
        service.rename_client(namespace, client_id, new_name)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Renamed client to '{new_name.strip()}'")


@client_group.command("delete")
@click.argument("client", metavar="CLIENT")
@work_option
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_client(ctx, client: str, work: bool, yes: bool) -> None:
    """Delete a client and all its transactions."""
    service = ClientService(ctx.obj["db"])
    namespace = namespace_from_flag(work)
    client_id = resolve_client_or_exit(ctx, service, namespace, client)
    client_obj = service.require_client(namespace, client_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete client '{client_obj.name}' "
        f"and {len(client_obj.transactions)} transaction(s)?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_client(namespace, client_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted client '{client_obj.name}'")


@client_group.command("charge")
@click.argument("client", metavar="CLIENT")
@click.option("--amount", help="Amount owed by the client (e.g., 1,500.00); defaults to the items total")
@click.option(
    "--item",
    "items",
    multiple=True,
    help="Line item as NAME:QUANTITY:PRICE_PER_KILO (repeatable)",
)
@click.option("--notes", default="", help="Notes")
@click.option("--date", "date_str", default="today", help="Date (YYYY-MM-DD or 'today')")
@work_option
@click.pass_context
def charge_client(
    ctx,
    client: str,
    amount: str | None,
    items: tuple[str, ...],
    notes: str,
    date_str: str,
    work: bool,
):
    """Record a purchase (debit) on a client's ledger.

    Examples:
        lotledger client charge "Ahmed" --amount 1500 --notes "advance"
        lotledger client charge "Ahmed" --item "Copper:10:250" --item "Brass:4:120"
    """
    service = ClientService(ctx.obj["db"])
    namespace = namespace_from_flag(work)
    client_id = resolve_client_or_exit(ctx, service, namespace, client)
    txn_amount = parse_amount_or_exit(ctx, amount) if amount is not None else None
    txn_items = [parse_item_or_exit(ctx, value, index) for index, value in enumerate(items, 1)]
    txn_date = parse_date_or_exit(ctx, date_str)
    try:
        txn = service.add_purchase(
            namespace, client_id, amount=txn_amount, notes=notes, date=txn_date, items=txn_items
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Recorded purchase {txn.id}: {format_currency(txn.amount)}")


@client_group.command("pay")
@click.argument("client", metavar="CLIENT")
@click.option("--amount", required=True, help="Amount paid (sign is ignored)")
@click.option("--notes", default="", help="Notes")
@click.option("--date", "date_str", default="today", help="Date (YYYY-MM-DD or 'today')")
@click.option("--link", "linked_id", help="Purchase transaction ID this payment settles")
@work_option
@click.pass_context
def pay_client(
    ctx, client: str, amount: str, notes: str, date_str: str, linked_id: str | None, work: bool
):
    """Record a payment (credit) on a client's ledger.

    Examples:
        lotledger client pay "Ahmed" --amount 300
        lotledger client pay "Ahmed" --amount 300 --link 1700000000000
    """
    service = ClientService(ctx.obj["db"])
    namespace = namespace_from_flag(work)
    client_id = resolve_client_or_exit(ctx, service, namespace, client)
    payment = PaymentRequest(
        amount=parse_amount_or_exit(ctx, amount),
        notes=notes,
        date=parse_date_or_exit(ctx, date_str),
        linked_transaction_id=linked_id,
    )
    try:
        txn = service.add_payment(namespace, client_id, payment)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Recorded payment {txn.id}: {format_currency(txn.amount)}")
    if linked_id:
        click.echo(f"Marked transaction {linked_id} as settled")


@client_group.command("settle")
@click.argument("client", metavar="CLIENT")
@work_option
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def settle_client(ctx, client: str, work: bool, yes: bool):
    """Zero a client's balance and move it to the archive."""
    service = ClientService(ctx.obj["db"])
    namespace = namespace_from_flag(work)
    client_id = resolve_client_or_exit(ctx, service, namespace, client)
    client_obj = service.require_client(namespace, client_id)

    if not yes and not click.confirm(
        f"Settle '{client_obj.name}' ({format_balance(service, client_obj)}) and archive?"
    ):
        click.echo("Settlement cancelled.")
        return

    try:
        txn = service.settle_and_archive(client_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Settled '{client_obj.name}' with {format_currency(txn.amount)} and archived")


@client_group.command("restore")
@click.argument("client", metavar="CLIENT")
@work_option
@click.pass_context
def restore_client(ctx, client: str, work: bool):
    """Restore an archived client."""
    service = ClientService(ctx.obj["db"])
    namespace = namespace_from_flag(work)
    client_id = resolve_client_or_exit(ctx, service, namespace, client)
    try:
        service.restore_client(client_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Restored client {client}")


def register_commands(cli):
    """Register client commands with main CLI."""
    cli.add_command(client_group, name="client")
