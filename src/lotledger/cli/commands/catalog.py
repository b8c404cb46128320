"""Catalog commands for predefined item and buyer names."""

import click
from lotledger.cli.error_handling import handle_domain_error
from lotledger.domain.catalog import CatalogService
from lotledger.domain.entities import CatalogKind
from lotledger.domain.errors import DomainError

kind_argument = click.argument(
    "kind", type=click.Choice([kind.value for kind in CatalogKind]), metavar="KIND"
)


@click.group()
def catalog_group():
    """Manage predefined item and buyer names.

    KIND is 'item' or 'buyer'.
    """
    pass


@catalog_group.command("add")
@kind_argument
@click.argument("name", metavar="NAME")
@click.pass_context
def add_entry(ctx, kind: str, name: str):
    """Add a name to the catalog.

    Examples:
        lotledger catalog add item "Copper"
        lotledger catalog add buyer "Ahmed"
    """
    service = CatalogService(ctx.obj["db"])
    try:
        entry = service.add_entry(CatalogKind(kind), name)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Added {kind} '{entry.name}' (ID: {entry.id})")


@catalog_group.command("list")
@kind_argument
@click.option("--match", help="Only names containing this text")
@click.pass_context
def list_entries(ctx, kind: str, match: str | None):
    """List catalog names."""
    service = CatalogService(ctx.obj["db"])
    entries = service.list_entries(CatalogKind(kind), match=match)
    if not entries:
        click.echo(f"No {kind} names found.")
        return
    for entry in entries:
        click.echo(f"{entry.id:<32} | {entry.name}")


@catalog_group.command("delete")
@kind_argument
@click.argument("entry", metavar="NAME_OR_ID")
@click.pass_context
def delete_entry(ctx, kind: str, entry: str):
    """Remove a name from the catalog."""
    service = CatalogService(ctx.obj["db"])
    try:
        service.delete_entry(CatalogKind(kind), entry)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Removed {kind} '{entry}'")


def register_commands(cli):
    """Register catalog commands with main CLI."""
    cli.add_command(catalog_group, name="catalog")
