"""CLI helpers for parsing option values."""

from datetime import datetime
from decimal import Decimal

import click

from lotledger.domain.entities import TransactionItem
from lotledger.utils.date_parser import parse_date
from lotledger.utils.money import parse_amount


def parse_date_or_exit(ctx: click.Context, value: str, label: str = "date") -> datetime:
    """Parse a date option, or exit with a CLI error."""
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def parse_amount_or_exit(ctx: click.Context, value: str, label: str = "amount") -> Decimal:
    """Parse an amount option, or exit with a CLI error."""
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def parse_item_or_exit(ctx: click.Context, value: str, position: int) -> TransactionItem:
    """Parse a NAME:QUANTITY:PRICE_PER_KILO item option, or exit with a CLI error."""
    head, sep, price = value.rpartition(":")
    name, sep2, quantity = head.rpartition(":")
    if not sep or not sep2 or not name.strip():
        click.echo(
            f"Error: Invalid item '{value}': expected NAME:QUANTITY:PRICE_PER_KILO", err=True
        )
        ctx.exit(1)
    return TransactionItem(
        id=f"item{position}",
        name=name.strip(),
        quantity=parse_amount_or_exit(ctx, quantity, "item quantity"),
        price_per_kilo=parse_amount_or_exit(ctx, price, "item price"),
    )
