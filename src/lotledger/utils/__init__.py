"""Utility functions for lotledger."""

from lotledger.utils.date_parser import parse_date, format_date, days_between
from lotledger.utils.money import parse_amount, format_currency
from lotledger.utils.lot_numbers import lot_number_sort_key
from lotledger.utils.ids import fresh_id

__all__ = [
    "parse_date",
    "format_date",
    "days_between",
    "parse_amount",
    "format_currency",
    "lot_number_sort_key",
    "fresh_id",
]
