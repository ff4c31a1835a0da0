"""Utility functions for servicebook."""

from servicebook.utils.date_parser import parse_date, parse_month, month_bounds, month_key
from servicebook.utils.amount_parser import parse_amount, round_to_unit, format_amount

__all__ = [
    "parse_date",
    "parse_month",
    "month_bounds",
    "month_key",
    "parse_amount",
    "round_to_unit",
    "format_amount",
]
