"""CLI helpers for parsing dates, months and amounts."""

from datetime import date
from decimal import Decimal

import click

from servicebook.utils.amount_parser import parse_amount
from servicebook.utils.date_parser import parse_date, parse_month


def parse_date_or_exit(ctx: click.Context, value: str | None, label: str = "date") -> date:
    """Parse a date option, defaulting to today, or exit with a CLI error."""
    if value is None:
        return date.today()
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def parse_month_or_exit(ctx: click.Context, value: str | None) -> tuple[int, int]:
    """Parse a month option, defaulting to the current month."""
    if value is None:
        today = date.today()
        return today.year, today.month
    try:
        return parse_month(value)
    except ValueError as e:
        click.echo(f"Error: Invalid month: {e}", err=True)
        ctx.exit(1)


def parse_amount_or_exit(ctx: click.Context, value: str) -> Decimal:
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)
