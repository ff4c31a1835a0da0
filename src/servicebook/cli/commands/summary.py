"""Summary commands."""

import click
from servicebook.cli.error_handling import require_action_or_exit
from servicebook.cli.input_parsing import parse_date_or_exit, parse_month_or_exit
from servicebook.domain.aggregation import AggregationService
from servicebook.domain.roles import Action
from servicebook.utils.amount_parser import format_amount, round_to_unit


def _echo_totals(totals) -> None:
    click.echo(f"  Income:           {format_amount(totals.income)}")
    click.echo(f"  Expense:          {format_amount(totals.expense)}")
    click.echo(f"  Gross profit:     {format_amount(totals.gross_profit)}")
    click.echo(f"  Marketing budget: Rs {round_to_unit(totals.marketing_budget):,}")
    click.echo(f"  Net profit:       {format_amount(totals.net_profit)}")


@click.group()
def summary_group():
    """Show profit summaries."""
    pass


@summary_group.command("day")
@click.option("--date", "entry_date", help="Date to summarize (defaults to today)")
@click.pass_context
def day_summary(ctx, entry_date: str | None):
    """Totals for one day, with 20% of a positive gross profit set aside for marketing."""
    require_action_or_exit(ctx, Action.VIEW_DAILY_SUMMARY)
    bucket = parse_date_or_exit(ctx, entry_date)
    totals = AggregationService(ctx.obj["db"]).daily_totals(bucket)

    click.echo(f"\nSummary for {bucket} ({totals.entry_count} entry(ies))")
    click.echo("-" * 40)
    _echo_totals(totals)


@summary_group.command("month")
@click.option("--month", help="Month to summarize (YYYY-MM, 'last month'; defaults to this month)")
@click.option("--calendar", "show_calendar", is_flag=True, help="List the days that have entries")
@click.pass_context
def month_summary(ctx, month: str | None, show_calendar: bool):
    """Totals for a calendar month.

    The marketing budget is the sum of each day's own reservation.
    """
    require_action_or_exit(ctx, Action.VIEW_MONTHLY_SUMMARY)
    year, month_number = parse_month_or_exit(ctx, month)
    service = AggregationService(ctx.obj["db"])
    totals = service.monthly_totals(year, month_number)

    click.echo(f"\nSummary for {totals.month_key} ({totals.saved_date_count} saved date(s))")
    click.echo("-" * 40)
    _echo_totals(totals)

    if show_calendar:
        click.echo("\nDays with entries:")
        for day in service.date_indicators(year, month_number):
            markers = []
            if day.has_income:
                markers.append("income")
            if day.has_expense:
                markers.append("expense")
            click.echo(f"  {day.date}  {', '.join(markers)}")


def register_commands(cli: click.Group) -> None:
    """Register summary commands with main CLI."""
    cli.add_command(summary_group, name="summary")
