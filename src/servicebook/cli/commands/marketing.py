"""Marketing spend commands."""

import click
from servicebook.cli.error_handling import handle_domain_error, require_action_or_exit
from servicebook.cli.input_parsing import (
    parse_amount_or_exit,
    parse_date_or_exit,
    parse_month_or_exit,
)
from servicebook.domain.errors import DomainError
from servicebook.domain.marketing import MarketingService
from servicebook.domain.roles import Action
from servicebook.utils.amount_parser import format_amount


@click.group()
def marketing_group():
    """Spend against the reserved marketing budget."""
    pass


@marketing_group.command("add")
@click.option("--date", "expense_date", help="Expense date (defaults to today)")
@click.option("--title", required=True, help="What the money was spent on")
@click.option("--amount", required=True, help="Amount spent")
@click.option("--notes", help="Notes")
@click.pass_context
def add_expense(ctx, expense_date: str | None, title: str, amount: str, notes: str | None):
    """Record marketing spend."""
    require_action_or_exit(ctx, Action.MANAGE_MARKETING)
    spent_on = parse_date_or_exit(ctx, expense_date)
    value = parse_amount_or_exit(ctx, amount)
    try:
        expense_id = MarketingService(ctx.obj["db"]).add_expense(
            expense_date=spent_on, title=title, amount=value, notes=notes
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created marketing expense {expense_id}: {title} {format_amount(value)}")


@marketing_group.command("list")
@click.option("--month", help="Month (YYYY-MM; defaults to this month)")
@click.pass_context
def list_expenses(ctx, month: str | None):
    """Show a month's marketing budget and spend."""
    require_action_or_exit(ctx, Action.MANAGE_MARKETING)
    year, month_number = parse_month_or_exit(ctx, month)
    service = MarketingService(ctx.obj["db"])

    status = service.budget_status(year, month_number)
    click.echo(f"\nMarketing {year:04d}-{month_number:02d}")
    click.echo("-" * 60)
    click.echo(f"  Budget:    {format_amount(status.budget)}")
    click.echo(f"  Spent:     {format_amount(status.spent)}")
    click.echo(f"  Remaining: {format_amount(status.remaining)}")
    if status.over_budget:
        click.echo("  Over budget!")

    expenses = service.list_for_month(year, month_number)
    if not expenses:
        click.echo("\nNo marketing expenses.")
        return
    click.echo("")
    for expense in expenses:
        click.echo(
            f"{expense.id:<5} {str(expense.expense_date):<12} {expense.title:<30} "
            f"{format_amount(expense.amount):>14}"
        )
        if expense.notes:
            click.echo(f"      {expense.notes}")


@marketing_group.command("delete")
@click.argument("expense_id", type=int)
@click.pass_context
def delete_expense(ctx, expense_id: int):
    """Delete a marketing expense."""
    require_action_or_exit(ctx, Action.MANAGE_MARKETING)
    if not click.confirm(f"Are you sure you want to delete marketing expense {expense_id}?"):
        click.echo("Deletion cancelled.")
        return
    try:
        MarketingService(ctx.obj["db"]).delete_expense(expense_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted marketing expense {expense_id}")


def register_commands(cli: click.Group) -> None:
    """Register marketing commands with main CLI."""
    cli.add_command(marketing_group, name="marketing")
