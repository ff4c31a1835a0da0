"""Employee commands."""

import click
from servicebook.cli.error_handling import handle_domain_error, require_action_or_exit
from servicebook.cli.input_parsing import parse_amount_or_exit, parse_date_or_exit
from servicebook.domain.employee import PAYMENT_TYPES, WEEKDAYS, EmployeeService
from servicebook.domain.entities import SalaryType
from servicebook.domain.errors import DomainError
from servicebook.domain.roles import Action
from servicebook.utils.amount_parser import format_amount


@click.group()
def employee_group():
    """Employees and salary payments."""
    pass


@employee_group.command("add")
@click.argument("name")
@click.option("--position", required=True, help="Job role, e.g. 'Mechanic'")
@click.option(
    "--salary-type",
    type=click.Choice([t.value for t in SalaryType]),
    default=SalaryType.MONTHLY.value,
    show_default=True,
)
@click.option("--monthly-salary", help="Monthly salary (monthly and mixed)")
@click.option("--daily-wage", help="Daily wage (daily and mixed)")
@click.option("--off-day", type=click.Choice(WEEKDAYS, case_sensitive=False), help="Weekly day off")
@click.option("--reason", help="Why the employee was hired")
@click.pass_context
def add_employee(
    ctx,
    name: str,
    position: str,
    salary_type: str,
    monthly_salary: str | None,
    daily_wage: str | None,
    off_day: str | None,
    reason: str | None,
):
    """Add an employee.

    Examples:
        servicebook employee add "Bilal" --position Mechanic --monthly-salary 40000
        servicebook employee add "Usman" --position Helper --salary-type daily --daily-wage 1500
    """
    require_action_or_exit(ctx, Action.MANAGE_EMPLOYEES)
    service = EmployeeService(ctx.obj["db"])
    try:
        employee_id = service.add_employee(
            name=name,
            role=position,
            salary_type=SalaryType(salary_type),
            monthly_salary=parse_amount_or_exit(ctx, monthly_salary) if monthly_salary else None,
            daily_wage=parse_amount_or_exit(ctx, daily_wage) if daily_wage else None,
            weekly_off_day=off_day,
            hiring_reason=reason,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    employee = service.get_employee(employee_id)
    click.echo(f"Added employee {employee.code} '{employee.name}' (ID: {employee.id})")


@employee_group.command("list")
@click.option("--all", "include_inactive", is_flag=True, help="Include removed employees")
@click.pass_context
def list_employees(ctx, include_inactive: bool):
    """List employees, newest first."""
    require_action_or_exit(ctx, Action.MANAGE_EMPLOYEES)
    employees = EmployeeService(ctx.obj["db"]).list_employees(include_inactive=include_inactive)
    if not employees:
        click.echo("No employees found.")
        return

    click.echo(f"{'ID':<5} {'Code':<9} {'Name':<22} {'Role':<15} {'Type':<8} {'Salary':>14}")
    click.echo("-" * 80)
    for employee in employees:
        if employee.salary_type == SalaryType.DAILY:
            salary = f"{format_amount(employee.daily_wage)}/day"
        else:
            salary = format_amount(employee.monthly_salary)
        line = (
            f"{employee.id:<5} {employee.code:<9} {employee.name:<22} {employee.role:<15} "
            f"{employee.salary_type.value:<8} {salary:>14}"
        )
        if not employee.active:
            line += "  (removed)"
        click.echo(line)


@employee_group.command("remove")
@click.argument("employee_id", type=int)
@click.pass_context
def remove_employee(ctx, employee_id: int):
    """Remove an employee. Salary history is kept."""
    require_action_or_exit(ctx, Action.MANAGE_EMPLOYEES)
    try:
        EmployeeService(ctx.obj["db"]).deactivate(employee_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Removed employee {employee_id}")


@employee_group.command("pay")
@click.argument("employee_id", type=int)
@click.option("--amount", required=True, help="Amount paid")
@click.option(
    "--type",
    "payment_type",
    type=click.Choice(PAYMENT_TYPES),
    default="monthly",
    show_default=True,
)
@click.option("--date", "payment_date", help="Payment date (defaults to today)")
@click.option("--notes", help="Notes")
@click.pass_context
def pay_employee(
    ctx,
    employee_id: int,
    amount: str,
    payment_type: str,
    payment_date: str | None,
    notes: str | None,
):
    """Record a salary payment."""
    require_action_or_exit(ctx, Action.MANAGE_EMPLOYEES)
    value = parse_amount_or_exit(ctx, amount)
    paid_on = parse_date_or_exit(ctx, payment_date)
    try:
        payment_id = EmployeeService(ctx.obj["db"]).pay_salary(
            employee_id, value, payment_type, payment_date=paid_on, notes=notes
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Recorded payment {payment_id}: {format_amount(value)} on {paid_on}")


@employee_group.command("payments")
@click.option("--employee", "employee_id", type=int, help="Only this employee")
@click.pass_context
def list_payments(ctx, employee_id: int | None):
    """List salary payments, newest first."""
    require_action_or_exit(ctx, Action.MANAGE_EMPLOYEES)
    service = EmployeeService(ctx.obj["db"])
    payments = service.list_payments(employee_id=employee_id)
    if not payments:
        click.echo("No payments found.")
        return

    codes = {e.id: e.code for e in service.list_employees(include_inactive=True)}
    for payment in payments:
        line = (
            f"{payment.id:<5} {str(payment.payment_date):<12} "
            f"{codes.get(payment.employee_id, '?'):<9} {payment.payment_type:<8} "
            f"{format_amount(payment.amount):>14}"
        )
        if payment.notes:
            line += f"  {payment.notes}"
        click.echo(line)


def register_commands(cli: click.Group) -> None:
    """Register employee commands with main CLI."""
    cli.add_command(employee_group, name="employee")
