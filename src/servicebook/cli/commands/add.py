"""Add ledger entry command."""

from pathlib import Path

import click
from servicebook.cli.error_handling import handle_domain_error, require_action_or_exit
from servicebook.cli.input_parsing import (
    parse_amount_or_exit,
    parse_date_or_exit,
    parse_month_or_exit,
)
from servicebook.cli.views import echo_transaction, transaction_view
from servicebook.domain.entities import TransactionKind
from servicebook.domain.errors import DomainError
from servicebook.domain.ledger import LedgerService
from servicebook.domain.roles import Action, project
from servicebook.utils.date_parser import month_key


@click.command("add")
@click.option(
    "--kind",
    type=click.Choice([k.value for k in TransactionKind]),
    default=TransactionKind.INCOME.value,
    show_default=True,
    help="Entry kind",
)
@click.option(
    "--date",
    "entry_date",
    help="Entry date (YYYY-MM-DD or relative like 'today', 'yesterday'). Defaults to today",
)
@click.option("--month", help="Target month for monthly entries (YYYY-MM or 'this month')")
@click.option("--amount", required=True, help="Amount (e.g., 1500 or 'Rs 1,500')")
@click.option("--customer", help="Customer name")
@click.option("--contact", help="Customer contact number")
@click.option("--vehicle", help="Vehicle, e.g. 'Corolla 2015'")
@click.option("--registration", help="Vehicle registration number")
@click.option("--service-type", help="Service performed, e.g. 'Oil change'")
@click.option("--distance", type=int, help="Odometer reading in km")
@click.option("--source", help="How the customer found the workshop")
@click.option("--note", help="Note (for income this is the service note)")
@click.option(
    "--bill",
    type=click.Path(exists=True, dir_okay=False),
    help="Bill image to attach (income only)",
)
@click.option(
    "--discount-given/--no-discount",
    default=None,
    help="Record whether the new customer discount was given",
)
@click.pass_context
def add_entry(
    ctx,
    kind: str,
    entry_date: str | None,
    month: str | None,
    amount: str,
    customer: str | None,
    contact: str | None,
    vehicle: str | None,
    registration: str | None,
    service_type: str | None,
    distance: int | None,
    source: str | None,
    note: str | None,
    bill: str | None,
    discount_given: bool | None,
):
    """Add an income, expense or monthly entry.

    Examples:
        servicebook add --amount 2500 --customer Ali --contact 0300-1234567 \\
            --vehicle "Civic 2018" --service-type "Oil change" --distance 10000
        servicebook add --kind expense --date yesterday --amount 800 --note "Parts"
        servicebook add --kind monthly-expense --month 2024-01 --amount 30000 --note Rent
    """
    txn_kind = TransactionKind(kind)
    require_action_or_exit(
        ctx,
        Action.CREATE_INCOME if txn_kind == TransactionKind.INCOME else Action.CREATE_EXPENSE,
    )
    role = ctx.obj["role"]
    service = LedgerService(ctx.obj["db"], blob_store=ctx.obj["blob_store"])

    txn_amount = parse_amount_or_exit(ctx, amount)
    occurred_on = parse_date_or_exit(ctx, entry_date)
    target_month = None
    if month is not None:
        target_month = month_key(*parse_month_or_exit(ctx, month))

    document = None
    if bill is not None:
        if txn_kind != TransactionKind.INCOME:
            click.echo("Error: Bills can only be attached to income", err=True)
            ctx.exit(1)
        path = Path(bill)
        document = (path.name, path.read_bytes())

    try:
        transaction_id = service.add_transaction(
            kind=txn_kind,
            amount=txn_amount,
            occurred_on=occurred_on,
            month_key=target_month,
            note=note,
            customer_name=customer,
            customer_contact=contact,
            vehicle=vehicle,
            registration_number=registration,
            service_type=service_type,
            distance=distance,
            acquisition_channel=source,
            document=document,
            discount_given=discount_given,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    txn = service.get_transaction(transaction_id)
    click.echo(f"Created {txn.kind.value} entry on {txn.occurred_on}")
    echo_transaction(project(role, transaction_view(txn)))
    if bill is not None and not txn.attached_document:
        click.echo("Warning: bill could not be stored, entry saved without it", err=True)

    discount = getattr(txn, "discount", None)
    if discount is not None and discount_given is None and discount.eligible and not discount.used:
        click.echo("New customer discount available (record with --discount-given/--no-discount)")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_entry)
