"""Entity views rendered by the CLI."""

from dataclasses import asdict
from typing import Any

import click

from servicebook.domain.entities import (
    IncomeTransaction,
    MonthlyTransaction,
    Transaction,
)
from servicebook.utils.amount_parser import format_amount


def transaction_view(txn: Transaction) -> dict[str, Any]:
    """Flatten a ledger record into a view mapping."""
    view: dict[str, Any] = {
        "id": txn.id,
        "date": txn.occurred_on.isoformat(),
        "kind": txn.kind.value,
        "amount": txn.amount,
        "note": txn.note,
    }
    if isinstance(txn, MonthlyTransaction):
        view["month"] = txn.month_key
    if isinstance(txn, IncomeTransaction):
        if txn.customer is not None:
            view["customer"] = asdict(txn.customer)
        if txn.discount is not None:
            view["discount"] = asdict(txn.discount)
        view["attached_document"] = txn.attached_document
    return view


def echo_transaction(view: dict[str, Any]) -> None:
    """Print one projected transaction view."""
    line = f"{view['id']}  {view['kind']:<16}"
    if "amount" in view:
        line += f" {format_amount(view['amount']):>14}"
    if view.get("month"):
        line += f"  [{view['month']}]"
    click.echo(line)

    customer = view.get("customer")
    if customer:
        parts = [customer.get("name") or ""]
        if customer.get("contact"):
            parts.append(customer["contact"])
        if customer.get("code"):
            parts.append(customer["code"])
        click.echo(f"    Customer: {' | '.join(p for p in parts if p)}")
        vehicle = customer.get("vehicle") or customer.get("registration_number")
        if vehicle:
            click.echo(f"    Vehicle: {vehicle}")
        if customer.get("service_type"):
            click.echo(f"    Service: {customer['service_type']}")
        if customer.get("distance") is not None:
            click.echo(f"    Distance: {customer['distance']:,} km")
    if view.get("note"):
        click.echo(f"    Note: {view['note']}")
    discount = view.get("discount")
    if discount and discount.get("applied"):
        click.echo("    New customer discount applied")
    if view.get("attached_document"):
        click.echo("    Bill attached")
