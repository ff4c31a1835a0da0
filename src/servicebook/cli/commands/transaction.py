"""Ledger entry management commands."""

import click
from servicebook.cli.error_handling import handle_domain_error, require_action_or_exit
from servicebook.cli.input_parsing import parse_date_or_exit
from servicebook.cli.views import echo_transaction, transaction_view
from servicebook.domain.errors import DomainError
from servicebook.domain.ledger import LedgerService
from servicebook.domain.roles import Action, project


@click.group()
def transaction_group():
    """Manage ledger entries."""
    pass


@transaction_group.command("list")
@click.option("--date", "entry_date", help="Date to show (defaults to today)")
@click.pass_context
def list_entries(ctx, entry_date: str | None):
    """List the entries of one date in the order they were added."""
    require_action_or_exit(ctx, Action.VIEW_ENTRIES)
    bucket = parse_date_or_exit(ctx, entry_date)
    service = LedgerService(ctx.obj["db"])

    entries = service.list_for_date(bucket)
    if not entries:
        click.echo(f"No entries for {bucket}.")
        return

    click.echo(f"\n{len(entries)} entry(ies) for {bucket}:")
    click.echo("-" * 80)
    for txn in entries:
        echo_transaction(project(ctx.obj["role"], transaction_view(txn)))


@transaction_group.command("delete")
@click.argument("entry_date")
@click.argument("transaction_id")
@click.pass_context
def delete_entry(ctx, entry_date: str, transaction_id: str) -> None:
    """Delete one entry from a date.

    Examples:
        servicebook transaction delete 2024-01-15 3f2a9c...
    """
    require_action_or_exit(ctx, Action.DELETE_ENTRY)
    bucket = parse_date_or_exit(ctx, entry_date)
    service = LedgerService(ctx.obj["db"])

    if not click.confirm(f"Are you sure you want to delete entry {transaction_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.remove_transaction(bucket, transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted entry {transaction_id}")


@transaction_group.command("clear")
@click.argument("entry_date")
@click.pass_context
def clear_date(ctx, entry_date: str) -> None:
    """Delete every entry of a date."""
    require_action_or_exit(ctx, Action.CLEAR_DATE)
    bucket = parse_date_or_exit(ctx, entry_date)
    service = LedgerService(ctx.obj["db"])

    if not click.confirm(f"Delete all entries for {bucket}?"):
        click.echo("Clear cancelled.")
        return

    try:
        count = service.clear_date(bucket)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted {count} entry(ies) for {bucket}")


@transaction_group.command("bill")
@click.argument("transaction_id")
@click.option("--ttl", type=int, default=3600, show_default=True, help="Link lifetime in seconds")
@click.pass_context
def show_bill(ctx, transaction_id: str, ttl: int) -> None:
    """Print a temporary link to the bill attached to an entry."""
    require_action_or_exit(ctx, Action.VIEW_DOCUMENTS)
    service = LedgerService(ctx.obj["db"], blob_store=ctx.obj["blob_store"])
    try:
        click.echo(service.document_url(transaction_id, ttl=ttl))
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
