"""Customer commands."""

import click
from servicebook.cli.error_handling import handle_domain_error, require_action_or_exit
from servicebook.domain.customer import CustomerService
from servicebook.domain.errors import DomainError, NotFoundError, customer_not_found
from servicebook.domain.roles import Action, project
from servicebook.utils.amount_parser import format_amount


@click.group()
def customer_group():
    """Customers and their new customer discount."""
    pass


@customer_group.command("list")
@click.option("--search", help="Filter by name, contact or customer code")
@click.option("--verbose", "-v", is_flag=True, help="Show every visit")
@click.pass_context
def list_customers(ctx, search: str | None, verbose: bool):
    """Show the customer lead sheet, alphabetically."""
    require_action_or_exit(ctx, Action.VIEW_CUSTOMERS)
    service = CustomerService(ctx.obj["db"])

    entries = service.lead_sheet(search=search)
    if not entries:
        click.echo("No customers found.")
        return

    click.echo(f"\nFound {len(entries)} customer(s):")
    click.echo("-" * 80)
    click.echo(f"{'Code':<10} {'Name':<25} {'Contact':<16} {'Last visit':<12} {'Visits':>6}")
    click.echo("-" * 80)
    for entry in entries:
        view = project(ctx.obj["role"], entry)
        click.echo(
            f"{view['code']:<10} {view['name']:<25} {view.get('contact', ''):<16} "
            f"{str(view['recent_visit_date']):<12} {len(entry.visits):>6}"
        )
        if verbose and "visits" in view:
            for visit in entry.visits:
                click.echo(
                    f"    {visit.date}  {visit.vehicle:<20} {visit.service:<25} "
                    f"{format_amount(visit.amount)}"
                )


@customer_group.command("discount")
@click.argument("name")
@click.argument("contact")
@click.option("--eligible/--not-eligible", default=None, help="Eligible for the discount")
@click.option("--used/--unused", default=None, help="Discount has been used")
@click.option("--applied/--not-applied", default=None, help="Discount was applied to a bill")
@click.pass_context
def set_discount(
    ctx,
    name: str,
    contact: str,
    eligible: bool | None,
    used: bool | None,
    applied: bool | None,
):
    """Show or change a customer's new customer discount state.

    Flags that are not given keep their current value.

    Examples:
        servicebook customer discount Ali 0300-1234567
        servicebook customer discount Ali 0300-1234567 --used --applied
    """
    require_action_or_exit(ctx, Action.MANAGE_DISCOUNTS)
    service = CustomerService(ctx.obj["db"])

    current = service.get_customer(name, contact)
    if current is None:
        handle_domain_error(ctx, NotFoundError(customer_not_found(name, contact)))

    if eligible is not None or used is not None or applied is not None:
        try:
            current = service.set_discount_state(
                name,
                contact,
                eligible=current.discount.eligible if eligible is None else eligible,
                used=current.discount.used if used is None else used,
                applied=current.discount.applied if applied is None else applied,
            )
        except DomainError as e:
            handle_domain_error(ctx, e)

    discount = current.discount
    click.echo(f"{current.code} {current.name} ({current.contact})")
    click.echo(f"  Eligible: {'yes' if discount.eligible else 'no'}")
    click.echo(f"  Used:     {'yes' if discount.used else 'no'}")
    click.echo(f"  Applied:  {'yes' if discount.applied else 'no'}")


def register_commands(cli: click.Group) -> None:
    """Register customer commands with main CLI."""
    cli.add_command(customer_group, name="customer")
