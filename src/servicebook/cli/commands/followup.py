"""Follow-up commands."""

import click
from servicebook.cli.error_handling import handle_domain_error, require_action_or_exit
from servicebook.cli.input_parsing import parse_date_or_exit
from servicebook.domain.entities import FollowUpStatus
from servicebook.domain.errors import DomainError
from servicebook.domain.followup import FollowUpService, reminder_link, reminder_message
from servicebook.domain.roles import Action, project


def _due_text(days: int) -> str:
    if days < 0:
        return f"{-days} day(s) overdue"
    if days == 0:
        return "due today"
    return f"in {days} day(s)"


@click.group()
def followup_group():
    """Predicted next services."""
    pass


@followup_group.command("list")
@click.option(
    "--status",
    type=click.Choice([s.value for s in FollowUpStatus]),
    help="Show only one urgency",
)
@click.option("--search", help="Filter by name, contact, vehicle or registration")
@click.option("--as-of", help="Reference date (defaults to today)")
@click.pass_context
def list_followups(ctx, status: str | None, search: str | None, as_of: str | None):
    """List customers due for service, most urgent first."""
    require_action_or_exit(ctx, Action.VIEW_FOLLOWUPS)
    today = parse_date_or_exit(ctx, as_of, label="reference date")
    service = FollowUpService(ctx.obj["db"])

    stats = service.stats(today=today)
    click.echo(
        f"Overdue: {stats.overdue}  Due: {stats.due}  Upcoming: {stats.upcoming}  "
        f"Total: {stats.total}"
    )

    predictions = service.predictions(
        today=today,
        status=FollowUpStatus(status) if status else None,
        search=search,
    )
    if not predictions:
        click.echo("No follow-ups found.")
        return

    click.echo("-" * 80)
    for prediction in predictions:
        view = project(ctx.obj["role"], prediction)
        name = view["customer_name"]
        if view.get("customer_contact"):
            name += f" ({view['customer_contact']})"
        click.echo(f"[{prediction.status.value.upper()}] {name} {view['customer_code']}")
        click.echo(f"    Vehicle: {view['vehicle']} / {view['registration_number']}")
        click.echo(
            f"    Last: {view['last_service_type']} on {view['last_service_date']} "
            f"at {view['last_distance']:,} km"
        )
        click.echo(
            f"    Next: {view['next_service_distance']:,} km around "
            f"{view['estimated_next_date']} ({_due_text(view['days_until_due'])})"
        )
        click.echo(f"    ID: {view['id']}")


@followup_group.command("dismiss")
@click.argument("prediction_id")
@click.pass_context
def dismiss_followup(ctx, prediction_id: str):
    """Mark a follow-up as done."""
    require_action_or_exit(ctx, Action.DISMISS_FOLLOWUP)
    try:
        FollowUpService(ctx.obj["db"]).dismiss(prediction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Dismissed follow-up {prediction_id}")


@followup_group.command("remind")
@click.argument("prediction_id")
@click.option("--as-of", help="Reference date (defaults to today)")
@click.pass_context
def remind_followup(ctx, prediction_id: str, as_of: str | None):
    """Show the reminder message and chat link for a follow-up."""
    require_action_or_exit(ctx, Action.VIEW_FOLLOWUPS)
    today = parse_date_or_exit(ctx, as_of, label="reference date")
    try:
        prediction = FollowUpService(ctx.obj["db"]).get_prediction(prediction_id, today=today)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(reminder_message(prediction))
    click.echo("-" * 80)
    if "customer_contact" not in project(ctx.obj["role"], prediction):
        click.echo("Contact details are hidden for this role; no link generated.")
        return
    try:
        click.echo(reminder_link(prediction))
    except DomainError as e:
        handle_domain_error(ctx, e)


@followup_group.command("settings")
@click.option("--default-interval", type=int, help="Interval in km for unrecognised services")
@click.pass_context
def followup_settings(ctx, default_interval: int | None):
    """Show or change follow-up settings."""
    service = FollowUpService(ctx.obj["db"])
    if default_interval is not None:
        require_action_or_exit(ctx, Action.MANAGE_SETTINGS)
        try:
            service.set_default_interval(default_interval)
        except DomainError as e:
            handle_domain_error(ctx, e)
    else:
        require_action_or_exit(ctx, Action.VIEW_FOLLOWUPS)

    click.echo(f"Default interval: {service.get_default_interval():,} km")
    click.echo("Service intervals:")
    for keyword, interval in service.interval_table:
        click.echo(f"  {keyword:<20} {interval:>7,} km")


def register_commands(cli: click.Group) -> None:
    """Register follow-up commands with main CLI."""
    cli.add_command(followup_group, name="followup")
