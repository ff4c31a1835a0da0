"""Main CLI entry point."""

import logging

import click
from servicebook.database.blobs import create_local_blob_store
from servicebook.database.factories import create_sqlite_database
from servicebook.domain.errors import ValidationError
from servicebook.domain.roles import parse_role

# Import and register all commands at module level
from servicebook.cli.commands import (
    add,
    transaction,
    summary,
    customer,
    followup,
    marketing,
    employee,
    snapshot,
)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides SERVICEBOOK_DB_PATH environment variable)",
    envvar="SERVICEBOOK_DB_PATH",
)
@click.option(
    "--blob-dir",
    type=click.Path(file_okay=False),
    help="Directory for attached bills (overrides SERVICEBOOK_BLOB_DIR)",
    envvar="SERVICEBOOK_BLOB_DIR",
)
@click.option(
    "--role",
    help="Acting role: owner, editor or staff (default: staff)",
    envvar="SERVICEBOOK_ROLE",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="SERVICEBOOK_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, blob_dir: str | None, role: str | None, log_level: str):
    """Servicebook - ledger and customer follow-ups for a vehicle workshop.

    Record daily income and expenses, track customers and their discounts,
    and see who is due for their next service.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        ctx.obj["role"] = parse_role(role)
    except ValidationError as e:
        raise click.BadParameter(str(e), param_hint="--role")

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["blob_store"] = create_local_blob_store(blob_dir)
        ctx.call_on_close(db.disconnect)


# Register all commands
add.register_commands(cli)
transaction.register_commands(cli)
summary.register_commands(cli)
customer.register_commands(cli)
followup.register_commands(cli)
marketing.register_commands(cli)
employee.register_commands(cli)
snapshot.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
