"""Export and import commands."""

from pathlib import Path

import click
from servicebook.cli.error_handling import handle_domain_error, require_action_or_exit
from servicebook.domain.errors import DomainError
from servicebook.domain.roles import Action
from servicebook.domain.snapshot import SnapshotService


@click.command("export")
@click.argument("file_path", type=click.Path(dir_okay=False))
@click.pass_context
def export_command(ctx, file_path: str):
    """Write the whole ledger and customer registry to a JSON file."""
    require_action_or_exit(ctx, Action.EXPORT_DATA)
    service = SnapshotService(ctx.obj["db"])
    document = service.export_json()
    try:
        Path(file_path).write_text(document, encoding="utf-8")
    except OSError as e:
        click.echo(f"Error: Could not write {file_path}: {e}", err=True)
        ctx.exit(1)
    click.echo(f"Exported ledger to {file_path}")


@click.command("import")
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def import_command(ctx, file_path: str):
    """Replace the ledger with the contents of an exported JSON file.

    The file is checked in full first; nothing changes if it is rejected.
    """
    require_action_or_exit(ctx, Action.IMPORT_DATA)
    service = SnapshotService(ctx.obj["db"])
    try:
        text = Path(file_path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        click.echo(f"Error: Could not read {file_path}: {e}", err=True)
        ctx.exit(1)

    if not click.confirm("This replaces all existing entries. Continue?"):
        click.echo("Import cancelled.")
        return

    try:
        result = service.import_json(text)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(
        f"Imported {result.transactions} entry(ies) and {result.customers} customer(s)"
    )


def register_commands(cli: click.Group) -> None:
    """Register export and import commands with main CLI."""
    cli.add_command(export_command)
    cli.add_command(import_command)
