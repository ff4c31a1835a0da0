"""CLI error handling helpers."""

import click

from servicebook.domain.errors import DomainError, PermissionDenied
from servicebook.domain.roles import Action, require


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def require_action_or_exit(ctx: click.Context, action: Action) -> None:
    """Exit with a CLI error unless the current role may perform action."""
    try:
        require(ctx.obj["role"], action)
    except PermissionDenied as e:
        handle_domain_error(ctx, e)
