"""Command: dependency graph for a service."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from yellowpages.commands._base import YpCommand

if TYPE_CHECKING:
    from yellowpages.commands._context import AppContext


@click.command(
    cls=YpCommand,
    examples="""\
  yp deps checkout-api
  yp deps checkout-api --direction up
  yp deps checkout-api --direction down --depth 2
  yp deps --orphans
  yp --json deps payments""",
)
@click.argument("service", required=False)
@click.option(
    "--direction",
    type=click.Choice(["up", "down"]),
    default=None,
    help="up: what depends on it. down: what it depends on. Default: both.",
)
@click.option(
    "--depth",
    type=click.IntRange(min=0),
    default=None,
    help="Maximum traversal depth (default from [deps] default_depth).",
)
@click.option("--orphans", is_flag=True, help="List services with no dependencies at all.")
@click.pass_obj
def deps(
    app: AppContext,
    service: str | None,
    direction: str | None,
    depth: int | None,
    orphans: bool,
) -> None:
    """Show what depends on SERVICE and what SERVICE depends on."""
    from yellowpages.services.deps import DepsService

    if orphans:
        app.emit(DepsService(app.store, app.settings).orphans())
    elif service:
        svc = DepsService(app.store, app.settings)
        app.emit(svc.show(service, direction=direction, depth=depth))
    else:
        raise click.UsageError("Missing argument 'SERVICE' (or use --orphans).")
