"""Command group: system records."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from yellowpages.commands._base import YpGroup

if TYPE_CHECKING:
    from yellowpages.commands._context import AppContext
    from yellowpages.services.catalog import CatalogService


def _catalog(app: AppContext) -> CatalogService:
    from yellowpages.services.catalog import CatalogService

    return CatalogService(app.store, app.settings)


@click.group(
    cls=YpGroup,
    examples="""\
  yp system add --name payments --owner payments-team
  yp system list
  yp system show payments
  yp system rm payments""",
)
def system() -> None:
    """Manage systems (groups of services)."""


@system.command()
@click.option("--name", required=True, help="System name.")
@click.option("--description", default=None)
@click.option("--owner", default=None, help="Owner id or name.")
@click.pass_obj
def add(app: AppContext, name: str, description: str | None, owner: str | None) -> None:
    """Add a system."""
    app.emit(_catalog(app).add_system(name, description=description, owner=owner))


@system.command("list")
@click.option("--owner", default=None, help="Filter by owner id or name.")
@click.pass_obj
def list_cmd(app: AppContext, owner: str | None) -> None:
    """List systems."""
    app.emit(_catalog(app).list_systems(owner=owner))


@system.command()
@click.argument("ref", metavar="ID_OR_NAME")
@click.pass_obj
def show(app: AppContext, ref: str) -> None:
    """Show a system and its services."""
    app.emit(_catalog(app).show_system(ref))


@system.command()
@click.argument("ref", metavar="ID_OR_NAME")
@click.pass_obj
def rm(app: AppContext, ref: str) -> None:
    """Remove a system."""
    app.emit(_catalog(app).remove_system(ref))
