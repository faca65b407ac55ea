"""Command group: owner records (teams and people)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from yellowpages.commands._base import YpGroup
from yellowpages.domain.types import OwnerType

if TYPE_CHECKING:
    from yellowpages.commands._context import AppContext
    from yellowpages.services.catalog import CatalogService

_OWNER_TYPES = click.Choice([t.value for t in OwnerType])


def _catalog(app: AppContext) -> CatalogService:
    from yellowpages.services.catalog import CatalogService

    return CatalogService(app.store, app.settings)


@click.group(
    cls=YpGroup,
    examples="""\
  yp owner add --name payments-team --type team --slack "#payments"
  yp owner add --name "Ada Lovelace" --type person --email ada@example.com
  yp owner list --type team
  yp owner show payments-team""",
)
def owner() -> None:
    """Manage owners."""


@owner.command()
@click.option("--name", required=True, help="Owner name.")
@click.option("--type", "owner_type", type=_OWNER_TYPES, required=True)
@click.option("--email", default=None)
@click.option("--slack", default=None, help="Slack channel or handle.")
@click.pass_obj
def add(
    app: AppContext,
    name: str,
    owner_type: str,
    email: str | None,
    slack: str | None,
) -> None:
    """Add an owner."""
    app.emit(_catalog(app).add_owner(name, owner_type=owner_type, email=email, slack=slack))


@owner.command("list")
@click.option("--type", "owner_type", type=_OWNER_TYPES, default=None)
@click.pass_obj
def list_cmd(app: AppContext, owner_type: str | None) -> None:
    """List owners."""
    app.emit(_catalog(app).list_owners(owner_type=owner_type))


@owner.command()
@click.argument("ref", metavar="ID_OR_NAME")
@click.pass_obj
def show(app: AppContext, ref: str) -> None:
    """Show an owner with the services and systems it owns."""
    app.emit(_catalog(app).show_owner(ref))


@owner.command()
@click.argument("ref", metavar="ID_OR_NAME")
@click.pass_obj
def rm(app: AppContext, ref: str) -> None:
    """Remove an owner."""
    app.emit(_catalog(app).remove_owner(ref))
