"""Command group: service records."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from yellowpages.commands._base import YpGroup
from yellowpages.domain.types import ApiType, Lifecycle
from yellowpages.services._helpers import split_csv

if TYPE_CHECKING:
    from yellowpages.commands._context import AppContext
    from yellowpages.services.catalog import CatalogService

_LIFECYCLES = click.Choice([lc.value for lc in Lifecycle])


def _catalog(app: AppContext) -> CatalogService:
    from yellowpages.services.catalog import CatalogService

    return CatalogService(app.store, app.settings)


@click.group(
    cls=YpGroup,
    examples="""\
  yp service add --name checkout-api --owner payments-team --lifecycle production
  yp service list --system payments
  yp service show checkout-api
  yp service dep-add checkout-api --on ledger --api "Ledger API"
  yp service rm checkout-api""",
)
def service() -> None:
    """Manage services."""


@service.command(
    examples="""\
  yp service add --name auth
  yp service add --name checkout-api --system payments --owner payments-team \\
      --lifecycle production --repo https://github.com/acme/checkout --tag api --tag pci"""
)
@click.option("--name", required=True, help="Service name.")
@click.option("--description", default=None, help="What this service does.")
@click.option("--system", default=None, help="System id or name.")
@click.option("--owner", default=None, help="Owner id or name.")
@click.option("--lifecycle", type=_LIFECYCLES, default=None)
@click.option("--repo", default=None, help="Repository URL.")
@click.option("--tag", "tags", multiple=True, help="Tag (repeatable or comma-separated).")
@click.pass_obj
def add(
    app: AppContext,
    name: str,
    description: str | None,
    system: str | None,
    owner: str | None,
    lifecycle: str | None,
    repo: str | None,
    tags: tuple[str, ...],
) -> None:
    """Add a service."""
    app.emit(
        _catalog(app).add_service(
            name,
            description=description,
            system=system,
            owner=owner,
            lifecycle=lifecycle,
            repo=repo,
            tags=split_csv(tags),
        )
    )


@service.command("list")
@click.option("--system", default=None, help="Filter by system id or name.")
@click.option("--owner", default=None, help="Filter by owner id or name.")
@click.option("--lifecycle", type=_LIFECYCLES, default=None)
@click.option("--tag", default=None, help="Filter by tag.")
@click.pass_obj
def list_cmd(
    app: AppContext,
    system: str | None,
    owner: str | None,
    lifecycle: str | None,
    tag: str | None,
) -> None:
    """List services."""
    app.emit(_catalog(app).list_services(system=system, owner=owner, lifecycle=lifecycle, tag=tag))


@service.command()
@click.argument("ref", metavar="ID_OR_NAME")
@click.pass_obj
def show(app: AppContext, ref: str) -> None:
    """Show a service with its owner, system, APIs, dependencies and dependents."""
    app.emit(_catalog(app).show_service(ref))


@service.command(
    examples="""\
  yp service update checkout-api --owner payments-team
  yp service update checkout-api --lifecycle deprecated"""
)
@click.argument("ref", metavar="ID_OR_NAME")
@click.option("--name", default=None, help="New name.")
@click.option("--description", default=None)
@click.option("--system", default=None, help="System id or name.")
@click.option("--owner", default=None, help="Owner id or name.")
@click.option("--lifecycle", type=_LIFECYCLES, default=None)
@click.option("--repo", default=None)
@click.option("--tag", "tags", multiple=True, help="Replace tags (repeatable).")
@click.pass_obj
def update(
    app: AppContext,
    ref: str,
    name: str | None,
    description: str | None,
    system: str | None,
    owner: str | None,
    lifecycle: str | None,
    repo: str | None,
    tags: tuple[str, ...],
) -> None:
    """Update fields of a service."""
    app.emit(
        _catalog(app).update_service(
            ref,
            name=name,
            description=description,
            system=system,
            owner=owner,
            lifecycle=lifecycle,
            repo=repo,
            tags=split_csv(tags),
        )
    )


@service.command()
@click.argument("ref", metavar="ID_OR_NAME")
@click.pass_obj
def rm(app: AppContext, ref: str) -> None:
    """Remove a service."""
    app.emit(_catalog(app).remove_service(ref))


@service.command(
    "api-add",
    examples="""\
  yp service api-add checkout-api --name "Checkout API" --type rest --spec openapi.yaml""",
)
@click.argument("ref", metavar="ID_OR_NAME")
@click.option("--name", required=True, help="API name.")
@click.option("--type", "api_type", type=click.Choice([t.value for t in ApiType]), required=True)
@click.option("--spec", default=None, help="Path to the API spec file.")
@click.option("--description", default=None)
@click.pass_obj
def api_add(
    app: AppContext,
    ref: str,
    name: str,
    api_type: str,
    spec: str | None,
    description: str | None,
) -> None:
    """Add an API to a service."""
    app.emit(
        _catalog(app).add_api(
            ref, name=name, api_type=api_type, spec=spec, description=description
        )
    )


@service.command(
    "dep-add",
    examples="""\
  yp service dep-add checkout-api --on ledger
  yp service dep-add checkout-api --on auth --api "Token API" --description 'Validates sessions'""",
)
@click.argument("ref", metavar="ID_OR_NAME")
@click.option("--on", "target", required=True, help="Service this one depends on (id or name).")
@click.option("--api", default=None, help="Which API it consumes.")
@click.option("--description", default=None)
@click.pass_obj
def dep_add(
    app: AppContext,
    ref: str,
    target: str,
    api: str | None,
    description: str | None,
) -> None:
    """Record that a service depends on another."""
    app.emit(_catalog(app).add_dependency(ref, on=target, api=api, description=description))
