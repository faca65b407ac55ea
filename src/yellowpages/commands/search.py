"""Command: full-text search across services, systems and owners."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from yellowpages.commands._base import YpCommand
from yellowpages.domain.types import EntityKind, Lifecycle

if TYPE_CHECKING:
    from yellowpages.commands._context import AppContext


@click.command(
    cls=YpCommand,
    examples="""\
  yp search authentication
  yp search payment api --kind service
  yp search --unowned
  yp search --lifecycle deprecated
  yp --json search checkout""",
)
@click.argument("query", nargs=-1)
@click.option("--kind", type=click.Choice([k.value for k in EntityKind]), default=None)
@click.option("--unowned", is_flag=True, help="Only services without an owner.")
@click.option("--unassigned", is_flag=True, help="Only services without a system.")
@click.option(
    "--lifecycle", type=click.Choice([lc.value for lc in Lifecycle]), default=None
)
@click.option("--limit", type=click.IntRange(min=1), default=None, help="Maximum ranked hits.")
@click.pass_obj
def search(
    app: AppContext,
    query: tuple[str, ...],
    kind: str | None,
    unowned: bool,
    unassigned: bool,
    lifecycle: str | None,
    limit: int | None,
) -> None:
    """Search the catalog. Without QUERY, list records matching the filters."""
    text = " ".join(query).strip()
    if not text and not (kind or unowned or unassigned or lifecycle):
        raise click.UsageError(
            "Provide a search query or a filter (--kind, --unowned, --unassigned, --lifecycle)."
        )

    from yellowpages.services.search import SearchService

    app.emit(
        SearchService(app.store, app.settings).search(
            text,
            kind=kind,
            unowned=unowned,
            unassigned=unassigned,
            lifecycle=lifecycle,
            limit=limit,
        )
    )
