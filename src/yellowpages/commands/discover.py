"""Command: auto-discover services from local repos or a GitHub org."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from yellowpages.commands._base import YpCommand

if TYPE_CHECKING:
    from yellowpages.commands._context import AppContext


@click.command(
    cls=YpCommand,
    examples="""\
  yp discover --dir ~/src
  yp discover --github-org acme --topic service
  yp discover --github-org acme --language go --dry-run
  yp --json discover --dir . --dry-run""",
)
@click.option(
    "--dir",
    "directory",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Scan subdirectories of this path.",
)
@click.option("--github-org", default=None, help="GitHub organization to scan.")
@click.option("--topic", default=None, help="Only repos with this GitHub topic.")
@click.option("--language", default=None, help="Only repos with this primary language.")
@click.option("--dry-run", is_flag=True, help="Show what would change without writing.")
@click.pass_obj
def discover(
    app: AppContext,
    directory: Path | None,
    github_org: str | None,
    topic: str | None,
    language: str | None,
    dry_run: bool,
) -> None:
    """Discover services and add or update them in the catalog."""
    from yellowpages.services.discover import DiscoverService

    app.emit(
        DiscoverService(app.store, app.settings).discover(
            directory=directory,
            github_org=github_org,
            topic=topic,
            language=language,
            dry_run=dry_run,
        )
    )
