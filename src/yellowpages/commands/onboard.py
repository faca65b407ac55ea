"""Command: add catalog usage instructions for coding agents."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from yellowpages.commands._base import YpCommand

if TYPE_CHECKING:
    from yellowpages.commands._context import AppContext


@click.command(
    cls=YpCommand,
    examples="""\
  yp onboard
  yp --json onboard""",
)
@click.pass_obj
def onboard(app: AppContext) -> None:
    """Append yellowpages instructions to CLAUDE.md.

    Skipped when CLAUDE.md, AGENTS.md or COPILOT.md already has them.
    """
    from yellowpages.services.init import InitService

    app.emit(InitService.onboard(app.store.project_dir))
