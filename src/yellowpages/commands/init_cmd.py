"""Command: catalog initialization (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from yellowpages.commands._base import YpCommand

if TYPE_CHECKING:
    from yellowpages.commands._context import AppContext


@click.command(
    "init",
    cls=YpCommand,
    examples="""\
  yp init
  yp init /path/to/platform-repo
  yp --json init""",
)
@click.argument("path", required=False, default=".", type=click.Path(file_okay=False))
@click.pass_obj
def init_cmd(app: AppContext, path: str) -> None:
    """Create a .yellowpages/ catalog (no-op if one exists)."""
    from yellowpages.services.init import InitService

    target = Path(path).resolve()
    target.mkdir(parents=True, exist_ok=True)
    app.emit(InitService.init(target))
