"""Command: catalog integrity checking."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from yellowpages.commands._base import YpCommand
from yellowpages.commands._context import EXIT_ERROR

if TYPE_CHECKING:
    from yellowpages.commands._context import AppContext


@click.command(
    cls=YpCommand,
    examples="""\
  yp lint
  yp lint --errors-only
  yp --json lint""",
)
@click.option("--errors-only", is_flag=True, help="Hide warnings.")
@click.pass_obj
def lint(app: AppContext, errors_only: bool) -> None:
    """Validate catalog integrity. Exits 1 when any error is found."""
    from yellowpages.services.lint import LintService

    result = LintService(app.store, app.settings).lint(errors_only=errors_only)
    app.emit(result)
    if result.ok and not result.data.get("success", True):
        raise SystemExit(EXIT_ERROR)
