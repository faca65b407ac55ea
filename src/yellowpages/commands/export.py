"""Command group: catalog export."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from yellowpages.commands._base import YpGroup

if TYPE_CHECKING:
    from yellowpages.commands._context import AppContext


@click.group(
    cls=YpGroup,
    examples="""\
  yp export graph --format dot
  yp export graph --format json --output graph.json""",
)
def export() -> None:
    """Export catalog data."""


@export.command(
    examples="""\
  yp export graph
  yp export graph --format json --output graph.json
  yp export graph --format dot | dot -Tpng -o deps.png"""
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["dot", "json"], case_sensitive=False),
    default="dot",
    help="Graph output format.",
)
@click.option(
    "--output",
    "output_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Output file (omit to print to stdout).",
)
@click.pass_obj
def graph(app: AppContext, fmt: str, output_file: str | None) -> None:
    """Export the service dependency graph as DOT or D3 JSON."""
    from yellowpages.services.export import ExportService
    from yellowpages.services.result import ServiceResult

    result = ExportService(app.store, app.settings).export_graph(fmt=fmt.lower())

    if not result.ok:
        app.emit(result)
        return

    if output_file:
        Path(output_file).write_text(result.data["content"], encoding="utf-8")
        summary = {k: v for k, v in result.data.items() if k != "content"}
        app.emit(
            ServiceResult(
                ok=True,
                op="export_graph",
                data={**summary, "output_file": output_file},
            )
        )
    elif app.settings.json_output:
        app.emit(result)
    else:
        # Pipe-friendly: raw content to stdout
        click.echo(result.data["content"], nl=False)
