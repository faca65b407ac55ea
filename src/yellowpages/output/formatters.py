"""Output mode selection.

The CLI renders ServiceResult for humans (Rich tables, trees, colors)
or machines (``--json``). ``--quiet`` reduces successful output to ids.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

if TYPE_CHECKING:
    from yellowpages.services.result import ServiceResult


class OutputSettings(BaseModel):
    """Output flags resolved from the root CLI group."""

    model_config = {"frozen": True}

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(
    result: ServiceResult,
    *,
    settings: OutputSettings | None = None,
    json_output: bool = False,
) -> str:
    """Format a ServiceResult for display.

    ``json_output`` is a shortcut for ``OutputSettings(json_output=True)``.
    JSON wins over quiet, quiet wins over Rich rendering.
    """
    settings = settings or OutputSettings(json_output=json_output)
    if settings.json_output:
        return result.model_dump_json(indent=2)

    from yellowpages.output.renderers import render_quiet, render_result

    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose)
