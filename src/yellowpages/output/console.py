"""Rich Console factory and theme for yellowpages output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract. In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

YP_THEME = Theme(
    {
        "yp.ok": "bold green",
        "yp.error": "bold red",
        "yp.warning": "bold yellow",
        "yp.op": "bold cyan",
        "yp.key": "dim",
        "yp.id": "dim blue",
        "yp.name": "bold",
        "yp.hint": "dim italic",
        "yp.missing": "red",
        "yp.lifecycle.experimental": "magenta",
        "yp.lifecycle.production": "green",
        "yp.lifecycle.deprecated": "yellow",
        "yp.lifecycle.decommissioned": "dim",
        "yp.score": "magenta",
    }
)

_LIFECYCLE_STYLES: dict[str, str] = {
    "experimental": "yp.lifecycle.experimental",
    "production": "yp.lifecycle.production",
    "deprecated": "yp.lifecycle.deprecated",
    "decommissioned": "yp.lifecycle.decommissioned",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=YP_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_lifecycle(lifecycle: str | None) -> str:
    return _LIFECYCLE_STYLES.get(lifecycle or "", "")
