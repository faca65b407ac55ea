"""Click base classes for yp commands.

Every yp command and group accepts an ``examples`` block. ``--help``
stays short and points at ``--examples``, which prints the block and
exits before any catalog lookup, so examples work outside a catalog.

Groups list their subcommands in registration order rather than
alphabetically, so ``yp --help`` reads init → catalog records →
queries → discovery.
"""

from __future__ import annotations

from typing import Any

import click


class _ExamplesMixin:
    """Adds the ``--examples`` flag and the help-footer pointer to it."""

    examples: str | None

    def _init_examples(self, examples: str | None) -> None:
        self.examples = examples
        if examples:
            self.params.append(  # type: ignore[attr-defined]
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._show_examples,
                    help="Show usage examples and exit.",
                )
            )

    def _show_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(self.examples)
        ctx.exit(0)

    def format_epilog(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        super().format_epilog(ctx, formatter)  # type: ignore[misc]
        if self.examples:
            formatter.write_paragraph()
            formatter.write_text(f"Run '{ctx.command_path} --examples' for usage examples.")


class YpCommand(_ExamplesMixin, click.Command):
    """A yp leaf command, e.g. ``yp deps`` or ``yp service add``."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


class YpGroup(_ExamplesMixin, click.Group):
    """A yp command group (``yp``, ``yp service``, ``yp export`` ...).

    Subcommands declared with ``@group.command`` become :class:`YpCommand`
    and may take ``examples=`` without ``cls=``.
    """

    command_class = YpCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)

    def list_commands(self, ctx: click.Context) -> list[str]:
        return list(self.commands)
