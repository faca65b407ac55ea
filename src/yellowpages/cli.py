"""Root CLI group for yp with global flags and command registration."""

from __future__ import annotations

import click

from yellowpages import __version__
from yellowpages.commands import register_commands
from yellowpages.commands._base import YpGroup
from yellowpages.commands._context import AppContext
from yellowpages.config.settings import YpSettings


@click.group(
    name="yp",
    cls=YpGroup,
    invoke_without_command=True,
    examples="""\
  yp init && yp onboard
  yp service add --name checkout-api --system payments --owner platform-team
  yp service dep-add checkout-api --on ledger --api "Ledger API"
  yp deps checkout-api --direction up
  yp search payments --kind service
  yp lint
  yp discover --dir ~/src --dry-run""",
)
@click.version_option(version=__version__, prog_name="yp")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """yp — the service catalog for your repos."""
    ctx.ensure_object(dict)
    settings = YpSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
