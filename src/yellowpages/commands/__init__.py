"""Subcommand modules for yp.

Provides register_commands() which uses deferred imports to keep
``yp --help`` fast as the codebase grows.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register every command on the root group, in ``yp --help`` order."""
    from yellowpages.commands.deps import deps
    from yellowpages.commands.discover import discover
    from yellowpages.commands.export import export
    from yellowpages.commands.init_cmd import init_cmd
    from yellowpages.commands.lint import lint
    from yellowpages.commands.onboard import onboard
    from yellowpages.commands.owner import owner
    from yellowpages.commands.search import search
    from yellowpages.commands.service import service
    from yellowpages.commands.system import system

    # --- Setup ---
    cli.add_command(init_cmd)
    cli.add_command(onboard)

    # --- Catalog records ---
    cli.add_command(service)
    cli.add_command(system)
    cli.add_command(owner)

    # --- Queries ---
    cli.add_command(deps)
    cli.add_command(search)
    cli.add_command(lint)

    # --- Discovery and export ---
    cli.add_command(discover)
    cli.add_command(export)
