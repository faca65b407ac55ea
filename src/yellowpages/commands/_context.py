"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides lazy CatalogStore access and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from yellowpages.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from yellowpages.config.settings import YpSettings
    from yellowpages.infrastructure.store import CatalogStore
    from yellowpages.services.result import ServiceResult

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2
EXIT_NOT_INITIALIZED = 3


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The store is resolved lazily on first use so ``--help``, ``--version``
    and ``yp init`` work outside a catalog project.
    """

    def __init__(self, settings: YpSettings) -> None:
        self.settings = settings
        self._store: CatalogStore | None = None

        from yellowpages.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose, quiet=settings.quiet, log_json=settings.log_json
        )

        if settings.verbose:
            from yellowpages.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    @property
    def store(self) -> CatalogStore:
        """The catalog store. Exits with code 3 outside a catalog project."""
        if self._store is None:
            root = self.settings.catalog_root
            if root is None:
                from yellowpages.services.result import ErrorCode, ServiceResult

                self.emit(
                    ServiceResult.failure(
                        "catalog",
                        ErrorCode.NOT_INITIALIZED,
                        "No .yellowpages/ catalog found. Run 'yp init' first.",
                    ),
                    exit_code=EXIT_NOT_INITIALIZED,
                )
            from yellowpages.config.logging import bind_catalog
            from yellowpages.infrastructure.store import CatalogStore

            bind_catalog(root)
            self._store = CatalogStore(root)
        return self._store

    def emit(self, result: ServiceResult, *, exit_code: int = EXIT_ERROR) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with *exit_code*.
        """
        settings = self.output_settings
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(exit_code)
