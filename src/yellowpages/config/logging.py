"""structlog configuration for yp.

All log output goes to stderr so piped ``yp --json`` stdout stays
parseable. stdlib ``logging`` records (store, search index, discovery)
and structlog events (telemetry spans) share one formatter:

- console renderer by default, colored when stderr is a TTY
- JSON lines with ``--log-json``

Levels follow the global flags: ``-v`` shows yellowpages DEBUG records
plus one httpx line per GitHub request, ``-q`` shows errors only, and
otherwise only warnings appear.

Once a command touches the catalog, every event carries a ``catalog``
key with the resolved ``.yellowpages/`` path (see :func:`bind_catalog`).
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import structlog


def _level_for(*, verbose: bool, quiet: bool) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    return logging.WARNING


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_json: bool = False,
) -> None:
    """Install the stderr handler and set yellowpages and httpx levels.

    ``verbose`` wins over ``quiet``. Context bound by an earlier command
    in the same thread is cleared.
    """
    structlog.contextvars.clear_contextvars()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    renderer: structlog.types.Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger("yellowpages").setLevel(_level_for(verbose=verbose, quiet=quiet))
    # httpx logs each request at INFO; httpcore is connection-level noise.
    logging.getLogger("httpx").setLevel(logging.INFO if verbose else logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def bind_catalog(root: Path) -> None:
    """Tag every later event in this context with the catalog root."""
    structlog.contextvars.bind_contextvars(catalog=str(root))
