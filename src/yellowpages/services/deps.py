"""DepsService — front-end to the dependency graph engine."""

from __future__ import annotations

from yellowpages.domain.deps import find_orphans, resolve_deps
from yellowpages.domain.types import Collection, Direction
from yellowpages.services.base import BaseService, catalog_op, not_found
from yellowpages.services.result import ErrorCode, ServiceResult
from yellowpages.services.telemetry import trace_span, traced


class DepsService(BaseService):
    """Dependency trees and orphan detection over the full service set."""

    @traced
    @catalog_op("deps")
    def show(
        self,
        ref: str,
        *,
        direction: str | None = None,
        depth: int | None = None,
    ) -> ServiceResult:
        """Resolve what depends on *ref* and what *ref* depends on.

        *ref* is an id or a case-insensitive name. ``depth`` defaults to
        ``[deps] default_depth``.
        """
        if direction is not None and direction not in (Direction.UP, Direction.DOWN):
            return ServiceResult.failure(
                "deps",
                ErrorCode.INVALID_DIRECTION,
                f"Invalid direction: {direction} (expected 'up' or 'down')",
                direction=direction,
                valid=[d.value for d in Direction],
            )

        service_id = self._store.resolve_id(Collection.SERVICES, ref)
        services = self._store.load_catalog().services
        if not any(s.id == service_id for s in services):
            return not_found("deps", "service", ref)

        max_depth = depth if depth is not None else self._settings.deps.default_depth
        with trace_span("resolve_deps"):
            result = resolve_deps(service_id, services, max_depth, direction)

        return ServiceResult(
            ok=True,
            op="deps",
            data={**result.to_dict(), "direction": direction, "depth": max_depth},
        )

    @traced
    @catalog_op("orphans")
    def orphans(self) -> ServiceResult:
        """List services with no dependencies in either direction."""
        orphans = find_orphans(self._store.load_catalog().services)
        return ServiceResult(
            ok=True,
            op="orphans",
            data={
                "orphans": [{"id": s.id, "name": s.name} for s in orphans],
                "count": len(orphans),
            },
        )
