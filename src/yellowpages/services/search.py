"""SearchService — ranked full-text search and filter-only listing.

With a query, hits come from the FTS5 index (prefix-matched with a
typo fallback, BM25 ranked) and are cut to ``limit`` only after every
filter has run. Without one, every record of the requested kinds is
listed with score 0. Service-only filters (``unowned``, ``unassigned``,
``lifecycle``) drop non-matching services and never touch systems or
owners.
"""

from __future__ import annotations

from typing import Any

from yellowpages.domain.types import EntityKind
from yellowpages.infrastructure.search_index import SearchHit, get_search_index
from yellowpages.services.base import BaseService, catalog_op
from yellowpages.services.result import ErrorCode, ServiceResult
from yellowpages.services.telemetry import trace_span, traced


class SearchService(BaseService):
    @traced
    @catalog_op("search")
    def search(
        self,
        query: str = "",
        *,
        kind: EntityKind | str | None = None,
        unowned: bool = False,
        unassigned: bool = False,
        lifecycle: str | None = None,
        limit: int | None = None,
    ) -> ServiceResult:
        query = query.strip()
        service_filters = unowned or unassigned or lifecycle is not None
        if not query and not service_filters and kind is None:
            return ServiceResult.failure(
                "search", ErrorCode.MISSING_ARGUMENT, "No search query or filters provided"
            )

        catalog = self._store.load_catalog()
        if query:
            with trace_span("fts_query"):
                index = get_search_index(self._store, self._settings.search)
                try:
                    hits = index.search(query, kind=kind)
                finally:
                    index.close()
        else:
            effective_kind = kind or (EntityKind.SERVICE if service_filters else None)
            hits = [
                *(
                    SearchHit(str(EntityKind.SERVICE), s.id, s.name, s.description or "", 0.0)
                    for s in catalog.services
                ),
                *(
                    SearchHit(str(EntityKind.SYSTEM), s.id, s.name, s.description or "", 0.0)
                    for s in catalog.systems
                ),
                *(SearchHit(str(EntityKind.OWNER), o.id, o.name, "", 0.0) for o in catalog.owners),
            ]
            if effective_kind is not None:
                hits = [h for h in hits if h.kind == effective_kind]

        if service_filters:
            keep = {
                s.id
                for s in catalog.services
                if (not unowned or not s.owner)
                and (not unassigned or not s.system)
                and (lifecycle is None or s.lifecycle == lifecycle)
            }
            hits = [h for h in hits if h.kind != EntityKind.SERVICE or h.id in keep]

        if query:
            hits = hits[: limit or self._settings.search.limit]

        results: list[dict[str, Any]] = [
            {
                "kind": h.kind,
                "id": h.id,
                "name": h.name,
                "description": h.description or None,
                "score": h.score,
            }
            for h in hits
        ]
        return ServiceResult(
            ok=True,
            op="search",
            data={"query": query or None, "count": len(results), "results": results},
        )
