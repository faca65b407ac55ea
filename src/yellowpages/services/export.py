"""ExportService — dependency graph export (Graphviz DOT, D3 JSON)."""

from __future__ import annotations

from typing import Any

from yellowpages.infrastructure.graph import build_dependency_graph, to_d3_json, to_dot
from yellowpages.services.base import BaseService, catalog_op
from yellowpages.services.result import ErrorCode, ServiceResult
from yellowpages.services.telemetry import traced

GRAPH_FORMATS = ("dot", "json")


class ExportService(BaseService):
    @traced
    @catalog_op("export_graph")
    def export_graph(self, fmt: str = "dot") -> ServiceResult:
        """Render the full dependency graph in *fmt*."""
        if fmt not in GRAPH_FORMATS:
            return ServiceResult.failure(
                "export_graph",
                ErrorCode.INVALID_FORMAT,
                f"Unknown graph format: {fmt}",
                format=fmt,
                valid=list(GRAPH_FORMATS),
            )

        g = build_dependency_graph(self._store.load_catalog().services)
        content = to_dot(g) if fmt == "dot" else to_d3_json(g)
        payload: dict[str, Any] = {
            "format": fmt,
            "content": content,
            "node_count": g.number_of_nodes(),
            "edge_count": g.number_of_edges(),
            "missing": sorted(n for n, missing in g.nodes(data="missing") if missing),
        }
        return ServiceResult(ok=True, op="export_graph", data=payload)
