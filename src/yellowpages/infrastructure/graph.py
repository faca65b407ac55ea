"""NetworkX view of the dependency graph and its exporters.

The graph is built on demand from a catalog snapshot. Nodes are service
ids; an edge ``a -> b`` means *a* depends on *b*. Dependency targets
that do not exist in the catalog still become nodes, flagged
``missing=True``, so exports show dangling edges instead of hiding them.
"""

from __future__ import annotations

import json
from collections.abc import Sequence

import networkx as nx

from yellowpages.domain.models import Service


def build_dependency_graph(services: Sequence[Service]) -> nx.DiGraph:
    g: nx.DiGraph = nx.DiGraph()
    for s in services:
        g.add_node(
            s.id,
            name=s.name,
            system=s.system or "",
            lifecycle=str(s.lifecycle or ""),
            missing=False,
        )
    for s in services:
        for dep in s.depends_on:
            if dep.service not in g:
                g.add_node(dep.service, name=dep.service, system="", lifecycle="", missing=True)
            g.add_edge(s.id, dep.service, api=dep.api or "")
    return g


def _quote(value: object) -> str:
    return str(value).replace("\\", "\\\\").replace('"', '\\"')


def to_dot(g: nx.DiGraph) -> str:
    """Generate Graphviz DOT notation."""
    lines = ["digraph catalog {", "  rankdir=LR;", "  node [shape=box];"]

    for node_id, attrs in g.nodes(data=True):
        label = _quote(attrs.get("name", node_id))
        style = ' style="dashed"' if attrs.get("missing") else ""
        lines.append(f'  "{_quote(node_id)}" [label="{label}"{style}];')

    for src, tgt, attrs in g.edges(data=True):
        api = attrs.get("api")
        label = f' [label="{_quote(api)}"]' if api else ""
        lines.append(f'  "{_quote(src)}" -> "{_quote(tgt)}"{label};')

    lines.append("}")
    return "\n".join(lines) + "\n"


def to_d3_json(g: nx.DiGraph) -> str:
    """Generate D3-compatible ``{"nodes": [...], "links": [...]}`` JSON."""
    d3_nodes = [
        {
            "id": node_id,
            "name": attrs.get("name", node_id),
            "system": attrs.get("system", ""),
            "lifecycle": attrs.get("lifecycle", ""),
            "missing": attrs.get("missing", False),
        }
        for node_id, attrs in g.nodes(data=True)
    ]
    d3_links = [
        {"source": src, "target": tgt, "api": attrs.get("api", "")}
        for src, tgt, attrs in g.edges(data=True)
    ]
    return json.dumps({"nodes": d3_nodes, "links": d3_links}, indent=2) + "\n"
