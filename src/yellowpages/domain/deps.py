"""Dependency graph engine — forward and reverse traversal over ``dependsOn``.

The graph is never assumed to be a DAG. Both walks share one *visited*
set per invocation, threaded through the recursion as an explicit
parameter. A service already expanded still appears as a node at every
edge that reaches it, but with no children, so traversal terminates and
touches each distinct id at most once.

The visited set is global to the walk, not a path/ancestor set. In a
diamond (A→B, A→C, B→D, C→D) D is expanded under whichever of B/C is
enumerated first and shows up as a bare leaf under the other. Cycle
*detection* with precise backtracking lives in :mod:`yellowpages.domain.lint`.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from yellowpages.domain.models import Service
from yellowpages.domain.types import Direction

DEFAULT_DEPTH = 10


@dataclass(frozen=True)
class Dependent:
    """One incoming edge: *service* declares a dependency on the indexed id."""

    service: Service
    api: str | None = None
    description: str | None = None


@dataclass(frozen=True)
class DepNode:
    """A node in a rendered dependency tree.

    ``api`` and ``description`` annotate the edge leading to this node,
    not the service itself.
    """

    id: str
    name: str
    api: str | None = None
    description: str | None = None
    children: list[DepNode] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"id": self.id, "name": self.name}
        if self.api is not None:
            result["api"] = self.api
        if self.description is not None:
            result["description"] = self.description
        result["children"] = [child.to_dict() for child in self.children]
        return result


@dataclass(frozen=True)
class DepsResult:
    service_id: str
    service_name: str
    dependents: list[DepNode] = field(default_factory=list)
    dependencies: list[DepNode] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "service": {"id": self.service_id, "name": self.service_name},
            "dependents": [n.to_dict() for n in self.dependents],
            "dependencies": [n.to_dict() for n in self.dependencies],
        }


ReverseIndex: TypeAlias = "dict[str, list[Dependent]]"


def build_reverse_index(services: Sequence[Service]) -> ReverseIndex:
    """Map each depended-upon service id to the services that depend on it.

    Ids with no dependents have no key at all.
    """
    reverse: ReverseIndex = {}
    for service in services:
        for dep in service.depends_on:
            reverse.setdefault(dep.service, []).append(
                Dependent(service=service, api=dep.api, description=dep.description)
            )
    return reverse


def index_services(services: Sequence[Service]) -> dict[str, Service]:
    """Map service id → service. Later duplicates of an id win."""
    return {s.id: s for s in services}


def walk_down(
    service_id: str,
    service_index: Mapping[str, Service],
    max_depth: int,
    visited: set[str] | None = None,
    depth: int = 0,
) -> list[DepNode]:
    """Build the tree of what *service_id* depends on.

    Targets missing from *service_index* still produce a node, named by
    their raw id. An unknown root returns an empty forest.
    """
    if visited is None:
        visited = set()
    if depth >= max_depth or service_id in visited:
        return []
    visited.add(service_id)

    service = service_index.get(service_id)
    if service is None:
        return []

    nodes: list[DepNode] = []
    for dep in service.depends_on:
        target = service_index.get(dep.service)
        nodes.append(
            DepNode(
                id=dep.service,
                name=target.name if target is not None else dep.service,
                api=dep.api,
                description=dep.description,
                children=walk_down(dep.service, service_index, max_depth, visited, depth + 1),
            )
        )
    return nodes


def walk_up(
    service_id: str,
    reverse_index: Mapping[str, list[Dependent]],
    max_depth: int,
    visited: set[str] | None = None,
    depth: int = 0,
) -> list[DepNode]:
    """Build the tree of what depends on *service_id*."""
    if visited is None:
        visited = set()
    if depth >= max_depth or service_id in visited:
        return []
    visited.add(service_id)

    return [
        DepNode(
            id=dependent.service.id,
            name=dependent.service.name,
            api=dependent.api,
            description=dependent.description,
            children=walk_up(dependent.service.id, reverse_index, max_depth, visited, depth + 1),
        )
        for dependent in reverse_index.get(service_id, [])
    ]


def find_orphans(services: Sequence[Service]) -> list[Service]:
    """Return services with no dependencies in either direction."""
    reverse_index = build_reverse_index(services)
    return [s for s in services if not s.depends_on and not reverse_index.get(s.id)]


def resolve_deps(
    service_id: str,
    services: Sequence[Service],
    max_depth: int,
    direction: Direction | str | None = None,
) -> DepsResult:
    """Resolve dependents and dependencies of *service_id*.

    ``direction="up"`` leaves ``dependencies`` empty, ``"down"`` leaves
    ``dependents`` empty. An unknown id echoes the id as the name and
    returns empty lists; callers report "not found" themselves.
    """
    service_index = index_services(services)
    service = service_index.get(service_id)

    dependents: list[DepNode] = []
    dependencies: list[DepNode] = []
    if direction != Direction.DOWN:
        dependents = walk_up(service_id, build_reverse_index(services), max_depth)
    if direction != Direction.UP:
        dependencies = walk_down(service_id, service_index, max_depth)

    return DepsResult(
        service_id=service_id,
        service_name=service.name if service is not None else service_id,
        dependents=dependents,
        dependencies=dependencies,
    )
