"""Catalog integrity checks — the linter pattern over a full snapshot.

Each check is an independent pure function returning a list of
:class:`LintFinding`. :func:`run_lint_checks` concatenates them in a
fixed order so output stays stable for a given input order.

Anomalies are data, never exceptions: the point of a lint pass is to
surface every problem at once. Whether errors fail the process is the
caller's decision (see :func:`summarize`).
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Any

from yellowpages.domain.deps import index_services
from yellowpages.domain.models import Dependency, Owner, Service, System
from yellowpages.domain.types import EntityKind, Severity

# Finding types
ORPHANED_SYSTEM_REF = "orphaned_system_ref"
ORPHANED_OWNER_REF = "orphaned_owner_ref"
MISSING_OWNER = "missing_owner"
DANGLING_DEPENDENCY = "dangling_dependency"
CIRCULAR_DEPENDENCY = "circular_dependency"
DUPLICATE_NAME = "duplicate_name"
EMPTY_SYSTEM = "empty_system"


@dataclass(frozen=True)
class LintFinding:
    """One integrity-check result."""

    type: str
    severity: Severity
    entity: str
    entity_kind: EntityKind
    message: str
    fix: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "type": self.type,
            "severity": str(self.severity),
            "entity": self.entity,
            "entityKind": str(self.entity_kind),
            "message": self.message,
        }
        if self.fix is not None:
            result["fix"] = self.fix
        return result


@dataclass(frozen=True)
class LintSummary:
    errors: int
    warnings: int

    @property
    def ok(self) -> bool:
        """A catalog passes when it has no errors. Warnings never fail it."""
        return self.errors == 0


# ---------------------------------------------------------------------------
# Reference checks
# ---------------------------------------------------------------------------


def find_orphaned_system_refs(
    services: Sequence[Service], system_ids: set[str]
) -> list[LintFinding]:
    return [
        LintFinding(
            type=ORPHANED_SYSTEM_REF,
            severity=Severity.ERROR,
            entity=s.name,
            entity_kind=EntityKind.SERVICE,
            message=f'References system "{s.system}" which does not exist',
            fix=f"yp system add --name <name>  OR  yp service rm {s.name}",
        )
        for s in services
        if s.system and s.system not in system_ids
    ]


def find_orphaned_owner_refs(
    services: Sequence[Service],
    systems: Sequence[System],
    owner_ids: set[str],
) -> list[LintFinding]:
    findings: list[LintFinding] = []
    entities: list[tuple[Service | System, EntityKind]] = [
        *((s, EntityKind.SERVICE) for s in services),
        *((s, EntityKind.SYSTEM) for s in systems),
    ]
    for entity, kind in entities:
        if entity.owner and entity.owner not in owner_ids:
            findings.append(
                LintFinding(
                    type=ORPHANED_OWNER_REF,
                    severity=Severity.ERROR,
                    entity=entity.name,
                    entity_kind=kind,
                    message=f'References owner "{entity.owner}" which does not exist',
                    fix="yp owner add --name <name> --type team",
                )
            )
    return findings


def find_missing_owners(services: Sequence[Service]) -> list[LintFinding]:
    return [
        LintFinding(
            type=MISSING_OWNER,
            severity=Severity.WARNING,
            entity=s.name,
            entity_kind=EntityKind.SERVICE,
            message="Has no owner assigned",
            fix=f"yp service update {s.name} --owner <owner>",
        )
        for s in services
        if not s.owner
    ]


def find_dangling_deps(services: Sequence[Service], service_ids: set[str]) -> list[LintFinding]:
    return [
        LintFinding(
            type=DANGLING_DEPENDENCY,
            severity=Severity.ERROR,
            entity=s.name,
            entity_kind=EntityKind.SERVICE,
            message=f'Depends on "{dep.service}" which does not exist',
        )
        for s in services
        for dep in s.depends_on
        if dep.service not in service_ids
    ]


# ---------------------------------------------------------------------------
# Cycle detection
# ---------------------------------------------------------------------------


def find_circular_deps(services: Sequence[Service]) -> list[LintFinding]:
    """Detect dependency cycles with an ancestor-tracking DFS.

    Each service is taken in turn as the origin. The walk starts from
    each of its direct dependencies with the origin already on the
    ancestor path; ids join the path on entry and leave it on exit.
    Reaching an id that is on the path closes a cycle. Reports are
    deduplicated on the unordered pair (origin, closing id), so a
    self-dependency surfaces as the pair (A, A).
    """
    findings: list[LintFinding] = []
    service_index = index_services(services)
    reported: set[tuple[str, str]] = set()

    def deps_of(service_id: str) -> Iterator[Dependency]:
        service = service_index.get(service_id)
        return iter(service.depends_on if service is not None else ())

    for origin in services:
        ancestors: set[str] = {origin.id}

        def report(closing_id: str, origin: Service = origin) -> None:
            a, b = sorted((origin.id, closing_id))
            if (a, b) in reported:
                return
            reported.add((a, b))
            target = service_index.get(closing_id)
            target_name = target.name if target is not None else closing_id
            findings.append(
                LintFinding(
                    type=CIRCULAR_DEPENDENCY,
                    severity=Severity.ERROR,
                    entity=origin.name,
                    entity_kind=EntityKind.SERVICE,
                    message=f"Circular dependency detected: {origin.name} ↔ {target_name}",
                )
            )

        for first in deps_of(origin.id):
            if first.service in ancestors:
                report(first.service)
                continue
            ancestors.add(first.service)
            stack: list[tuple[str, Iterator[Dependency]]] = [
                (first.service, deps_of(first.service))
            ]
            while stack:
                node_id, pending = stack[-1]
                dep = next(pending, None)
                if dep is None:
                    stack.pop()
                    ancestors.discard(node_id)
                    continue
                if dep.service in ancestors:
                    report(dep.service)
                    continue
                ancestors.add(dep.service)
                stack.append((dep.service, deps_of(dep.service)))

    return findings


# ---------------------------------------------------------------------------
# Naming and structure checks
# ---------------------------------------------------------------------------


def find_duplicate_names(
    services: Sequence[Service],
    systems: Sequence[System],
    owners: Sequence[Owner],
) -> list[LintFinding]:
    """Flag case-insensitive name collisions within each entity kind."""
    findings: list[LintFinding] = []
    groups: list[tuple[Sequence[Service | System | Owner], EntityKind]] = [
        (services, EntityKind.SERVICE),
        (systems, EntityKind.SYSTEM),
        (owners, EntityKind.OWNER),
    ]
    for items, kind in groups:
        counts: dict[str, int] = {}
        for item in items:
            key = item.name.lower()
            counts[key] = counts.get(key, 0) + 1
        for name, count in counts.items():
            if count > 1:
                findings.append(
                    LintFinding(
                        type=DUPLICATE_NAME,
                        severity=Severity.ERROR,
                        entity=name,
                        entity_kind=kind,
                        message=f'{count} {kind}s share the name "{name}"',
                    )
                )
    return findings


def find_empty_systems(
    systems: Sequence[System], services: Sequence[Service]
) -> list[LintFinding]:
    used = {s.system for s in services if s.system}
    return [
        LintFinding(
            type=EMPTY_SYSTEM,
            severity=Severity.WARNING,
            entity=sys.name,
            entity_kind=EntityKind.SYSTEM,
            message="System has no services",
            fix=f"yp service add --name <name> --system {sys.name}  OR  yp system rm {sys.name}",
        )
        for sys in systems
        if sys.id not in used
    ]


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------


def run_lint_checks(
    services: Sequence[Service],
    systems: Sequence[System],
    owners: Sequence[Owner],
) -> list[LintFinding]:
    """Run every check against the catalog snapshot. Pure — no I/O."""
    service_ids = {s.id for s in services}
    system_ids = {s.id for s in systems}
    owner_ids = {o.id for o in owners}

    return [
        *find_orphaned_system_refs(services, system_ids),
        *find_orphaned_owner_refs(services, systems, owner_ids),
        *find_missing_owners(services),
        *find_dangling_deps(services, service_ids),
        *find_circular_deps(services),
        *find_duplicate_names(services, systems, owners),
        *find_empty_systems(systems, services),
    ]


def summarize(findings: Sequence[LintFinding]) -> LintSummary:
    errors = sum(1 for f in findings if f.severity == Severity.ERROR)
    return LintSummary(errors=errors, warnings=len(findings) - errors)
