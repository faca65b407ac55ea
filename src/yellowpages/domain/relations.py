"""Single-hop relations between catalog records.

These are linear scans over a loaded :class:`CatalogData` snapshot:
a service's owner and system, the services in a system, what an owner
owns, and the direct dependents of a service. Multi-hop traversal lives
in :mod:`yellowpages.domain.deps`.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from yellowpages.domain.deps import Dependent
from yellowpages.domain.models import Owner, Service, System


@dataclass(frozen=True)
class CatalogData:
    """A full in-memory snapshot of the catalog."""

    services: list[Service] = field(default_factory=list)
    systems: list[System] = field(default_factory=list)
    owners: list[Owner] = field(default_factory=list)

    def service(self, service_id: str) -> Service | None:
        return next((s for s in self.services if s.id == service_id), None)

    def system(self, system_id: str) -> System | None:
        return next((s for s in self.systems if s.id == system_id), None)

    def owner(self, owner_id: str) -> Owner | None:
        return next((o for o in self.owners if o.id == owner_id), None)


@dataclass(frozen=True)
class ResolvedService:
    service: Service
    owner: Owner | None
    system: System | None
    dependents: list[Dependent]


@dataclass(frozen=True)
class ResolvedSystem:
    system: System
    owner: Owner | None
    services: list[Service]


@dataclass(frozen=True)
class ResolvedOwner:
    owner: Owner
    services: list[Service]
    systems: list[System]


def resolve_service(service_id: str, catalog: CatalogData) -> ResolvedService | None:
    """Resolve a service's owner, system and direct dependents."""
    service = catalog.service(service_id)
    if service is None:
        return None

    dependents: list[Dependent] = []
    for other in catalog.services:
        dep = next((d for d in other.depends_on if d.service == service_id), None)
        if dep is not None:
            dependents.append(Dependent(service=other, api=dep.api, description=dep.description))

    return ResolvedService(
        service=service,
        owner=catalog.owner(service.owner) if service.owner else None,
        system=catalog.system(service.system) if service.system else None,
        dependents=dependents,
    )


def resolve_system(system_id: str, catalog: CatalogData) -> ResolvedSystem | None:
    system = catalog.system(system_id)
    if system is None:
        return None
    return ResolvedSystem(
        system=system,
        owner=catalog.owner(system.owner) if system.owner else None,
        services=[s for s in catalog.services if s.system == system_id],
    )


def resolve_owner(owner_id: str, catalog: CatalogData) -> ResolvedOwner | None:
    owner = catalog.owner(owner_id)
    if owner is None:
        return None
    return ResolvedOwner(
        owner=owner,
        services=[s for s in catalog.services if s.owner == owner_id],
        systems=[s for s in catalog.systems if s.owner == owner_id],
    )


def filter_services(
    catalog: CatalogData,
    *,
    system_id: str | None = None,
    owner_id: str | None = None,
    lifecycle: str | None = None,
    tag: str | None = None,
) -> list[Service]:
    """Return services matching every given filter."""
    services = catalog.services
    if system_id:
        services = [s for s in services if s.system == system_id]
    if owner_id:
        services = [s for s in services if s.owner == owner_id]
    if lifecycle:
        services = [s for s in services if s.lifecycle == lifecycle]
    if tag:
        services = [s for s in services if tag in (s.tags or [])]
    return services
