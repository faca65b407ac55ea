"""CatalogService — create, read, update and delete catalog records.

References to other records (``--system``, ``--owner``, ``--on``) are
accepted as an id or a case-insensitive name and stored as ids. An
unresolvable reference is stored verbatim with a warning; the linter
reports it as an orphaned or dangling reference later.
"""

from __future__ import annotations

from typing import Any

from yellowpages.domain.ids import new_id
from yellowpages.domain.models import Api, Dependency, Owner, Service, System
from yellowpages.domain.relations import (
    filter_services,
    resolve_owner,
    resolve_service,
    resolve_system,
)
from yellowpages.domain.types import ApiType, Collection, Lifecycle, OwnerType
from yellowpages.services._helpers import now_iso
from yellowpages.services.base import BaseService, catalog_op, not_found
from yellowpages.services.result import ServiceResult
from yellowpages.services.telemetry import traced


def _ref(record: Service | System | Owner | None) -> dict[str, str] | None:
    return {"id": record.id, "name": record.name} if record is not None else None


class CatalogService(BaseService):
    """Record CRUD for services, systems and owners."""

    # ------------------------------------------------------------------
    # Reference resolution
    # ------------------------------------------------------------------

    def _resolve_ref(
        self, collection: Collection, ref: str | None, warnings: list[str]
    ) -> str | None:
        """Resolve *ref* to an id, warning when nothing matches."""
        if not ref:
            return None
        resolved = self._store.resolve_id(collection, ref)
        if self._store.read_one(collection, resolved) is None:
            kind = collection.removesuffix("s")
            warnings.append(f"No {kind} matches '{ref}'; stored as-is")
        return resolved

    def _find(self, collection: Collection, ref: str) -> Any:
        return self._store.read_one(collection, self._store.resolve_id(collection, ref))

    # ------------------------------------------------------------------
    # Services
    # ------------------------------------------------------------------

    @traced
    @catalog_op("add_service")
    def add_service(
        self,
        name: str,
        *,
        description: str | None = None,
        system: str | None = None,
        owner: str | None = None,
        lifecycle: Lifecycle | str | None = None,
        repo: str | None = None,
        tags: list[str] | None = None,
    ) -> ServiceResult:
        warnings: list[str] = []
        now = now_iso()
        service = Service(
            id=new_id(),
            name=name,
            description=description,
            system=self._resolve_ref(Collection.SYSTEMS, system, warnings),
            owner=self._resolve_ref(Collection.OWNERS, owner, warnings),
            lifecycle=lifecycle,
            repo=repo,
            tags=tags,
            created=now,
            updated=now,
        )
        self._store.write_record(Collection.SERVICES, service)
        return ServiceResult(
            ok=True,
            op="add_service",
            data={"id": service.id, "service": service.to_json_dict()},
            warnings=warnings,
        )

    @traced
    @catalog_op("list_services")
    def list_services(
        self,
        *,
        system: str | None = None,
        owner: str | None = None,
        lifecycle: str | None = None,
        tag: str | None = None,
    ) -> ServiceResult:
        catalog = self._store.load_catalog()
        services = filter_services(
            catalog,
            system_id=self._store.resolve_id(Collection.SYSTEMS, system) if system else None,
            owner_id=self._store.resolve_id(Collection.OWNERS, owner) if owner else None,
            lifecycle=lifecycle,
            tag=tag,
        )
        return ServiceResult(
            ok=True,
            op="list_services",
            data={"services": [s.to_json_dict() for s in services], "count": len(services)},
        )

    @traced
    @catalog_op("show_service")
    def show_service(self, ref: str) -> ServiceResult:
        """Full profile: owner, system, APIs, dependencies and direct dependents."""
        catalog = self._store.load_catalog()
        resolved = resolve_service(self._store.resolve_id(Collection.SERVICES, ref), catalog)
        if resolved is None:
            return not_found("show_service", "service", ref)

        service = resolved.service
        dependencies = []
        for dep in service.depends_on:
            target = catalog.service(dep.service)
            dependencies.append(
                {
                    "id": dep.service,
                    "name": target.name if target is not None else dep.service,
                    "api": dep.api,
                    "description": dep.description,
                    "missing": target is None,
                }
            )
        dependents = [
            {
                "id": d.service.id,
                "name": d.service.name,
                "api": d.api,
                "description": d.description,
            }
            for d in resolved.dependents
        ]
        return ServiceResult(
            ok=True,
            op="show_service",
            data={
                "service": service.to_json_dict(),
                "system": _ref(resolved.system),
                "owner": _ref(resolved.owner),
                "dependencies": dependencies,
                "dependents": dependents,
            },
        )

    @traced
    @catalog_op("update_service")
    def update_service(
        self,
        ref: str,
        *,
        name: str | None = None,
        description: str | None = None,
        system: str | None = None,
        owner: str | None = None,
        lifecycle: Lifecycle | str | None = None,
        repo: str | None = None,
        tags: list[str] | None = None,
    ) -> ServiceResult:
        """Change only the fields that are given."""
        service = self._find(Collection.SERVICES, ref)
        if service is None:
            return not_found("update_service", "service", ref)

        warnings: list[str] = []
        changes: dict[str, Any] = {}
        if name is not None:
            changes["name"] = name
        if description is not None:
            changes["description"] = description
        if system is not None:
            changes["system"] = self._resolve_ref(Collection.SYSTEMS, system, warnings)
        if owner is not None:
            changes["owner"] = self._resolve_ref(Collection.OWNERS, owner, warnings)
        if lifecycle is not None:
            changes["lifecycle"] = Lifecycle(lifecycle)
        if repo is not None:
            changes["repo"] = repo
        if tags is not None:
            changes["tags"] = tags

        if not changes:
            return ServiceResult(
                ok=True,
                op="update_service",
                data={"id": service.id, "service": service.to_json_dict(), "fields_changed": []},
                warnings=["No fields to update"],
            )

        updated = Service.model_validate(
            {**service.model_dump(), **changes, "updated": now_iso()}
        )
        self._store.write_record(Collection.SERVICES, updated)
        return ServiceResult(
            ok=True,
            op="update_service",
            data={
                "id": updated.id,
                "service": updated.to_json_dict(),
                "fields_changed": sorted(changes),
            },
            warnings=warnings,
        )

    @traced
    @catalog_op("remove_service")
    def remove_service(self, ref: str) -> ServiceResult:
        """Delete a service record. Incoming dependencies are left dangling."""
        service = self._find(Collection.SERVICES, ref)
        if service is None:
            return not_found("remove_service", "service", ref)

        catalog = self._store.load_catalog()
        dependents = [
            s.name for s in catalog.services if any(d.service == service.id for d in s.depends_on)
        ]
        self._store.delete_record(Collection.SERVICES, service.id)

        warnings = []
        if dependents:
            warnings.append(
                f"{len(dependents)} service(s) still depend on {service.name}: "
                + ", ".join(dependents)
            )
        return ServiceResult(
            ok=True,
            op="remove_service",
            data={"id": service.id, "name": service.name, "deleted": True},
            warnings=warnings,
        )

    @traced
    @catalog_op("add_api")
    def add_api(
        self,
        ref: str,
        *,
        name: str,
        api_type: ApiType | str,
        spec: str | None = None,
        description: str | None = None,
    ) -> ServiceResult:
        service = self._find(Collection.SERVICES, ref)
        if service is None:
            return not_found("add_api", "service", ref)

        api = Api(name=name, type=ApiType(api_type), spec=spec, description=description)
        updated = service.model_copy(
            update={"apis": [*service.apis, api], "updated": now_iso()}
        )
        self._store.write_record(Collection.SERVICES, updated)
        return ServiceResult(
            ok=True,
            op="add_api",
            data={"id": updated.id, "api": api.to_json_dict(), "service": updated.to_json_dict()},
        )

    @traced
    @catalog_op("add_dependency")
    def add_dependency(
        self,
        ref: str,
        *,
        on: str,
        api: str | None = None,
        description: str | None = None,
    ) -> ServiceResult:
        """Append a ``dependsOn`` edge from *ref* to *on*.

        Self-dependencies and unknown targets are recorded; they are lint
        findings, not write errors.
        """
        service = self._find(Collection.SERVICES, ref)
        if service is None:
            return not_found("add_dependency", "service", ref)

        warnings: list[str] = []
        target_id = self._resolve_ref(Collection.SERVICES, on, warnings) or on
        if target_id == service.id:
            warnings.append(f"{service.name} now depends on itself")

        dep = Dependency(service=target_id, api=api, description=description)
        updated = service.model_copy(
            update={"depends_on": [*service.depends_on, dep], "updated": now_iso()}
        )
        self._store.write_record(Collection.SERVICES, updated)
        return ServiceResult(
            ok=True,
            op="add_dependency",
            data={
                "id": updated.id,
                "name": updated.name,
                "on": target_id,
                "dependency": dep.to_json_dict(),
                "service": updated.to_json_dict(),
            },
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Systems
    # ------------------------------------------------------------------

    @traced
    @catalog_op("add_system")
    def add_system(
        self,
        name: str,
        *,
        description: str | None = None,
        owner: str | None = None,
    ) -> ServiceResult:
        warnings: list[str] = []
        now = now_iso()
        system = System(
            id=new_id(),
            name=name,
            description=description,
            owner=self._resolve_ref(Collection.OWNERS, owner, warnings),
            created=now,
            updated=now,
        )
        self._store.write_record(Collection.SYSTEMS, system)
        return ServiceResult(
            ok=True,
            op="add_system",
            data={"id": system.id, "system": system.to_json_dict()},
            warnings=warnings,
        )

    @traced
    @catalog_op("list_systems")
    def list_systems(self, *, owner: str | None = None) -> ServiceResult:
        catalog = self._store.load_catalog()
        systems = catalog.systems
        if owner:
            owner_id = self._store.resolve_id(Collection.OWNERS, owner)
            systems = [s for s in systems if s.owner == owner_id]
        counts = {s.id: 0 for s in systems}
        for svc in catalog.services:
            if svc.system in counts:
                counts[svc.system] += 1
        return ServiceResult(
            ok=True,
            op="list_systems",
            data={
                "systems": [
                    {**s.to_json_dict(), "serviceCount": counts[s.id]} for s in systems
                ],
                "count": len(systems),
            },
        )

    @traced
    @catalog_op("show_system")
    def show_system(self, ref: str) -> ServiceResult:
        catalog = self._store.load_catalog()
        resolved = resolve_system(self._store.resolve_id(Collection.SYSTEMS, ref), catalog)
        if resolved is None:
            return not_found("show_system", "system", ref)
        return ServiceResult(
            ok=True,
            op="show_system",
            data={
                "system": resolved.system.to_json_dict(),
                "owner": _ref(resolved.owner),
                "services": [
                    {"id": s.id, "name": s.name, "lifecycle": s.lifecycle}
                    for s in resolved.services
                ],
            },
        )

    @traced
    @catalog_op("remove_system")
    def remove_system(self, ref: str) -> ServiceResult:
        system = self._find(Collection.SYSTEMS, ref)
        if system is None:
            return not_found("remove_system", "system", ref)
        members = [s.name for s in self._store.load_catalog().services if s.system == system.id]
        self._store.delete_record(Collection.SYSTEMS, system.id)
        warnings = []
        if members:
            warnings.append(
                f"{len(members)} service(s) still reference {system.name}: " + ", ".join(members)
            )
        return ServiceResult(
            ok=True,
            op="remove_system",
            data={"id": system.id, "name": system.name, "deleted": True},
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Owners
    # ------------------------------------------------------------------

    @traced
    @catalog_op("add_owner")
    def add_owner(
        self,
        name: str,
        *,
        owner_type: OwnerType | str,
        email: str | None = None,
        slack: str | None = None,
    ) -> ServiceResult:
        now = now_iso()
        owner = Owner(
            id=new_id(),
            name=name,
            type=OwnerType(owner_type),
            email=email,
            slack=slack,
            created=now,
            updated=now,
        )
        self._store.write_record(Collection.OWNERS, owner)
        return ServiceResult(
            ok=True,
            op="add_owner",
            data={"id": owner.id, "owner": owner.to_json_dict()},
        )

    @traced
    @catalog_op("list_owners")
    def list_owners(self, *, owner_type: str | None = None) -> ServiceResult:
        owners = self._store.load_catalog().owners
        if owner_type:
            owners = [o for o in owners if o.type == owner_type]
        return ServiceResult(
            ok=True,
            op="list_owners",
            data={"owners": [o.to_json_dict() for o in owners], "count": len(owners)},
        )

    @traced
    @catalog_op("show_owner")
    def show_owner(self, ref: str) -> ServiceResult:
        catalog = self._store.load_catalog()
        resolved = resolve_owner(self._store.resolve_id(Collection.OWNERS, ref), catalog)
        if resolved is None:
            return not_found("show_owner", "owner", ref)
        return ServiceResult(
            ok=True,
            op="show_owner",
            data={
                "owner": resolved.owner.to_json_dict(),
                "services": [
                    {"id": s.id, "name": s.name, "lifecycle": s.lifecycle}
                    for s in resolved.services
                ],
                "systems": [{"id": s.id, "name": s.name} for s in resolved.systems],
            },
        )

    @traced
    @catalog_op("remove_owner")
    def remove_owner(self, ref: str) -> ServiceResult:
        owner = self._find(Collection.OWNERS, ref)
        if owner is None:
            return not_found("remove_owner", "owner", ref)
        catalog = self._store.load_catalog()
        owned = [s.name for s in (*catalog.services, *catalog.systems) if s.owner == owner.id]
        self._store.delete_record(Collection.OWNERS, owner.id)
        warnings = []
        if owned:
            warnings.append(
                f"{len(owned)} record(s) still reference {owner.name}: " + ", ".join(owned)
            )
        return ServiceResult(
            ok=True,
            op="remove_owner",
            data={"id": owner.id, "name": owner.name, "deleted": True},
            warnings=warnings,
        )
