"""DiscoverService — import services from local repos or a GitHub org.

Discovered services are diffed against the catalog by case-insensitive
name. Additions get new ids; updates keep the existing id and creation
time and only overwrite fields the discovery actually supplied.
Owner, system and dependency names are resolved to ids at apply time.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from yellowpages.domain.catalog_file import DiscoveredService, diff_services
from yellowpages.domain.ids import new_id
from yellowpages.domain.models import Service
from yellowpages.domain.types import Collection
from yellowpages.infrastructure.github import GitHubDiscovery, GitHubError
from yellowpages.infrastructure.local_repos import discover_from_dir
from yellowpages.services._helpers import now_iso
from yellowpages.services.base import BaseService, catalog_op
from yellowpages.services.result import ErrorCode, ServiceResult
from yellowpages.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    import httpx

    from yellowpages.config.settings import YpSettings
    from yellowpages.infrastructure.store import CatalogStore


class DiscoverService(BaseService):
    def __init__(
        self,
        store: CatalogStore,
        settings: YpSettings | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        super().__init__(store, settings)
        self._transport = transport

    @traced
    @catalog_op("discover")
    def discover(
        self,
        *,
        directory: Path | None = None,
        github_org: str | None = None,
        topic: str | None = None,
        language: str | None = None,
        dry_run: bool = False,
    ) -> ServiceResult:
        if directory is None and not github_org:
            return ServiceResult.failure(
                "discover",
                ErrorCode.NO_SOURCE,
                "Specify a source: --github-org <org> or --dir <path>",
            )

        warnings: list[str] = []
        discovered: list[DiscoveredService] = []

        if github_org:
            with trace_span("github"):
                try:
                    with GitHubDiscovery(
                        self._settings.discover, transport=self._transport
                    ) as client:
                        discovered.extend(
                            client.discover(github_org, topic=topic, language=language)
                        )
                except GitHubError as exc:
                    return ServiceResult.failure(
                        "discover",
                        ErrorCode.GITHUB_ERROR,
                        f"GitHub discovery failed: {exc}",
                        org=github_org,
                    )

        if directory is not None:
            if not directory.is_dir():
                warnings.append(f"Not a directory: {directory}")
            with trace_span("local"):
                discovered.extend(discover_from_dir(directory))

        existing = self._store.load_catalog().services
        diff = diff_services(discovered, existing)
        unchanged = len(discovered) - len(diff.added) - len(diff.updated)

        if dry_run:
            return ServiceResult(
                ok=True,
                op="discover",
                data={
                    "dry_run": True,
                    "discovered": len(discovered),
                    "added": [
                        {"name": d.name, "description": d.description, "source": d.source}
                        for d in diff.added
                    ],
                    "updated": [
                        {
                            "id": u.existing.id,
                            "name": u.discovered.name,
                            "source": u.discovered.source,
                        }
                        for u in diff.updated
                    ],
                    "unchanged": unchanged,
                },
                warnings=warnings,
            )

        added = [self._apply(d) for d in diff.added]
        updated = [self._apply(u.discovered, u.existing) for u in diff.updated]
        return ServiceResult(
            ok=True,
            op="discover",
            data={
                "dry_run": False,
                "discovered": len(discovered),
                "added": [{"id": s.id, "name": s.name} for s in added],
                "updated": [{"id": s.id, "name": s.name} for s in updated],
                "unchanged": unchanged,
            },
            warnings=warnings,
        )

    def _apply(self, discovered: DiscoveredService, existing: Service | None = None) -> Service:
        """Create or update the record for *discovered* and write it."""
        store = self._store
        now = now_iso()

        owner = (
            store.resolve_id(Collection.OWNERS, discovered.owner)
            if discovered.owner
            else (existing.owner if existing else None)
        )
        system = (
            store.resolve_id(Collection.SYSTEMS, discovered.system)
            if discovered.system
            else (existing.system if existing else None)
        )
        deps = [
            d.model_copy(update={"service": store.resolve_id(Collection.SERVICES, d.service)})
            for d in discovered.depends_on or []
        ]

        def pick(field: str) -> object:
            value = getattr(discovered, field)
            if value is None and existing is not None:
                return getattr(existing, field)
            return value

        service = Service(
            id=existing.id if existing else new_id(),
            name=discovered.name,
            description=pick("description"),
            system=system,
            owner=owner,
            lifecycle=pick("lifecycle"),
            repo=pick("repo"),
            tags=pick("tags"),
            apis=discovered.apis or (existing.apis if existing else []),
            depends_on=deps or (existing.depends_on if existing else []),
            custom=existing.custom if existing else None,
            created=existing.created if existing else now,
            updated=now,
        )
        store.write_record(Collection.SERVICES, service)
        return service
