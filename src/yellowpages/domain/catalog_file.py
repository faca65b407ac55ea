"""Catalog descriptor files and discovery diffing.

A repository can describe itself with a Backstage-style
``catalog-info.yaml`` (or ``.yellowpages/catalog.yaml``)::

    apiVersion: yellowpages/v1
    kind: Service
    metadata:
      name: checkout-api
      description: Takes payments
    spec:
      system: payments
      owner: platform-team
      lifecycle: production
      dependsOn:
        - auth
        - service: ledger
          api: Ledger API

References inside a descriptor are *names*, not ids. They are resolved
against the catalog when the discovered service is applied.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from yellowpages.domain.models import Api, Dependency, Service
from yellowpages.domain.types import ApiType, Lifecycle

CATALOG_FILENAMES = (
    "catalog-info.yaml",
    "catalog-info.yml",
    ".yellowpages/catalog.yaml",
    ".yellowpages/catalog.yml",
)

DiscoverySource = Literal["catalog-file", "inferred"]


class DiscoveredService(BaseModel):
    """A service found outside the catalog, not yet applied to it."""

    model_config = {"frozen": True}

    name: str
    description: str | None = None
    system: str | None = None
    owner: str | None = None
    lifecycle: Lifecycle | None = None
    repo: str | None = None
    tags: list[str] | None = None
    apis: list[Api] | None = None
    depends_on: list[Dependency] | None = None
    source: DiscoverySource = "inferred"
    source_path: str | None = None


def _str_or_none(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _parse_lifecycle(value: Any) -> Lifecycle | None:
    try:
        return Lifecycle(str(value)) if value is not None else None
    except ValueError:
        return None


def _parse_api(raw: Any) -> Api | None:
    if not isinstance(raw, dict) or not raw.get("name"):
        return None
    try:
        api_type = ApiType(str(raw.get("type", "other")))
    except ValueError:
        api_type = ApiType.OTHER
    return Api(
        name=str(raw["name"]),
        type=api_type,
        spec=_str_or_none(raw.get("spec")),
        description=_str_or_none(raw.get("description")),
    )


def _parse_dependency(raw: Any) -> Dependency | None:
    if isinstance(raw, str):
        return Dependency(service=raw)
    if isinstance(raw, dict) and raw.get("service"):
        return Dependency(
            service=str(raw["service"]),
            api=_str_or_none(raw.get("api")),
            description=_str_or_none(raw.get("description")),
        )
    return None


def parse_catalog_file(content: str, source_path: str) -> DiscoveredService | None:
    """Parse descriptor YAML. Returns None when it is unusable.

    Unparseable YAML, a non-mapping document and a missing
    ``metadata.name`` all yield None rather than raising.
    """
    try:
        doc = YAML(typ="safe").load(content)
    except YAMLError:
        return None

    if not isinstance(doc, dict):
        return None
    metadata = doc.get("metadata")
    if not isinstance(metadata, dict) or not metadata.get("name"):
        return None
    spec = doc.get("spec")
    if not isinstance(spec, dict):
        spec = {}

    apis = [a for a in (_parse_api(r) for r in spec.get("apis") or []) if a is not None]
    deps = [
        d for d in (_parse_dependency(r) for r in spec.get("dependsOn") or []) if d is not None
    ]
    tags = spec.get("tags")

    return DiscoveredService(
        name=str(metadata["name"]),
        description=_str_or_none(metadata.get("description")),
        system=_str_or_none(spec.get("system")),
        owner=_str_or_none(spec.get("owner")),
        lifecycle=_parse_lifecycle(spec.get("lifecycle")),
        repo=_str_or_none(spec.get("repo")),
        tags=[str(t) for t in tags] if isinstance(tags, list) else None,
        apis=apis or None,
        depends_on=deps or None,
        source="catalog-file",
        source_path=source_path,
    )


# ---------------------------------------------------------------------------
# Diffing against the existing catalog
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class UpdatedService:
    existing: Service
    discovered: DiscoveredService


@dataclass(frozen=True)
class DiscoverDiff:
    added: list[DiscoveredService] = field(default_factory=list)
    updated: list[UpdatedService] = field(default_factory=list)
    unchanged: list[Service] = field(default_factory=list)


def diff_services(
    discovered: Sequence[DiscoveredService], existing: Sequence[Service]
) -> DiscoverDiff:
    """Match discovered services to existing ones by case-insensitive name.

    A match counts as updated only when its description, lifecycle or
    repo differ. Every existing service not updated is unchanged.
    """
    existing_by_name = {s.name.lower(): s for s in existing}
    added: list[DiscoveredService] = []
    updated: list[UpdatedService] = []

    for d in discovered:
        match = existing_by_name.get(d.name.lower())
        if match is None:
            added.append(d)
            continue
        changed = (
            d.description != match.description
            or d.lifecycle != match.lifecycle
            or d.repo != match.repo
        )
        if changed:
            updated.append(UpdatedService(existing=match, discovered=d))

    updated_ids = {u.existing.id for u in updated}
    unchanged = [s for s in existing if s.id not in updated_ids]
    return DiscoverDiff(added=added, updated=updated, unchanged=unchanged)
