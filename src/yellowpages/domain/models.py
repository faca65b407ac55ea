"""Catalog record models.

Attributes map 1:1 to the JSON keys of the record files. Keys on disk
are camelCase (``dependsOn``); Python code uses snake_case and the
models accept either form on input.

Records are frozen: the graph engine and linter treat them as
read-only snapshots, and mutating commands build a new record via
``model_copy(update=...)`` before writing it back.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from yellowpages.domain.types import ApiType, Lifecycle, OwnerType


class _Record(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize with on-disk (camelCase) keys, dropping unset fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Api(_Record):
    """An interface exposed by a service."""

    name: str
    type: ApiType = ApiType.OTHER
    spec: str | None = None
    description: str | None = None


class Dependency(_Record):
    """A directed edge from the owning service to *service*.

    ``service`` is a reference to another service id. It may name the
    owning service itself or an id that does not exist; both states are
    reported by the linter rather than rejected here.
    """

    service: str
    api: str | None = None
    description: str | None = None


class Service(_Record):
    id: str
    name: str
    description: str | None = None
    system: str | None = None
    owner: str | None = None
    lifecycle: Lifecycle | None = None
    repo: str | None = None
    tags: list[str] | None = None
    apis: list[Api] = Field(default_factory=list)
    depends_on: list[Dependency] = Field(default_factory=list)
    custom: dict[str, str] | None = None
    created: str = ""
    updated: str = ""


class System(_Record):
    id: str
    name: str
    description: str | None = None
    owner: str | None = None
    custom: dict[str, str] | None = None
    created: str = ""
    updated: str = ""


class Owner(_Record):
    id: str
    name: str
    type: OwnerType = OwnerType.TEAM
    email: str | None = None
    slack: str | None = None
    custom: dict[str, str] | None = None
    created: str = ""
    updated: str = ""
