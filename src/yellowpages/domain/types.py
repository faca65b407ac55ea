"""Catalog enums.

Lifecycle stages, owner and API kinds, the three record collections,
and lint severities.
"""

from __future__ import annotations

from enum import StrEnum


class Lifecycle(StrEnum):
    """Deployment stage of a service."""

    EXPERIMENTAL = "experimental"
    PRODUCTION = "production"
    DEPRECATED = "deprecated"
    DECOMMISSIONED = "decommissioned"


class OwnerType(StrEnum):
    TEAM = "team"
    PERSON = "person"


class ApiType(StrEnum):
    REST = "rest"
    GRPC = "grpc"
    GRAPHQL = "graphql"
    EVENT = "event"
    OTHER = "other"


class Collection(StrEnum):
    """On-disk record collections under ``.yellowpages/``."""

    SERVICES = "services"
    SYSTEMS = "systems"
    OWNERS = "owners"


class EntityKind(StrEnum):
    """Singular entity names used in lint findings and search results."""

    SERVICE = "service"
    SYSTEM = "system"
    OWNER = "owner"


class Severity(StrEnum):
    ERROR = "error"
    WARNING = "warning"


class Direction(StrEnum):
    """Traversal direction for dependency queries."""

    UP = "up"
    DOWN = "down"
