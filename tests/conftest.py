"""Shared pytest fixtures and test helpers for yellowpages tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from yellowpages.domain.models import Dependency, Owner, Service, System
from yellowpages.domain.types import Collection
from yellowpages.infrastructure.store import CatalogStore, init_store
from yellowpages.services.telemetry import disable_telemetry


@pytest.fixture(autouse=True)
def _no_root_override(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's YP_* environment out of the tests."""
    monkeypatch.delenv("YP_ROOT", raising=False)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("GH_TOKEN", raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def catalog_root(tmp_path: Path) -> Path:
    """Initialized ``.yellowpages`` directory inside a temp project.

    This is the single source of truth for the catalog layout. All
    catalog fixtures (store, _isolated_catalog) build on this.
    """
    root, _created = init_store(tmp_path)
    return root


@pytest.fixture
def store(catalog_root: Path) -> CatalogStore:
    return CatalogStore(catalog_root)


@pytest.fixture
def _isolated_catalog(catalog_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp project with an initialized catalog.

    Use via ``@pytest.mark.usefixtures("_isolated_catalog")`` on command
    test classes.
    """
    monkeypatch.chdir(catalog_root.parent)


@pytest.fixture
def _isolated_empty(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory with no catalog."""
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def svc(service_id: str, name: str | None = None, *deps: str, **kwargs: Any) -> Service:
    """Build a Service whose ``dependsOn`` targets are *deps*."""
    return Service(
        id=service_id,
        name=name or service_id,
        depends_on=[Dependency(service=d) for d in deps],
        **kwargs,
    )


def seed(store: CatalogStore, *records: Service | System | Owner) -> None:
    """Write records straight to the store."""
    kinds = {Service: Collection.SERVICES, System: Collection.SYSTEMS, Owner: Collection.OWNERS}
    for record in records:
        store.write_record(kinds[type(record)], record)


def seed_payments(store: CatalogStore) -> None:
    """gateway → payments → db, under a payments system owned by a team."""
    seed(
        store,
        Owner(id="team1", name="payments-team"),
        System(id="sys1", name="payments-system", owner="team1"),
        Service(
            id="db",
            name="postgres",
            system="sys1",
            owner="team1",
            lifecycle="production",
            tags=["storage"],
        ),
        Service(
            id="pay",
            name="payments",
            description="Processes card payments",
            system="sys1",
            owner="team1",
            lifecycle="production",
            depends_on=[Dependency(service="db", api="SQL")],
        ),
        Service(
            id="gw",
            name="gateway",
            description="Public API gateway",
            system="sys1",
            owner="team1",
            lifecycle="production",
            depends_on=[Dependency(service="pay", api="Payments API", description="charges")],
        ),
    )


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Iterator[None]:
    """``yp -v`` enables telemetry for the rest of the thread; switch it back off."""
    yield
    disable_telemetry()
