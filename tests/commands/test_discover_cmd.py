"""Tests for ``yp discover``."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from yellowpages.cli import cli
from yellowpages.domain.types import Collection
from yellowpages.infrastructure.store import CatalogStore


@pytest.fixture
def checkouts(tmp_path_factory: pytest.TempPathFactory) -> Path:
    root = tmp_path_factory.mktemp("src")
    for name in ("billing", "catalog-ui"):
        (root / name / ".git").mkdir(parents=True)
    return root


@pytest.mark.usefixtures("_isolated_catalog")
class TestDiscover:
    def test_requires_a_source(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["discover"])
        assert result.exit_code == 1
        assert "--github-org" in result.stderr

    def test_dry_run(self, cli_runner: CliRunner, checkouts: Path, store: CatalogStore) -> None:
        result = cli_runner.invoke(cli, ["discover", "--dir", str(checkouts), "--dry-run"])
        assert result.exit_code == 0
        assert "Would add" in result.stdout
        assert "billing" in result.stdout
        assert "Dry run" in result.stdout
        assert store.read_all(Collection.SERVICES) == []

    def test_apply_then_rerun(
        self, cli_runner: CliRunner, checkouts: Path, store: CatalogStore
    ) -> None:
        first = cli_runner.invoke(cli, ["--json", "discover", "--dir", str(checkouts)])
        data = json.loads(first.stdout)["data"]
        assert sorted(a["name"] for a in data["added"]) == ["billing", "catalog-ui"]
        assert len(store.read_all(Collection.SERVICES)) == 2

        second = cli_runner.invoke(cli, ["--json", "discover", "--dir", str(checkouts)])
        data = json.loads(second.stdout)["data"]
        assert data["added"] == []
        assert data["unchanged"] == 2
