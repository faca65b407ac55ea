"""Tests for ``yp search``."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from tests.conftest import seed_payments
from yellowpages.cli import cli
from yellowpages.infrastructure.store import CatalogStore


@pytest.mark.usefixtures("_isolated_catalog")
class TestSearch:
    def test_multi_word_query(self, cli_runner: CliRunner, store: CatalogStore) -> None:
        seed_payments(store)
        result = cli_runner.invoke(cli, ["--json", "search", "gate", "postgres"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)["data"]
        assert data["query"] == "gate postgres"
        assert {r["id"] for r in data["results"]} == {"gw", "db"}

    def test_misspelled_query(self, cli_runner: CliRunner, store: CatalogStore) -> None:
        seed_payments(store)
        result = cli_runner.invoke(cli, ["--json", "search", "gatway"])
        assert result.exit_code == 0
        assert [r["id"] for r in json.loads(result.stdout)["data"]["results"]] == ["gw"]

    def test_human_output(self, cli_runner: CliRunner, store: CatalogStore) -> None:
        seed_payments(store)
        result = cli_runner.invoke(cli, ["search", "payments", "--kind", "system"])
        assert result.exit_code == 0
        assert "payments-system" in result.stdout
        assert "1 result(s)" in result.stdout

    def test_filter_only(self, cli_runner: CliRunner, store: CatalogStore) -> None:
        seed_payments(store)
        cli_runner.invoke(cli, ["service", "add", "--name", "stray"])
        result = cli_runner.invoke(cli, ["--json", "search", "--unowned"])
        names = [r["name"] for r in json.loads(result.stdout)["data"]["results"]]
        assert names == ["stray"]

    def test_no_results(self, cli_runner: CliRunner, store: CatalogStore) -> None:
        seed_payments(store)
        result = cli_runner.invoke(cli, ["search", "zzz"])
        assert result.exit_code == 0
        assert 'No results for "zzz"' in result.stdout

    def test_nothing_given_is_usage_error(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["search"])
        assert result.exit_code == 2
