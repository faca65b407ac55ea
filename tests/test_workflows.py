"""End-to-end workflows driven entirely through the CLI."""

from __future__ import annotations

import json
from typing import Any

import pytest
from click.testing import CliRunner

from yellowpages.cli import cli


def _run(runner: CliRunner, *args: str) -> dict[str, Any]:
    result = runner.invoke(cli, ["--json", *args])
    assert result.exit_code in (0, 1), result.output
    return json.loads(result.stdout)


@pytest.mark.usefixtures("_isolated_empty")
class TestCatalogLifecycle:
    def test_build_query_and_lint(self, cli_runner: CliRunner) -> None:
        assert _run(cli_runner, "init")["data"]["created"] is True

        _run(cli_runner, "owner", "add", "--name", "payments-team", "--type", "team")
        _run(cli_runner, "system", "add", "--name", "payments", "--owner", "payments-team")
        for name in ("postgres", "ledger", "checkout", "gateway"):
            _run(
                cli_runner,
                "service", "add", "--name", name,
                "--system", "payments", "--owner", "payments-team",
            )
        _run(cli_runner, "service", "dep-add", "ledger", "--on", "postgres", "--api", "SQL")
        _run(cli_runner, "service", "dep-add", "checkout", "--on", "ledger")
        _run(cli_runner, "service", "dep-add", "gateway", "--on", "checkout")

        # Who breaks if postgres goes down?
        up = _run(cli_runner, "deps", "postgres", "--direction", "up")["data"]
        chain = []
        nodes = up["dependents"]
        while nodes:
            chain.append(nodes[0]["name"])
            nodes = nodes[0]["children"]
        assert chain == ["ledger", "checkout", "gateway"]

        truncated = _run(cli_runner, "deps", "postgres", "--direction", "up", "--depth", "2")
        ledger = truncated["data"]["dependents"][0]
        assert ledger["children"][0]["name"] == "checkout"
        assert ledger["children"][0]["children"] == []

        lint = _run(cli_runner, "lint")
        assert lint["data"]["success"] is True

        # Closing a loop turns lint red.
        _run(cli_runner, "service", "dep-add", "postgres", "--on", "gateway")
        result = cli_runner.invoke(cli, ["--json", "lint"])
        assert result.exit_code == 1
        messages = [r["message"] for r in json.loads(result.stdout)["data"]["results"]]
        assert any(m.startswith("Circular dependency detected") for m in messages)

    def test_remove_leaves_dangling_reference(self, cli_runner: CliRunner) -> None:
        _run(cli_runner, "init")
        _run(cli_runner, "service", "add", "--name", "api")
        _run(cli_runner, "service", "add", "--name", "db")
        _run(cli_runner, "service", "dep-add", "api", "--on", "db")

        removed = _run(cli_runner, "service", "rm", "db")
        assert removed["warnings"] == ["1 service(s) still depend on db: api"]

        result = cli_runner.invoke(cli, ["--json", "lint", "--errors-only"])
        assert result.exit_code == 1
        findings = json.loads(result.stdout)["data"]["results"]
        assert [f["type"] for f in findings] == ["dangling_dependency"]

        graph = _run(cli_runner, "export", "graph")["data"]
        assert len(graph["missing"]) == 1
