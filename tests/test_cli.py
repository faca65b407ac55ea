"""Tests for the root yp CLI."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from yellowpages import __version__
from yellowpages.cli import cli


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "service catalog" in result.output
    for name in ("service", "system", "owner", "deps", "lint", "search", "discover", "export"):
        assert name in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert f"yp, version {__version__}" in result.output


def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


@pytest.mark.usefixtures("_isolated_empty")
class TestNotInitialized:
    def test_exit_code_3(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["service", "list"])
        assert result.exit_code == 3
        assert "yp init" in result.stderr

    def test_json_error_envelope(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "lint"])
        assert result.exit_code == 3
        payload = json.loads(result.stderr)
        assert payload["ok"] is False
        assert payload["error"]["code"] == "NOT_INITIALIZED"

    def test_help_works_outside_catalog(self, cli_runner: CliRunner) -> None:
        assert cli_runner.invoke(cli, ["service", "--help"]).exit_code == 0


class TestExamples:
    @pytest.mark.parametrize(
        "args",
        [
            ["init"],
            ["service"],
            ["service", "add"],
            ["service", "dep-add"],
            ["deps"],
            ["search"],
            ["lint"],
            ["discover"],
            ["export", "graph"],
        ],
    )
    def test_examples_flag(self, cli_runner: CliRunner, args: list[str]) -> None:
        result = cli_runner.invoke(cli, [*args, "--examples"])
        assert result.exit_code == 0
        assert "Examples for 'yp " in result.output
        assert "yp " in result.output.splitlines()[-1]


@pytest.mark.usefixtures("_isolated_catalog")
class TestGlobalFlags:
    def test_verbose_includes_telemetry(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "-v", "lint"])
        assert result.exit_code == 0
        meta = json.loads(result.stdout)["meta"]
        assert meta["telemetry"]["name"] == "LintService.lint"

    def test_config_override(
        self, cli_runner: CliRunner, tmp_path_factory: pytest.TempPathFactory
    ) -> None:
        cfg = tmp_path_factory.mktemp("cfg") / "yp.toml"
        cfg.write_text("[deps]\ndefault_depth = 2\n")
        cli_runner.invoke(cli, ["service", "add", "--name", "a"])
        result = cli_runner.invoke(cli, ["--json", "-c", str(cfg), "deps", "a"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["data"]["depth"] == 2
