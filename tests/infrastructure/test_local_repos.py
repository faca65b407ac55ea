"""Tests for local directory discovery."""

from __future__ import annotations

import json
from pathlib import Path

from yellowpages.infrastructure.local_repos import discover_from_dir, discover_from_repo


def _git_repo(path: Path) -> Path:
    (path / ".git").mkdir(parents=True)
    return path


class TestDiscoverFromRepo:
    def test_catalog_file_wins(self, tmp_path: Path) -> None:
        repo = _git_repo(tmp_path / "checkout")
        (repo / "catalog-info.yaml").write_text("metadata:\n  name: checkout-api\n")
        found = discover_from_repo(repo)
        assert found is not None
        assert found.name == "checkout-api"
        assert found.source == "catalog-file"

    def test_yellowpages_catalog_file(self, tmp_path: Path) -> None:
        repo = tmp_path / "svc"
        (repo / ".yellowpages").mkdir(parents=True)
        (repo / ".yellowpages" / "catalog.yml").write_text("metadata:\n  name: from-dotdir\n")
        found = discover_from_repo(repo)
        assert found is not None and found.name == "from-dotdir"

    def test_inferred_from_git_and_package_json(self, tmp_path: Path) -> None:
        repo = _git_repo(tmp_path / "web-app")
        (repo / "package.json").write_text(json.dumps({"description": "Storefront"}))
        found = discover_from_repo(repo)
        assert found is not None
        assert found.name == "web-app"
        assert found.description == "Storefront"
        assert found.source == "inferred"

    def test_broken_catalog_file_falls_back_to_inference(self, tmp_path: Path) -> None:
        repo = _git_repo(tmp_path / "api")
        (repo / "catalog-info.yaml").write_text("metadata: [oops")
        found = discover_from_repo(repo)
        assert found is not None and found.source == "inferred"

    def test_broken_package_json_is_ignored(self, tmp_path: Path) -> None:
        repo = _git_repo(tmp_path / "api")
        (repo / "package.json").write_text("{not json")
        found = discover_from_repo(repo)
        assert found is not None and found.description is None

    def test_plain_directory_is_skipped(self, tmp_path: Path) -> None:
        (tmp_path / "docs").mkdir()
        assert discover_from_repo(tmp_path / "docs") is None


class TestDiscoverFromDir:
    def test_scans_immediate_subdirectories(self, tmp_path: Path) -> None:
        _git_repo(tmp_path / "b-svc")
        _git_repo(tmp_path / "a-svc")
        _git_repo(tmp_path / ".hidden")
        _git_repo(tmp_path / "node_modules")
        (tmp_path / "notes").mkdir()
        (tmp_path / "README.md").write_text("x")
        assert [d.name for d in discover_from_dir(tmp_path)] == ["a-svc", "b-svc"]

    def test_missing_directory(self, tmp_path: Path) -> None:
        assert discover_from_dir(tmp_path / "nope") == []
