"""Tests for catalog root discovery and standalone config loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from yellowpages.config.discovery import find_root, load_config


class TestFindRoot:
    def test_walks_up(self, catalog_root: Path) -> None:
        deep = catalog_root.parent / "a" / "b" / "c"
        deep.mkdir(parents=True)
        assert find_root(deep) == catalog_root

    def test_none_outside_catalog(self, tmp_path: Path) -> None:
        assert find_root(tmp_path) is None

    def test_env_var_project_dir(
        self,
        catalog_root: Path,
        tmp_path_factory: pytest.TempPathFactory,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("YP_ROOT", str(catalog_root.parent))
        assert find_root(tmp_path_factory.mktemp("elsewhere")) == catalog_root

    def test_env_var_catalog_dir(
        self, catalog_root: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("YP_ROOT", str(catalog_root))
        assert find_root() == catalog_root

    def test_env_var_without_catalog(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("YP_ROOT", str(tmp_path))
        assert find_root() is None


class TestLoadConfig:
    def test_defaults_without_file(self, tmp_path: Path) -> None:
        config = load_config(cwd=tmp_path)
        assert config.catalog.version == 1
        assert config.discover.token_env_vars == ["GITHUB_TOKEN", "GH_TOKEN"]

    def test_sparse_overrides(self, catalog_root: Path) -> None:
        (catalog_root / "config.toml").write_text("[discover]\ninclude_forks = true\n")
        config = load_config(cwd=catalog_root.parent)
        assert config.discover.include_forks is True
        assert config.discover.include_archived is False
