"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``YP_*`` prefix
  3. TOML file    — ``.yellowpages/config.toml`` in the discovered root
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the walk-up root discovery from :mod:`yellowpages.config.discovery`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from yellowpages.config.discovery import config_path_for, find_root
from yellowpages.config.models import CatalogConfig, DepsConfig, DiscoverConfig, SearchConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from ``.yellowpages/config.toml``."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                import click

                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class YpSettings(BaseSettings):
    """Unified settings for the entire ``yp`` CLI.

    Merges CLI flags, environment variables, TOML config sections,
    and code-baked defaults into a single frozen object.

    Attributes:
        catalog_root: The discovered ``.yellowpages`` directory, or None
            when the working directory is not inside a catalog project.
        config_path: The TOML file actually read, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "YP_",
        "env_nested_delimiter": "__",
    }

    # --- Resolved paths (not in TOML) ---
    catalog_root: Path | None = None
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    deps: DepsConfig = Field(default_factory=DepsConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    discover: DiscoverConfig = Field(default_factory=DiscoverConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        cwd: Path | None = None,
        **cli_flags: Any,
    ) -> YpSettings:
        """Construct settings from a CLI invocation.

        Discovers the catalog root via walk-up from *cwd*, reads its
        ``config.toml`` (or the explicit *config_path*), and merges CLI
        flags as highest-priority overrides.
        """
        root = find_root(cwd)

        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        elif root is not None:
            toml_path = config_path_for(root)

        _tls.toml_path = toml_path
        try:
            return cls(
                catalog_root=root,
                config_path=toml_path if toml_path and toml_path.is_file() else None,
                **cli_flags,
            )
        finally:
            _tls.toml_path = None
