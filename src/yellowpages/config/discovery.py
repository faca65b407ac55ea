"""Catalog root discovery and config loading.

Walk-up finder locates the ``.yellowpages/`` directory, similar to how
git finds ``.git/``. The ``YP_ROOT`` env var overrides the walk.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from yellowpages.config.models import YpConfig

CATALOG_DIRNAME = ".yellowpages"
CONFIG_FILENAME = "config.toml"
ROOT_ENV_VAR = "YP_ROOT"


def find_root(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for ``.yellowpages/``.

    Returns the path to the ``.yellowpages`` directory itself, or None.
    Checks ``YP_ROOT`` first; it may name either the project directory
    or the ``.yellowpages`` directory.
    """
    env_path = os.environ.get(ROOT_ENV_VAR)
    if env_path:
        p = Path(env_path)
        if p.name != CATALOG_DIRNAME:
            p = p / CATALOG_DIRNAME
        return p if p.is_dir() else None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CATALOG_DIRNAME
        if candidate.is_dir():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def config_path_for(root: Path) -> Path:
    """Path of the config file inside a ``.yellowpages`` directory."""
    return root / CONFIG_FILENAME


def load_config(path: Path | None = None, cwd: Path | None = None) -> YpConfig:
    """Load and validate config from a TOML file.

    If *path* is None, the file is looked up inside the discovered
    catalog root. Returns the default YpConfig if nothing is found.
    """
    if path is None:
        root = find_root(cwd)
        path = config_path_for(root) if root else None

    if path is None or not path.is_file():
        return YpConfig()

    raw = path.read_text(encoding="utf-8")
    data: dict[str, Any] = tomllib.loads(raw)
    return YpConfig.model_validate(data)
