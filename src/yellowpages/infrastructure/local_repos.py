"""Local directory discovery — find services in checked-out repositories.

Each immediate subdirectory of the scanned directory is a candidate
repository. A catalog descriptor file wins; otherwise a directory with
a ``.git`` entry is inferred to be a service named after the directory.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from yellowpages.domain.catalog_file import CATALOG_FILENAMES, DiscoveredService, parse_catalog_file

logger = logging.getLogger(__name__)

_SKIP_DIRS = frozenset({"node_modules", "__pycache__", "venv"})


def discover_from_repo(repo_dir: Path) -> DiscoveredService | None:
    """Discover a single service from *repo_dir*, or None."""
    for filename in CATALOG_FILENAMES:
        path = repo_dir / filename
        if path.is_file():
            parsed = parse_catalog_file(path.read_text(encoding="utf-8"), str(path))
            if parsed is not None:
                return parsed
            logger.debug("Ignoring unusable catalog file %s", path)

    if not (repo_dir / ".git").exists():
        return None

    description: str | None = None
    package_json = repo_dir / "package.json"
    if package_json.is_file():
        try:
            pkg = json.loads(package_json.read_text(encoding="utf-8"))
        except (OSError, UnicodeError, json.JSONDecodeError):
            logger.debug("Unreadable package.json in %s", repo_dir)
        else:
            if isinstance(pkg, dict) and pkg.get("description"):
                description = str(pkg["description"])

    return DiscoveredService(
        name=repo_dir.name,
        description=description,
        source="inferred",
        source_path=str(repo_dir),
    )


def discover_from_dir(directory: Path) -> list[DiscoveredService]:
    """Discover services in the immediate subdirectories of *directory*."""
    if not directory.is_dir():
        return []

    results: list[DiscoveredService] = []
    for entry in sorted(directory.iterdir()):
        if not entry.is_dir() or entry.name.startswith(".") or entry.name in _SKIP_DIRS:
            continue
        discovered = discover_from_repo(entry)
        if discovered is not None:
            results.append(discovered)
    return results
