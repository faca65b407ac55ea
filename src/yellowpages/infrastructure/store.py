"""CatalogStore — JSON-file record store under ``.yellowpages/``.

Layout::

    .yellowpages/
      config.toml
      .gitignore
      services/<id>.json
      systems/<id>.json
      owners/<id>.json

INVARIANT: Files are truth. Every command reloads the records it needs
from disk; there is no cache besides the search index, which is
derived and git-ignored.

Writes are single-file overwrites with no cross-record transaction.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TypeVar

from pydantic import ValidationError

from yellowpages.config.discovery import CATALOG_DIRNAME, CONFIG_FILENAME
from yellowpages.domain.ids import is_valid_id
from yellowpages.domain.models import Owner, Service, System
from yellowpages.domain.relations import CatalogData
from yellowpages.domain.types import Collection

logger = logging.getLogger(__name__)

GITIGNORE_ENTRIES = (".search-index.db",)

DEFAULT_CONFIG_TOML = "[catalog]\nversion = 1\n"

Record = Service | System | Owner
_R = TypeVar("_R", Service, System, Owner)

RECORD_TYPES: dict[Collection, type[Service] | type[System] | type[Owner]] = {
    Collection.SERVICES: Service,
    Collection.SYSTEMS: System,
    Collection.OWNERS: Owner,
}


class CatalogReadError(Exception):
    """A record file exists but cannot be parsed or validated."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Cannot read {path}: {reason}")
        self.path = path
        self.reason = reason


# ---------------------------------------------------------------------------
# Initialization
# ---------------------------------------------------------------------------


def ensure_gitignore(root: Path) -> None:
    """Ensure ``.yellowpages/.gitignore`` lists the derived cache files.

    Creates the file if missing, appends only the missing entries otherwise.
    """
    gitignore = root / ".gitignore"
    existing = gitignore.read_text(encoding="utf-8") if gitignore.exists() else ""
    lines = {line.strip() for line in existing.splitlines()}
    missing = [e for e in GITIGNORE_ENTRIES if e not in lines]
    if not missing:
        return
    append = "\n".join(missing) + "\n"
    content = f"{existing.rstrip()}\n{append}" if existing.strip() else append
    gitignore.write_text(content, encoding="utf-8")


def init_store(cwd: Path) -> tuple[Path, bool]:
    """Create ``.yellowpages/`` under *cwd*.

    Idempotent. Returns ``(root, created)``.
    """
    root = cwd / CATALOG_DIRNAME
    if root.exists():
        return root, False
    root.mkdir(parents=True)
    for collection in Collection:
        (root / collection).mkdir()
    (root / CONFIG_FILENAME).write_text(DEFAULT_CONFIG_TOML, encoding="utf-8")
    ensure_gitignore(root)
    logger.debug("Initialized catalog at %s", root)
    return root, True


# ---------------------------------------------------------------------------
# CatalogStore
# ---------------------------------------------------------------------------


class CatalogStore:
    """Read/write access to the record files of one catalog root."""

    def __init__(self, root: Path) -> None:
        self.root = root

    @property
    def project_dir(self) -> Path:
        """The directory containing ``.yellowpages/``."""
        return self.root.parent

    def _record_path(self, collection: Collection, record_id: str) -> Path:
        if not is_valid_id(record_id):
            msg = f"Invalid record id: {record_id!r}"
            raise ValueError(msg)
        return self.root / collection / f"{record_id}.json"

    @staticmethod
    def _load(path: Path, record_type: type[_R]) -> _R:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return record_type.model_validate(data)
        except json.JSONDecodeError as exc:
            raise CatalogReadError(path, f"invalid JSON ({exc.msg})") from exc
        except ValidationError as exc:
            raise CatalogReadError(path, f"invalid record ({exc.error_count()} errors)") from exc

    # --- Reads ---

    def read_all(self, collection: Collection) -> list[Record]:
        """Read every record of *collection*, ordered by file name."""
        directory = self.root / collection
        if not directory.is_dir():
            return []
        record_type = RECORD_TYPES[collection]
        return [self._load(p, record_type) for p in sorted(directory.glob("*.json"))]

    def read_one(self, collection: Collection, record_id: str) -> Record | None:
        try:
            path = self._record_path(collection, record_id)
        except ValueError:
            return None
        if not path.is_file():
            return None
        return self._load(path, RECORD_TYPES[collection])

    def find_by_name(self, collection: Collection, name: str) -> Record | None:
        """First record whose name matches *name* case-insensitively."""
        needle = name.lower()
        return next((r for r in self.read_all(collection) if r.name.lower() == needle), None)

    def resolve_id(self, collection: Collection, id_or_name: str) -> str:
        """Resolve a user-supplied reference to a record id.

        Precedence: exact id match, then case-insensitive name match,
        then the input unchanged (callers report "not found").
        """
        if self.read_one(collection, id_or_name) is not None:
            return id_or_name
        by_name = self.find_by_name(collection, id_or_name)
        if by_name is not None:
            return by_name.id
        return id_or_name

    def load_catalog(self) -> CatalogData:
        """Load the full catalog snapshot."""
        return CatalogData(
            services=[r for r in self.read_all(Collection.SERVICES) if isinstance(r, Service)],
            systems=[r for r in self.read_all(Collection.SYSTEMS) if isinstance(r, System)],
            owners=[r for r in self.read_all(Collection.OWNERS) if isinstance(r, Owner)],
        )

    # --- Writes ---

    def write_record(self, collection: Collection, record: Record) -> Path:
        """Write *record* as pretty JSON (camelCase keys, trailing newline)."""
        path = self._record_path(collection, record.id)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(record.to_json_dict(), indent=2) + "\n", encoding="utf-8")
        return path

    def delete_record(self, collection: Collection, record_id: str) -> bool:
        """Delete a record file. Returns False if it did not exist."""
        try:
            path = self._record_path(collection, record_id)
        except ValueError:
            return False
        if not path.is_file():
            return False
        path.unlink()
        return True

    def fingerprint(self) -> str:
        """Fingerprint of every record file's name, mtime and size.

        Changes whenever a record is added, removed or rewritten.
        """
        parts: list[str] = []
        for collection in Collection:
            directory = self.root / collection
            if not directory.is_dir():
                continue
            for path in sorted(directory.glob("*.json")):
                stat = path.stat()
                parts.append(f"{collection}/{path.name}:{stat.st_mtime_ns}:{stat.st_size}")
        return "|".join(parts)
