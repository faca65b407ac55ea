"""Full-text search index — SQLite FTS5 via SQLAlchemy Core.

The index is a derived cache at ``.yellowpages/.search-index.db``. It
stores the catalog fingerprint it was built from and is rebuilt from the
record files whenever the fingerprint no longer matches, so it never
needs explicit invalidation by write paths.

Query terms are prefix-matched and OR-combined; ranking is BM25 with
per-column weights from :class:`~yellowpages.config.models.SearchConfig`.
A term that prefixes nothing in the index vocabulary also matches the
vocabulary terms within ``round(len(term) * fuzzy)`` edits, so a typo
like ``paymnets`` still finds ``payments``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from rapidfuzz import process
from rapidfuzz.distance import Levenshtein
from sqlalchemy import Column, MetaData, String, Table, create_engine, delete, insert, select, text
from sqlalchemy.engine import Engine

from yellowpages.config.models import SearchConfig
from yellowpages.domain.types import EntityKind

if TYPE_CHECKING:
    from yellowpages.domain.models import Owner, Service, System
    from yellowpages.infrastructure.store import CatalogStore

logger = logging.getLogger(__name__)

INDEX_FILENAME = ".search-index.db"

metadata = MetaData()

index_meta = Table(
    "index_meta",
    metadata,
    Column("key", String, primary_key=True),
    Column("value", String, nullable=False),
)

# Column order matters: bm25() weights are positional.
FTS5_CREATE_SQL = (
    "CREATE VIRTUAL TABLE IF NOT EXISTS catalog_fts USING fts5("
    "doc_id UNINDEXED, kind UNINDEXED, "
    "name, description, tags, apis, lifecycle, owner_type)"
)
VOCAB_CREATE_SQL = (
    "CREATE VIRTUAL TABLE IF NOT EXISTS catalog_vocab USING fts5vocab('catalog_fts', 'row')"
)

_TERM_RE = re.compile(r"\w+", re.UNICODE)


@dataclass(frozen=True)
class SearchDocument:
    id: str
    kind: EntityKind
    name: str
    description: str = ""
    tags: str = ""
    apis: str = ""
    lifecycle: str = ""
    owner_type: str = ""


@dataclass(frozen=True)
class SearchHit:
    kind: str
    id: str
    name: str
    description: str
    score: float


def service_to_doc(s: Service) -> SearchDocument:
    return SearchDocument(
        id=s.id,
        kind=EntityKind.SERVICE,
        name=s.name,
        description=s.description or "",
        tags=" ".join(s.tags or []),
        apis=" ".join(f"{a.name} {a.description or ''}".strip() for a in s.apis),
        lifecycle=str(s.lifecycle or ""),
    )


def system_to_doc(s: System) -> SearchDocument:
    return SearchDocument(
        id=s.id, kind=EntityKind.SYSTEM, name=s.name, description=s.description or ""
    )


def owner_to_doc(o: Owner) -> SearchDocument:
    return SearchDocument(id=o.id, kind=EntityKind.OWNER, name=o.name, owner_type=str(o.type))


def fuzzy_terms(term: str, vocabulary: Sequence[str], fuzzy: float) -> list[str]:
    """Vocabulary terms within ``round(len(term) * fuzzy)`` edits of *term*.

    Empty when *term* already prefixes a vocabulary term.
    """
    lowered = term.lower()
    max_distance = round(len(lowered) * fuzzy)
    if max_distance < 1 or not vocabulary:
        return []
    if any(v.startswith(lowered) for v in vocabulary):
        return []
    matches = process.extract(
        lowered,
        vocabulary,
        scorer=Levenshtein.distance,
        score_cutoff=max_distance,
        limit=None,
    )
    return sorted(choice for choice, _distance, _idx in matches)


def build_match_query(
    query: str, vocabulary: Sequence[str] = (), *, fuzzy: float = 0.0
) -> str:
    """Turn free text into an FTS5 MATCH expression (prefix terms, OR)."""
    parts: list[str] = []
    for term in _TERM_RE.findall(query):
        parts.append(f'"{term}"*')
        parts.extend(f'"{near}"' for near in fuzzy_terms(term, vocabulary, fuzzy))
    return " OR ".join(parts)


class SearchIndex:
    """An FTS5 index over every service, system and owner."""

    def __init__(self, engine: Engine, config: SearchConfig | None = None) -> None:
        self._engine = engine
        self._config = config or SearchConfig()

    @classmethod
    def open(cls, path: Path, config: SearchConfig | None = None) -> SearchIndex:
        engine = create_engine(f"sqlite:///{path}", echo=False)
        metadata.create_all(engine)
        with engine.begin() as conn:
            conn.execute(text(FTS5_CREATE_SQL))
            conn.execute(text(VOCAB_CREATE_SQL))
        return cls(engine, config)

    def close(self) -> None:
        self._engine.dispose()

    # --- Build ---

    def stored_fingerprint(self) -> str | None:
        with self._engine.connect() as conn:
            row = conn.execute(
                select(index_meta.c.value).where(index_meta.c.key == "fingerprint")
            ).first()
        return row.value if row else None

    def rebuild(self, docs: list[SearchDocument], fingerprint: str) -> int:
        """Replace all indexed documents and record *fingerprint*."""
        with self._engine.begin() as conn:
            conn.execute(text("DELETE FROM catalog_fts"))
            for doc in docs:
                conn.execute(
                    text(
                        "INSERT INTO catalog_fts(doc_id, kind, name, description, tags, "
                        "apis, lifecycle, owner_type) VALUES (:doc_id, :kind, :name, "
                        ":description, :tags, :apis, :lifecycle, :owner_type)"
                    ),
                    {
                        "doc_id": doc.id,
                        "kind": str(doc.kind),
                        "name": doc.name,
                        "description": doc.description,
                        "tags": doc.tags,
                        "apis": doc.apis,
                        "lifecycle": doc.lifecycle,
                        "owner_type": doc.owner_type,
                    },
                )
            conn.execute(delete(index_meta).where(index_meta.c.key == "fingerprint"))
            conn.execute(insert(index_meta).values(key="fingerprint", value=fingerprint))
        logger.debug("Rebuilt search index with %d documents", len(docs))
        return len(docs)

    # --- Query ---

    def vocabulary(self) -> list[str]:
        """Every distinct token in the indexed columns, as the tokenizer stored it."""
        with self._engine.connect() as conn:
            rows = conn.execute(text("SELECT term FROM catalog_vocab ORDER BY term")).fetchall()
        return [r.term for r in rows]

    def search(
        self,
        query: str,
        *,
        kind: EntityKind | str | None = None,
        limit: int | None = None,
    ) -> list[SearchHit]:
        """Rank documents against *query*, best match first.

        Every match is returned unless *limit* is given.
        """
        cfg = self._config
        vocabulary = self.vocabulary() if cfg.fuzzy > 0 else []
        match = build_match_query(query, vocabulary, fuzzy=cfg.fuzzy)
        if not match:
            return []
        # doc_id, kind, name, description, tags, apis, lifecycle, owner_type
        weights = f"0, 0, {cfg.name_weight}, {cfg.description_weight}, {cfg.tags_weight}, 1, 1, 1"
        params: dict[str, object] = {"query": match}
        where = "catalog_fts MATCH :query"
        if kind is not None:
            where += " AND kind = :kind"
            params["kind"] = str(kind)
        sql = f"""
            SELECT doc_id, kind, name, description, bm25(catalog_fts, {weights}) AS rank
            FROM catalog_fts
            WHERE {where}
            ORDER BY rank
        """
        if limit is not None:
            sql += " LIMIT :limit"
            params["limit"] = limit
        with self._engine.connect() as conn:
            rows = conn.execute(text(sql), params).fetchall()
        # BM25 scores are negative in FTS5; flip so higher is better.
        return [
            SearchHit(
                kind=r.kind,
                id=r.doc_id,
                name=r.name,
                description=r.description,
                score=round(-float(r.rank), 4),
            )
            for r in rows
        ]


def get_search_index(store: CatalogStore, config: SearchConfig | None = None) -> SearchIndex:
    """Open the cached index, rebuilding it if the catalog changed."""
    index = SearchIndex.open(store.root / INDEX_FILENAME, config)
    current = store.fingerprint()
    if index.stored_fingerprint() != current:
        catalog = store.load_catalog()
        docs = [
            *(service_to_doc(s) for s in catalog.services),
            *(system_to_doc(s) for s in catalog.systems),
            *(owner_to_doc(o) for o in catalog.owners),
        ]
        index.rebuild(docs, current)
    return index
