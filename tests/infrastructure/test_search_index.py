"""Tests for the FTS5 search index."""

from __future__ import annotations

from pathlib import Path

from tests.conftest import seed, seed_payments
from yellowpages.config.models import SearchConfig
from yellowpages.domain.models import Api, Owner, Service
from yellowpages.domain.types import EntityKind
from yellowpages.infrastructure.search_index import (
    INDEX_FILENAME,
    SearchDocument,
    SearchIndex,
    build_match_query,
    fuzzy_terms,
    get_search_index,
    service_to_doc,
)
from yellowpages.infrastructure.store import CatalogStore


class TestBuildMatchQuery:
    def test_prefix_terms_or_combined(self) -> None:
        assert build_match_query("pay gate") == '"pay"* OR "gate"*'

    def test_punctuation_is_dropped(self) -> None:
        assert build_match_query('auth" OR (x') == '"auth"* OR "OR"* OR "x"*'

    def test_empty(self) -> None:
        assert build_match_query("  ?! ") == ""

    def test_unknown_term_expands_to_near_vocabulary(self) -> None:
        vocab = ["gateway", "payment", "payments", "postgres"]
        assert build_match_query("paymnets", vocab, fuzzy=0.2) == '"paymnets"* OR "payments"'

    def test_known_prefix_is_not_expanded(self) -> None:
        assert build_match_query("pay", ["payments", "bay"], fuzzy=0.5) == '"pay"*'


class TestFuzzyTerms:
    def test_edit_budget_scales_with_length(self) -> None:
        assert fuzzy_terms("gatwey", ["gateway"], 0.2) == []
        assert fuzzy_terms("gatewey", ["gateway"], 0.2) == ["gateway"]

    def test_short_terms_get_no_budget(self) -> None:
        assert fuzzy_terms("ab", ["ac"], 0.2) == []

    def test_case_insensitive(self) -> None:
        assert fuzzy_terms("PAYMNETS", ["payments"], 0.2) == ["payments"]


class TestDocuments:
    def test_service_doc_includes_tags_and_apis(self) -> None:
        doc = service_to_doc(
            Service(
                id="a",
                name="A",
                tags=["pci", "edge"],
                apis=[Api(name="Charges", description="create charges")],
                lifecycle="production",
            )
        )
        assert doc.kind == EntityKind.SERVICE
        assert doc.tags == "pci edge"
        assert doc.apis == "Charges create charges"
        assert doc.lifecycle == "production"


class TestSearchIndex:
    def test_rebuild_and_query(self, tmp_path: Path) -> None:
        index = SearchIndex.open(tmp_path / "idx.db")
        try:
            index.rebuild(
                [
                    SearchDocument(id="1", kind=EntityKind.SERVICE, name="payments"),
                    SearchDocument(
                        id="2",
                        kind=EntityKind.SERVICE,
                        name="ledger",
                        description="payment records",
                    ),
                    SearchDocument(id="3", kind=EntityKind.OWNER, name="platform"),
                    *(
                        SearchDocument(id=f"s{i}", kind=EntityKind.SYSTEM, name=f"core{i}")
                        for i in range(4)
                    ),
                ],
                "fp1",
            )
            hits = index.search("paym")
            assert [h.id for h in hits] == ["1", "2"]
            assert all(h.score > 0 for h in hits)
            assert index.stored_fingerprint() == "fp1"
        finally:
            index.close()

    def test_limit(self, tmp_path: Path) -> None:
        index = SearchIndex.open(tmp_path / "idx.db", SearchConfig(limit=2))
        try:
            docs = [
                SearchDocument(id=str(i), kind=EntityKind.SERVICE, name=f"svc{i}") for i in range(5)
            ]
            index.rebuild(docs, "fp")
            assert len(index.search("svc")) == 5
            assert len(index.search("svc", limit=4)) == 4
        finally:
            index.close()

    def test_kind_is_filtered_before_ranking_cutoff(self, tmp_path: Path) -> None:
        index = SearchIndex.open(tmp_path / "idx.db")
        try:
            docs = [
                SearchDocument(id=f"b{i}", kind=EntityKind.SERVICE, name=f"billing-{i}")
                for i in range(60)
            ]
            docs.append(
                SearchDocument(
                    id="sysb", kind=EntityKind.SYSTEM, name="ledger", description="billing"
                )
            )
            index.rebuild(docs, "fp")
            assert [h.id for h in index.search("billing", kind=EntityKind.SYSTEM, limit=1)] == [
                "sysb"
            ]
        finally:
            index.close()

    def test_vocabulary(self, tmp_path: Path) -> None:
        index = SearchIndex.open(tmp_path / "idx.db")
        try:
            index.rebuild(
                [SearchDocument(id="1", kind=EntityKind.SERVICE, name="Payments", tags="pci")],
                "fp",
            )
            assert index.vocabulary() == ["payments", "pci"]
        finally:
            index.close()

    def test_typo_still_matches(self, tmp_path: Path) -> None:
        index = SearchIndex.open(tmp_path / "idx.db")
        try:
            index.rebuild(
                [
                    SearchDocument(id="1", kind=EntityKind.SERVICE, name="payments"),
                    SearchDocument(id="2", kind=EntityKind.SERVICE, name="gateway"),
                ],
                "fp",
            )
            assert [h.id for h in index.search("paymnets")] == ["1"]
        finally:
            index.close()

    def test_typo_tolerance_can_be_disabled(self, tmp_path: Path) -> None:
        index = SearchIndex.open(tmp_path / "idx.db", SearchConfig(fuzzy=0))
        try:
            index.rebuild([SearchDocument(id="1", kind=EntityKind.SERVICE, name="payments")], "fp")
            assert index.search("paymnets") == []
        finally:
            index.close()

    def test_rebuild_replaces_documents(self, tmp_path: Path) -> None:
        index = SearchIndex.open(tmp_path / "idx.db")
        try:
            index.rebuild([SearchDocument(id="1", kind=EntityKind.SERVICE, name="alpha")], "a")
            index.rebuild([SearchDocument(id="2", kind=EntityKind.SERVICE, name="beta")], "b")
            assert index.search("alpha") == []
            assert [h.id for h in index.search("beta")] == ["2"]
            assert index.stored_fingerprint() == "b"
        finally:
            index.close()


class TestGetSearchIndex:
    def test_builds_from_catalog_and_tracks_changes(self, store: CatalogStore) -> None:
        seed_payments(store)
        index = get_search_index(store)
        try:
            assert [h.id for h in index.search("gateway")] == ["gw"]
        finally:
            index.close()
        assert (store.root / INDEX_FILENAME).is_file()

        seed(store, Owner(id="o2", name="gatekeepers"))
        index = get_search_index(store)
        try:
            assert {h.id for h in index.search("gate")} == {"gw", "o2"}
        finally:
            index.close()
