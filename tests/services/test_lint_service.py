"""Tests for LintService."""

from __future__ import annotations

from tests.conftest import seed, seed_payments
from yellowpages.domain.models import Service, System
from yellowpages.infrastructure.store import CatalogStore
from yellowpages.services.lint import LintService


class TestLint:
    def test_clean_catalog(self, store: CatalogStore) -> None:
        seed_payments(store)
        result = LintService(store).lint()
        assert result.ok
        assert result.data == {"success": True, "errors": 0, "warnings": 0, "results": []}

    def test_errors_fail_but_result_is_ok(self, store: CatalogStore) -> None:
        seed(store, Service(id="a", name="A", system="nowhere", owner="nobody"))
        result = LintService(store).lint()
        assert result.ok
        assert result.data["success"] is False
        assert result.data["errors"] == 2
        types = [r["type"] for r in result.data["results"]]
        assert types == ["orphaned_system_ref", "orphaned_owner_ref"]

    def test_warnings_alone_pass(self, store: CatalogStore) -> None:
        seed(store, Service(id="a", name="A"), System(id="s", name="empty"))
        data = LintService(store).lint().data
        assert data["success"] is True
        assert data["warnings"] == 2

    def test_errors_only_hides_warnings_but_keeps_counts(self, store: CatalogStore) -> None:
        seed(store, Service(id="a", name="A", system="nowhere"))
        data = LintService(store).lint(errors_only=True).data
        assert data["warnings"] == 1
        assert [r["severity"] for r in data["results"]] == ["error"]

    def test_finding_shape(self, store: CatalogStore) -> None:
        seed(store, Service(id="a", name="A", owner="t"))
        seed(store, Service(id="b", name="B", owner="t"))
        finding = LintService(store).lint().data["results"][0]
        assert finding["entityKind"] == "service"
        assert "fix" in finding
