"""Tests for ServiceResult and the telemetry primitives."""

from __future__ import annotations

from collections.abc import Generator

import pytest

from yellowpages.services.result import ServiceError, ServiceResult
from yellowpages.services.telemetry import (
    Span,
    _current_span,
    disable_telemetry,
    enable_telemetry,
    get_current_span,
    trace_span,
    traced,
)


@pytest.fixture(autouse=True)
def _reset_telemetry_state() -> Generator[None]:
    yield
    disable_telemetry()
    _current_span.set(None)


class TestServiceResult:
    def test_defaults(self) -> None:
        result = ServiceResult(ok=True, op="lint")
        assert result.data == {}
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="lint")
        with pytest.raises(ValueError):
            result.ok = False  # type: ignore[misc]

    def test_json_shape(self) -> None:
        result = ServiceResult(
            ok=False, op="deps", error=ServiceError(code="NOT_FOUND", message="nope")
        )
        dumped = result.model_dump(mode="json")
        assert set(dumped) == {"ok", "op", "data", "warnings", "error", "meta"}
        assert dumped["error"] == {"code": "NOT_FOUND", "message": "nope", "detail": {}}


class TestSpan:
    def test_to_dict_nested(self) -> None:
        root = Span(name="root")
        child = Span(name="child", parent=root)
        root.children.append(child)
        child.annotate("rows", 3)
        child.end()
        root.end()
        d = root.to_dict()
        assert d["children"][0]["annotations"] == {"rows": 3}
        assert "annotations" not in d

    def test_open_span_has_zero_duration(self) -> None:
        assert Span(name="x").duration_ms == 0.0


class TestTraced:
    def test_disabled_leaves_result_untouched(self) -> None:
        @traced
        def op() -> ServiceResult:
            return ServiceResult(ok=True, op="x")

        assert op().meta is None

    def test_enabled_injects_span_tree(self) -> None:
        @traced
        def op() -> ServiceResult:
            with trace_span("inner") as span:
                assert span is not None
                span.annotate("n", 1)
            return ServiceResult(ok=True, op="x", meta={"kept": True})

        enable_telemetry()
        meta = op().meta
        assert meta is not None
        assert meta["kept"] is True
        telemetry = meta["telemetry"]
        assert telemetry["name"].endswith("op")
        assert telemetry["children"][0]["name"] == "inner"

    def test_exception_resets_current_span(self) -> None:
        @traced
        def boom() -> ServiceResult:
            raise RuntimeError("fail")

        enable_telemetry()
        with pytest.raises(RuntimeError):
            boom()
        assert get_current_span() is None

    def test_trace_span_without_parent_yields_none(self) -> None:
        enable_telemetry()
        with trace_span("orphan") as span:
            assert span is None
