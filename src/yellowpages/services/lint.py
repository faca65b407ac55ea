"""LintService — catalog integrity checking.

Single command following the linter pattern: every check runs over one
snapshot and all findings are reported at once. The result is always
``ok``; ``data["success"]`` carries the pass/fail verdict and the CLI
turns a failing verdict into exit code 1.
"""

from __future__ import annotations

from yellowpages.domain.lint import run_lint_checks, summarize
from yellowpages.domain.types import Severity
from yellowpages.services.base import BaseService, catalog_op
from yellowpages.services.result import ServiceResult
from yellowpages.services.telemetry import trace_span, traced


class LintService(BaseService):
    @traced
    @catalog_op("lint")
    def lint(self, *, errors_only: bool = False) -> ServiceResult:
        """Run every integrity check.

        ``errors_only`` hides warning findings from ``results``; the
        warning count is still reported.
        """
        with trace_span("load_catalog"):
            catalog = self._store.load_catalog()
        with trace_span("run_checks"):
            findings = run_lint_checks(catalog.services, catalog.systems, catalog.owners)

        summary = summarize(findings)
        shown = [f for f in findings if f.severity == Severity.ERROR] if errors_only else findings
        return ServiceResult(
            ok=True,
            op="lint",
            data={
                "success": summary.ok,
                "errors": summary.errors,
                "warnings": summary.warnings,
                "results": [f.to_dict() for f in shown],
            },
        )
