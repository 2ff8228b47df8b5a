"""In-memory fake implementations for testing.

Fakes implement the collaborator protocols from quality_hook.core.protocols
and are preferred over mocks: they catch interface mismatches at test time
and let tests assert on outputs and recorded calls rather than call order.

Available fakes:
- FakeChecker: Returns queued CheckReports, one per check() call
- FakeFixer: Returns a fixed RemediationResult and records calls
- FakeReporter: Returns canned formatted text

Usage:
    from tests.fakes import FakeChecker, FakeFixer

    checker = FakeChecker([report_before_fix, report_after_fix])
    fixer = FakeFixer(RemediationResult(success=True))
"""

from __future__ import annotations

from dataclasses import dataclass, field

from quality_hook.domain.models import (
    CheckerReport,
    CheckReport,
    RemediationResult,
)


def make_report(
    prettier: list[str] | None = None,
    eslint: list[str] | None = None,
    typescript: list[str] | None = None,
) -> CheckReport:
    """Build a CheckReport; tools given as None are absent from the report."""
    checkers: dict[str, CheckerReport] = {}
    for name, errors in (
        ("prettier", prettier),
        ("eslint", eslint),
        ("typescript", typescript),
    ):
        if errors is not None:
            checkers[name] = CheckerReport(errors=tuple(errors))
    success = all(not report.errors for report in checkers.values())
    return CheckReport(success=success, checkers=checkers)


CLEAN_REPORT = CheckReport(success=True, checkers={})


@dataclass
class FakeChecker:
    """Checker returning queued reports in order.

    The last report repeats once the queue is exhausted.
    """

    reports: list[CheckReport]
    calls: list[str] = field(default_factory=list)

    async def check(self, file_path: str) -> CheckReport:
        self.calls.append(file_path)
        index = min(len(self.calls) - 1, len(self.reports) - 1)
        return self.reports[index]


@dataclass
class FakeFixer:
    """Fixer returning a fixed result and recording every call."""

    result: RemediationResult
    calls: list[tuple[str, CheckReport]] = field(default_factory=list)
    error: Exception | None = None

    async def auto_fix(self, file_path: str, report: CheckReport) -> RemediationResult:
        self.calls.append((file_path, report))
        if self.error is not None:
            raise self.error
        return self.result


@dataclass
class FakeReporter:
    """Reporter returning canned text."""

    text: str | None
    calls: list[CheckReport] = field(default_factory=list)

    def format_for_agent(self, report: CheckReport) -> str | None:
        self.calls.append(report)
        return self.text
