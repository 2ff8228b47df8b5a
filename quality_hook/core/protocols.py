"""Protocol definitions for the hook's external collaborators.

The hook runner and remediation controller depend only on these shapes,
so tests can inject fakes and the subprocess-backed implementations in
quality_hook.infra stay swappable.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from quality_hook.domain.models import (
        CheckOutcome,
        CheckReport,
        Decision,
        RemediationResult,
    )


@runtime_checkable
class CheckerProtocol(Protocol):
    """Runs the diagnostic tools against one file."""

    async def check(self, file_path: str) -> CheckReport:
        """Check a file.

        Args:
            file_path: Path of the file to check.

        Returns:
            CheckReport with per-tool error strings.
        """
        ...


@runtime_checkable
class FixerProtocol(Protocol):
    """Attempts an automatic repair of one file.

    May rewrite the file on disk. Any retry policy is the fixer's own
    business; callers invoke it at most once per hook invocation.
    """

    async def auto_fix(self, file_path: str, report: CheckReport) -> RemediationResult:
        """Fix a file.

        Args:
            file_path: Path of the file to fix.
            report: The check report that triggered the fix.

        Returns:
            RemediationResult indicating whether the file is now repaired.
        """
        ...


@runtime_checkable
class ReporterProtocol(Protocol):
    """Formats a raw check report for the editing agent."""

    def format_for_agent(self, report: CheckReport) -> str | None:
        """Return formatted issue text, or None when nothing to report."""
        ...


class DecisionEngineProtocol(Protocol):
    """Maps an outcome to a decision without side effects."""

    def decide(self, outcome: CheckOutcome) -> Decision: ...
