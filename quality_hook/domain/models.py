"""Core data types for the quality check hook.

These types flow through the pipeline in one direction:

    CheckReport (raw, per tool) -> CheckOutcome (normalized Issues)
        -> Decision (action + issues needing attention)
        -> RemediationResult (fixer outcome)

All of them are frozen. A re-validation always produces a new CheckOutcome
rather than mutating the previous one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping


# Tool names reported by the checker. Order here is the aggregation order.
PRETTIER = "prettier"
ESLINT = "eslint"
TYPESCRIPT = "typescript"

CHECKER_NAMES: tuple[str, ...] = (PRETTIER, ESLINT, TYPESCRIPT)


@dataclass(frozen=True)
class Issue:
    """A single normalized diagnostic finding.

    Attributes:
        rule: Stable rule identifier (e.g. "no-var", "prettier/prettier").
        message: The diagnostic text as reported by the tool.
        file: Path of the file the finding belongs to.
        fixable: Static classification; not a guarantee the fixer succeeds.
    """

    rule: str
    message: str
    file: str
    fixable: bool


@dataclass(frozen=True)
class CheckerReport:
    """Raw output of one diagnostic tool."""

    errors: tuple[str, ...] = ()

    @classmethod
    def of(cls, *errors: str) -> CheckerReport:
        return cls(errors=tuple(errors))


@dataclass(frozen=True)
class CheckReport:
    """Raw result of running all diagnostic tools against one file.

    Attributes:
        success: True when every tool that ran reported a clean result.
        checkers: Per-tool reports keyed by tool name. A missing key means
            the tool did not run or produced nothing.
    """

    success: bool
    checkers: Mapping[str, CheckerReport] = field(default_factory=dict)


@dataclass(frozen=True)
class CheckOutcome:
    """Aggregated result of one validation pass for one file.

    Attributes:
        file_path: The file that was checked.
        issues: Normalized issues in tool-grouped order.
        has_errors: Whether the underlying check failed.
        has_warnings: Whether any issue was found.
    """

    file_path: str
    issues: tuple[Issue, ...] = ()
    has_errors: bool = False
    has_warnings: bool = False

    @property
    def fixable(self) -> bool:
        """True when at least one issue is classified as fixable."""
        return any(issue.fixable for issue in self.issues)

    @classmethod
    def from_issues(
        cls, file_path: str, issues: tuple[Issue, ...], *, success: bool
    ) -> CheckOutcome:
        return cls(
            file_path=file_path,
            issues=issues,
            has_errors=not success,
            has_warnings=len(issues) > 0,
        )


class Action(str, Enum):
    """What the hook does with a CheckOutcome."""

    FIX_SILENTLY = "FIX_SILENTLY"
    CONTINUE = "CONTINUE"
    REPORT_ONLY = "REPORT_ONLY"
    FIX_AND_REPORT = "FIX_AND_REPORT"


@dataclass(frozen=True)
class Decision:
    """The decision engine's chosen action.

    Attributes:
        action: The selected Action.
        issues: The subset of the outcome's issues that still need the
            agent's attention once the action is applied.
    """

    action: Action
    issues: tuple[Issue, ...] = ()

    @property
    def reasoning(self) -> str:
        """Comma-joined rule ids, used for decision logging."""
        if not self.issues:
            return "No specific reasoning"
        return ", ".join(issue.rule for issue in self.issues)


@dataclass(frozen=True)
class RemediationResult:
    """Result of one automatic fix attempt.

    Attributes:
        success: Whether the fixer reports the file as repaired.
        tools: Names of the fix tools that were run (informational).
    """

    success: bool
    tools: tuple[str, ...] = ()
