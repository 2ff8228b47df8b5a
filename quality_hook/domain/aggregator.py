"""Diagnostic aggregation: raw per-tool reports -> ordered Issues.

Issues are grouped by tool in a fixed order (formatter, linter, type
checker) and keep the order in which each tool reported them. Nothing is
dropped or deduplicated here; two identical messages become two Issues.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from quality_hook.domain.config import DEFAULT_FIXABILITY
from quality_hook.domain.models import (
    ESLINT,
    PRETTIER,
    TYPESCRIPT,
    CheckOutcome,
    Issue,
)

if TYPE_CHECKING:
    from quality_hook.domain.config import FixabilityPolicy
    from quality_hook.domain.models import CheckReport

PRETTIER_RULE = "prettier/prettier"
ESLINT_FALLBACK_RULE = "eslint-error"
TYPESCRIPT_RULE = "typescript-error"

# Trailing "(rule-id)" at the end of an eslint message
_LINT_RULE_PATTERN = re.compile(r"\(([^)]+)\)$")


def extract_lint_rule(message: str) -> str:
    """Return the trailing parenthesized rule id of a lint message.

    >>> extract_lint_rule("Unexpected var (no-var)")
    'no-var'
    >>> extract_lint_rule("Parsing error: Unexpected token")
    'eslint-error'
    """
    match = _LINT_RULE_PATTERN.search(message)
    return match.group(1) if match else ESLINT_FALLBACK_RULE


def _rule_for(tool: str, message: str) -> str:
    if tool == PRETTIER:
        return PRETTIER_RULE
    if tool == ESLINT:
        return extract_lint_rule(message)
    return TYPESCRIPT_RULE


def aggregate_issues(
    report: CheckReport,
    file_path: str,
    policy: FixabilityPolicy = DEFAULT_FIXABILITY,
) -> tuple[Issue, ...]:
    """Normalize a raw check report into Issues.

    Args:
        report: Raw report from the checker.
        file_path: File the report belongs to.
        policy: Fixability classification to apply.

    Returns:
        Issues ordered prettier, eslint, typescript, each in source order.
    """
    issues: list[Issue] = []
    for tool in (PRETTIER, ESLINT, TYPESCRIPT):
        tool_report = report.checkers.get(tool)
        if tool_report is None:
            continue
        for message in tool_report.errors:
            rule = _rule_for(tool, message)
            issues.append(
                Issue(
                    rule=rule,
                    message=message,
                    file=file_path,
                    fixable=policy.is_fixable(tool, rule),
                )
            )
    return tuple(issues)


def build_outcome(
    report: CheckReport,
    file_path: str,
    policy: FixabilityPolicy = DEFAULT_FIXABILITY,
) -> CheckOutcome:
    """Aggregate a report into a fresh CheckOutcome."""
    issues = aggregate_issues(report, file_path, policy)
    return CheckOutcome.from_issues(file_path, issues, success=report.success)
