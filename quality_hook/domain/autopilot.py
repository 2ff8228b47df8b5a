"""Autopilot decision engine.

Maps a CheckOutcome to a single Action. The engine is a pure function: it
performs no I/O, never runs the fixer, and returns the same Decision for
the same outcome. Execution of fixes belongs to the remediation controller.

Policy, first match wins:

1. No issues                 -> CONTINUE, no issues
2. Every issue fixable       -> FIX_SILENTLY, all issues (fix candidates)
3. No issue fixable          -> REPORT_ONLY, all issues
4. Mixed                     -> FIX_AND_REPORT, only the unfixable issues
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from quality_hook.domain.models import Action, Decision

if TYPE_CHECKING:
    from quality_hook.domain.models import CheckOutcome


def decide(outcome: CheckOutcome) -> Decision:
    """Choose the action for a check outcome.

    Args:
        outcome: Aggregated check outcome for one file.

    Returns:
        Decision whose issues are an ordered subset of outcome.issues.
    """
    issues = outcome.issues
    if not issues:
        return Decision(action=Action.CONTINUE, issues=())

    fixable = tuple(issue for issue in issues if issue.fixable)
    if len(fixable) == len(issues):
        return Decision(action=Action.FIX_SILENTLY, issues=issues)
    if not fixable:
        return Decision(action=Action.REPORT_ONLY, issues=issues)

    unfixable = tuple(issue for issue in issues if not issue.fixable)
    return Decision(action=Action.FIX_AND_REPORT, issues=unfixable)


class Autopilot:
    """Injectable wrapper around decide() for the hook runner."""

    def decide(self, outcome: CheckOutcome) -> Decision:
        return decide(outcome)
