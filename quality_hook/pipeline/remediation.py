"""RemediationController: one automatic fix attempt plus reconciliation.

The controller calls the fixer exactly once; retries, if any, are the
fixer's own concern. What happens next depends on the result:

- fixer failed: escalate with the pre-fix report. The controller does not
  re-aggregate; it surfaces the last known-bad state for the caller to
  format.
- fixer succeeded, FIX_SILENTLY: every candidate counts as resolved.
- fixer succeeded, FIX_AND_REPORT: with re-validation on, check the file
  again (strictly after the fixer returned) and report everything that is
  still present, including fixable issues the fixer did not actually
  resolve. With re-validation off, report the decision's unfixable issues.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from quality_hook.domain.aggregator import build_outcome
from quality_hook.domain.config import DEFAULT_FIXABILITY
from quality_hook.domain.models import Action
from quality_hook.logging import hook_log

if TYPE_CHECKING:
    from quality_hook.core.protocols import CheckerProtocol, FixerProtocol
    from quality_hook.domain.config import FixabilityPolicy
    from quality_hook.domain.models import (
        CheckOutcome,
        CheckReport,
        Decision,
        Issue,
        RemediationResult,
    )
    from quality_hook.logging.hook_log import HookContext


@dataclass(frozen=True)
class RemediationOutcome:
    """Net effect of one remediation attempt.

    Attributes:
        fix_result: What the fixer returned.
        remaining: Issues still needing the agent's attention.
        escalate_report: Pre-fix report to surface when the fix failed.
        revalidated: Fresh outcome from the post-fix check, if one ran.
    """

    fix_result: RemediationResult
    remaining: tuple[Issue, ...] = ()
    escalate_report: CheckReport | None = None
    revalidated: CheckOutcome | None = None

    @property
    def resolved(self) -> bool:
        """True when nothing is left to report."""
        return (
            self.fix_result.success
            and self.escalate_report is None
            and not self.remaining
        )


class RemediationController:
    """Executes safe fixes decided by the autopilot."""

    def __init__(
        self,
        fixer: FixerProtocol,
        checker: CheckerProtocol,
        policy: FixabilityPolicy = DEFAULT_FIXABILITY,
        revalidate: bool = True,
    ) -> None:
        self.fixer = fixer
        self.checker = checker
        self.policy = policy
        self.revalidate = revalidate

    async def remediate(
        self,
        file_path: str,
        outcome: CheckOutcome,
        decision: Decision,
        report: CheckReport,
        ctx: HookContext,
    ) -> RemediationOutcome:
        """Run one fix attempt and work out what is left.

        Args:
            file_path: File to fix.
            outcome: The outcome that triggered remediation.
            decision: FIX_SILENTLY or FIX_AND_REPORT decision for outcome.
            report: Raw pre-fix report, passed to the fixer and used for
                escalation.
            ctx: Invocation logging context.

        Returns:
            RemediationOutcome describing the remaining work.

        Raises:
            ValueError: If the decision does not call for a fix.
        """
        if decision.action not in (Action.FIX_SILENTLY, Action.FIX_AND_REPORT):
            raise ValueError(f"Decision {decision.action.value} does not call for a fix")

        hook_log.auto_fix_started(ctx, file_path)
        with ctx.timer("auto-fix"):
            fix_result = await self.fixer.auto_fix(file_path, report)

        if not fix_result.success:
            ctx.event(
                logging.ERROR,
                "Auto-fix failed",
                event="auto_fix_failed",
                file_path=file_path,
                action=decision.action.value,
            )
            return RemediationOutcome(fix_result=fix_result, escalate_report=report)

        if decision.action is Action.FIX_SILENTLY:
            hook_log.auto_fix_completed(ctx, file_path, len(outcome.issues), 0)
            return RemediationOutcome(fix_result=fix_result)

        if not self.revalidate:
            remaining = decision.issues
            hook_log.auto_fix_completed(
                ctx, file_path, len(outcome.issues) - len(remaining), len(remaining)
            )
            return RemediationOutcome(fix_result=fix_result, remaining=remaining)

        with ctx.timer("revalidate"):
            fresh_report = await self.checker.check(file_path)
        fresh = build_outcome(fresh_report, file_path, self.policy)
        unresolved = [issue for issue in fresh.issues if issue.fixable]
        if unresolved:
            ctx.event(
                logging.WARNING,
                "Fixable issues survived auto-fix",
                event="fix_unresolved",
                file_path=file_path,
                rules=[issue.rule for issue in unresolved],
            )
        hook_log.auto_fix_completed(
            ctx,
            file_path,
            max(len(outcome.issues) - len(fresh.issues), 0),
            len(fresh.issues),
        )
        return RemediationOutcome(
            fix_result=fix_result, remaining=fresh.issues, revalidated=fresh
        )
