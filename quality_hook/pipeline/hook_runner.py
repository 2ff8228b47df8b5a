"""HookRunner: one quality check invocation for one file.

Sequences Check -> Aggregate -> Decide -> (Remediate) -> Report and returns
a HookOutcome value. It never writes to the console and never exits the
process; the CLI and the Agent SDK hook adapt the outcome to their own
channels.

Per-invocation state machine:

    CHECK --clean--> SUCCESS
      |
    AGGREGATE -> DECIDE
      CONTINUE        -> SUCCESS
      REPORT_ONLY     -> blocking report -> QUALITY_ISSUES
      FIX_SILENTLY    -> REMEDIATE -> ok: SUCCESS / failed: report pre-fix text
      FIX_AND_REPORT  -> REMEDIATE -> failed: report pre-fix text
                                   -> ok: report what remains, or SUCCESS

Nothing is remembered between invocations.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from quality_hook.domain.aggregator import build_outcome
from quality_hook.domain.autopilot import Autopilot
from quality_hook.domain.config import DEFAULT_FIXABILITY
from quality_hook.domain.models import Action
from quality_hook.logging import hook_log
from quality_hook.pipeline.remediation import RemediationController
from quality_hook.pipeline.reporter import (
    ExitCode,
    IssueReporter,
    ProgressNarrator,
    format_blocking_message,
    format_issue_messages,
)

if TYPE_CHECKING:
    from quality_hook.core.protocols import (
        CheckerProtocol,
        DecisionEngineProtocol,
        FixerProtocol,
        ReporterProtocol,
    )
    from quality_hook.domain.config import FixabilityPolicy
    from quality_hook.domain.models import CheckReport, Decision, Issue
    from quality_hook.logging.hook_log import HookContext

CONTEXT_MANUAL = "Quality issues require manual intervention"
CONTEXT_FIX_FAILED = "Auto-fix failed, quality issues need attention"
CONTEXT_REMAINING = "Some issues remain after auto-fix"


@dataclass(frozen=True)
class HookOutcome:
    """Result of one hook invocation.

    Attributes:
        exit_code: SUCCESS or QUALITY_ISSUES.
        progress: Human-facing progress lines, in order.
        blocking_message: Structured message for the agent; None on success.
        decision: The autopilot decision, or None if the check was clean.
    """

    exit_code: ExitCode
    progress: tuple[str, ...] = ()
    blocking_message: str | None = None
    decision: Decision | None = None

    @property
    def blocked(self) -> bool:
        return self.exit_code is ExitCode.QUALITY_ISSUES


class HookRunner:
    """Runs the decision pipeline for single files.

    Usage:
        runner = HookRunner(checker=QualityChecker(repo), fixer=Fixer(repo))
        outcome = await runner.run("src/app.ts", HookContext())
    """

    def __init__(
        self,
        checker: CheckerProtocol,
        fixer: FixerProtocol,
        reporter: ReporterProtocol | None = None,
        autopilot: DecisionEngineProtocol | None = None,
        policy: FixabilityPolicy = DEFAULT_FIXABILITY,
        revalidate: bool = True,
    ) -> None:
        self.checker = checker
        self.reporter = reporter or IssueReporter()
        self.autopilot = autopilot or Autopilot()
        self.policy = policy
        self.remediation = RemediationController(
            fixer=fixer, checker=checker, policy=policy, revalidate=revalidate
        )

    async def run(
        self,
        file_path: str,
        ctx: HookContext,
        narrator: ProgressNarrator | None = None,
    ) -> HookOutcome:
        """Check one file and decide what the agent must do about it.

        Args:
            file_path: File written or edited by the agent.
            ctx: Invocation logging context.
            narrator: Progress collector; a fresh one is used if omitted.

        Returns:
            HookOutcome with exit code, progress lines and blocking text.
        """
        narrator = narrator or ProgressNarrator()

        hook_log.quality_check_started(ctx, file_path)
        with ctx.timer("quality-check"):
            report = await self.checker.check(file_path)

        if report.success:
            hook_log.quality_check_completed(ctx, file_path, 0)
            narrator.say("✅", "All quality checks passed!")
            return HookOutcome(exit_code=ExitCode.SUCCESS, progress=narrator.snapshot())

        outcome = build_outcome(report, file_path, self.policy)
        hook_log.quality_check_completed(ctx, file_path, len(outcome.issues))

        decision = self.autopilot.decide(outcome)
        hook_log.autopilot_decision(
            ctx, file_path, decision.action, len(outcome.issues), decision.reasoning
        )
        narrator.say(
            "🤖",
            f"Autopilot: {decision.action.value} ({len(outcome.issues)} issues found)",
        )

        if decision.action is Action.CONTINUE:
            ctx.event(
                logging.INFO,
                "Continuing despite failed check",
                event="continue",
                file_path=file_path,
                issue_count=len(outcome.issues),
            )
            return HookOutcome(
                exit_code=ExitCode.SUCCESS,
                progress=narrator.snapshot(),
                decision=decision,
            )

        if decision.action is Action.REPORT_ONLY:
            return self._block_with_issues(
                decision.issues, CONTEXT_MANUAL, narrator, decision
            )

        narrator.say("🔧", "Auto-fixing issues...")
        remediation = await self.remediation.remediate(
            file_path, outcome, decision, report, ctx
        )

        if remediation.escalate_report is not None:
            narrator.say("❌", "Auto-fix failed! Sending issues to the agent...")
            return self._block_with_report(
                remediation.escalate_report, decision, narrator
            )

        if remediation.resolved:
            narrator.say("✅", "All issues auto-fixed successfully!")
            return HookOutcome(
                exit_code=ExitCode.SUCCESS,
                progress=narrator.snapshot(),
                decision=decision,
            )

        return self._block_with_issues(
            remediation.remaining, CONTEXT_REMAINING, narrator, decision
        )

    def _block_with_issues(
        self,
        issues: tuple[Issue, ...],
        context: str,
        narrator: ProgressNarrator,
        decision: Decision,
    ) -> HookOutcome:
        text = format_issue_messages(issues)
        if text is None:
            # Issues without message or rule: nothing the agent could act on
            return HookOutcome(
                exit_code=ExitCode.SUCCESS,
                progress=narrator.snapshot(),
                decision=decision,
            )
        narrator.say("❌", f"{len(issues)} quality issue(s) need attention")
        return HookOutcome(
            exit_code=ExitCode.QUALITY_ISSUES,
            progress=narrator.snapshot(),
            blocking_message=format_blocking_message(text, context),
            decision=decision,
        )

    def _block_with_report(
        self, report: CheckReport, decision: Decision, narrator: ProgressNarrator
    ) -> HookOutcome:
        text = self.reporter.format_for_agent(report)
        if not text:
            # The reporter had nothing to format; fall back to the issues
            # the decision still considers outstanding.
            text = format_issue_messages(decision.issues) or "Quality check failed"
        return HookOutcome(
            exit_code=ExitCode.QUALITY_ISSUES,
            progress=narrator.snapshot(),
            blocking_message=format_blocking_message(text, CONTEXT_FIX_FAILED),
            decision=decision,
        )
