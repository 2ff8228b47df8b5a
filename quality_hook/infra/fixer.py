"""Fixer: automatic repair with prettier --write and eslint --fix.

Only tools that reported errors and have a fix command are run. After the
fix commands finish, the same tools are checked again; the fix counts as a
success only when that re-check is clean. Type errors are never fixed.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from quality_hook.domain.config import HookSettings
from quality_hook.domain.models import RemediationResult
from quality_hook.infra.checker import QualityChecker
from quality_hook.tools.command_runner import run_command_async

if TYPE_CHECKING:
    from pathlib import Path

    from quality_hook.domain.models import CheckReport

logger = logging.getLogger(__name__)


class Fixer:
    """Runs the configured fix commands for one file."""

    def __init__(
        self,
        repo_path: Path,
        settings: HookSettings | None = None,
        checker: QualityChecker | None = None,
    ) -> None:
        self.repo_path = repo_path
        self.settings = settings or HookSettings()
        self.checker = checker or QualityChecker(repo_path, self.settings)

    def fixable_tools(self, report: CheckReport) -> list[str]:
        """Tools that reported errors and know how to fix them, in run order."""
        return [
            tool
            for tool, settings in self.settings.enabled_checkers()
            if settings.fix_command is not None
            and tool in report.checkers
            and report.checkers[tool].errors
        ]

    async def auto_fix(self, file_path: str, report: CheckReport) -> RemediationResult:
        """Fix a file and verify the fixed tools now pass.

        Args:
            file_path: File to fix in place.
            report: Report that triggered the fix; selects which tools run.

        Returns:
            RemediationResult; success=False when there is nothing the
            fixer can run, a fix command fails, or the re-check still
            reports errors.
        """
        tools = self.fixable_tools(report)
        if not tools:
            logger.info("No fix commands apply to %s", file_path)
            return RemediationResult(success=False)

        # Linters such as eslint exit non-zero when unfixable problems remain,
        # so the re-check below is the authority on success.
        for tool in tools:
            argv = self.settings.checkers[tool].fix_argv() or []
            argv.append(file_path)
            result = await run_command_async(
                argv, cwd=self.repo_path, timeout=self.settings.command_timeout
            )
            if result.not_found or result.timed_out:
                logger.warning(
                    "Fix command for %s could not complete (exit %d)",
                    tool,
                    result.returncode,
                )
                return RemediationResult(success=False, tools=tuple(tools))

        recheck = await self.checker.check(file_path, tools=set(tools))
        remaining = {
            tool: len(tool_report.errors)
            for tool, tool_report in recheck.checkers.items()
            if tool_report.errors
        }
        if remaining:
            logger.info("Errors remain after fix for %s: %s", file_path, remaining)
        return RemediationResult(success=not remaining, tools=tuple(tools))
