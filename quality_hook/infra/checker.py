"""QualityChecker: runs prettier, eslint and tsc against one file.

Each tool's output is parsed into plain error strings; classification into
Issues is the aggregator's job. The parsers are module-level functions so
they can be tested without subprocesses.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING

from quality_hook.domain.config import HookSettings
from quality_hook.domain.models import (
    ESLINT,
    PRETTIER,
    TYPESCRIPT,
    CheckerReport,
    CheckReport,
)
from quality_hook.tools.command_runner import run_command_async

if TYPE_CHECKING:
    from quality_hook.domain.config import CheckerSettings
    from quality_hook.tools.command_runner import CommandResult

logger = logging.getLogger(__name__)

# src/app.ts(12,5): error TS2322: Type 'string' is not assignable to type 'number'.
_TSC_DIAGNOSTIC = re.compile(r"^(?P<path>.+?)\(\d+,\d+\): error TS\d+: ")


def parse_prettier_output(result: CommandResult) -> list[str]:
    """Errors from ``prettier --check``.

    Prettier prints one ``[warn] <file>`` line per unformatted file, a
    ``[warn] Code style issues ...`` summary, and ``[error]`` lines for
    files it cannot parse.
    """
    if result.ok:
        return []
    errors: list[str] = []
    for line in (result.stdout + "\n" + result.stderr).splitlines():
        line = line.strip()
        if line.startswith("[error]"):
            errors.append(line.removeprefix("[error]").strip())
        elif line.startswith("[warn]"):
            target = line.removeprefix("[warn]").strip()
            if target and not target.startswith("Code style issues"):
                errors.append(
                    f"Code style issues found in {target}. Run prettier --write to fix."
                )
    if not errors:
        errors.append(f"Prettier check failed with exit code {result.returncode}")
    return errors


def parse_eslint_output(result: CommandResult) -> list[str]:
    """Errors from ``eslint --format json``.

    Each error-severity message becomes ``"<line>:<col> <message> (<rule>)"``;
    the rule suffix is omitted for messages without a rule id (parse errors).
    A non-zero exit without any error-severity message is reported as a
    single failure line, never as a clean result.
    """
    try:
        files = json.loads(result.stdout) if result.stdout.strip() else []
    except json.JSONDecodeError:
        files = None
    if not isinstance(files, list):
        files = []

    errors: list[str] = []
    for file_result in files:
        for message in file_result.get("messages", []):
            if message.get("severity", 0) < 2:
                continue
            text = f"{message.get('line', 0)}:{message.get('column', 0)} {message.get('message', '').strip()}"
            rule_id = message.get("ruleId")
            if rule_id:
                text = f"{text} ({rule_id})"
            errors.append(text)
    if not errors and not result.ok:
        # Fatal run (missing config, crash): no per-file messages to report
        detail = result.stderr.strip().splitlines()
        errors.append(
            detail[0] if detail else f"ESLint failed with exit code {result.returncode}"
        )
    return errors


def parse_tsc_output(result: CommandResult, file_path: str, cwd: Path) -> list[str]:
    """Diagnostics from a project-wide ``tsc --noEmit`` run that name the file."""
    if result.ok:
        return []
    target = Path(file_path).resolve()
    errors: list[str] = []
    for line in result.stdout.splitlines():
        match = _TSC_DIAGNOSTIC.match(line)
        if match is None:
            continue
        reported = Path(match.group("path"))
        if not reported.is_absolute():
            reported = cwd / reported
        if reported.resolve() == target:
            errors.append(line.strip())
    return errors


class QualityChecker:
    """Runs the enabled diagnostic tools and collects their errors.

    Tools run one after another; a tool whose executable is missing is
    skipped (absent from the report) instead of failing the check.
    """

    def __init__(self, repo_path: Path, settings: HookSettings | None = None) -> None:
        self.repo_path = repo_path
        self.settings = settings or HookSettings()

    async def run_tool(
        self, tool: str, settings: CheckerSettings, file_path: str
    ) -> CheckerReport | None:
        argv = settings.argv()
        if tool != TYPESCRIPT:
            argv.append(file_path)
        result = await run_command_async(
            argv, cwd=self.repo_path, timeout=self.settings.command_timeout
        )
        if result.not_found:
            logger.warning("Skipping %s: %s not found", tool, argv[0])
            return None
        if result.timed_out:
            return CheckerReport.of(
                f"{tool} timed out after {self.settings.command_timeout}s"
            )

        if tool == PRETTIER:
            errors = parse_prettier_output(result)
        elif tool == ESLINT:
            errors = parse_eslint_output(result)
        else:
            errors = parse_tsc_output(result, file_path, self.repo_path)
        logger.debug("%s reported %d error(s) for %s", tool, len(errors), file_path)
        return CheckerReport(errors=tuple(errors))

    async def check(self, file_path: str, tools: set[str] | None = None) -> CheckReport:
        """Run the enabled tools against a file.

        Args:
            file_path: File to check.
            tools: Restrict the run to these tool names. None runs all
                enabled tools.

        Returns:
            CheckReport; success is True when no tool reported an error.
        """
        checkers: dict[str, CheckerReport] = {}
        for tool, settings in self.settings.enabled_checkers():
            if tools is not None and tool not in tools:
                continue
            report = await self.run_tool(tool, settings, file_path)
            if report is not None:
                checkers[tool] = report
        success = all(not report.errors for report in checkers.values())
        return CheckReport(success=success, checkers=checkers)
