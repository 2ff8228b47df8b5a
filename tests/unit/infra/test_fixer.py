"""Unit tests for the subprocess-backed Fixer."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from quality_hook.domain.config import HookSettings
from quality_hook.infra.fixer import Fixer
from quality_hook.tools.command_runner import NOT_FOUND_EXIT_CODE, CommandResult
from tests.fakes import CLEAN_REPORT, make_report


def _ok() -> CommandResult:
    return CommandResult(command=("npx",), returncode=0)


class RecordingChecker:
    """Checker double for the post-fix re-check."""

    def __init__(self, report):
        self.report = report
        self.calls: list[tuple[str, set[str] | None]] = []

    async def check(self, file_path, tools=None):
        self.calls.append((file_path, tools))
        return self.report


class TestFixableTools:
    def test_only_tools_with_errors_and_fix_command(self, tmp_path: Path) -> None:
        fixer = Fixer(tmp_path, HookSettings(), RecordingChecker(CLEAN_REPORT))
        report = make_report(prettier=["fmt"], eslint=[], typescript=["type"])

        assert fixer.fixable_tools(report) == ["prettier"]


class TestAutoFix:
    @pytest.mark.asyncio
    async def test_runs_fix_commands_then_rechecks(self, tmp_path: Path) -> None:
        checker = RecordingChecker(make_report(prettier=[], eslint=[]))
        fixer = Fixer(tmp_path, HookSettings(), checker)
        runner = AsyncMock(return_value=_ok())
        file_path = str(tmp_path / "a.ts")

        with patch("quality_hook.infra.fixer.run_command_async", runner):
            result = await fixer.auto_fix(
                file_path, make_report(prettier=["fmt"], eslint=["1:1 x (semi)"])
            )

        assert result.success is True
        assert result.tools == ("prettier", "eslint")
        commands = [call.args[0] for call in runner.call_args_list]
        assert commands == [
            ["npx", "prettier", "--write", file_path],
            ["npx", "eslint", "--fix", file_path],
        ]
        assert checker.calls == [(file_path, {"prettier", "eslint"})]

    @pytest.mark.asyncio
    async def test_errors_after_fix_mean_failure(self, tmp_path: Path) -> None:
        checker = RecordingChecker(make_report(eslint=["1:1 still broken (custom)"]))
        fixer = Fixer(tmp_path, HookSettings(), checker)

        with patch("quality_hook.infra.fixer.run_command_async", AsyncMock(return_value=_ok())):
            result = await fixer.auto_fix("a.ts", make_report(eslint=["1:1 x (custom)"]))

        assert result.success is False

    @pytest.mark.asyncio
    async def test_nothing_to_fix_is_failure(self, tmp_path: Path) -> None:
        runner = AsyncMock(return_value=_ok())
        fixer = Fixer(tmp_path, HookSettings(), RecordingChecker(CLEAN_REPORT))

        with patch("quality_hook.infra.fixer.run_command_async", runner):
            result = await fixer.auto_fix("a.ts", make_report(typescript=["type"]))

        assert result.success is False
        runner.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_fix_tool_is_failure(self, tmp_path: Path) -> None:
        missing = CommandResult(command=("npx",), returncode=NOT_FOUND_EXIT_CODE)
        checker = RecordingChecker(CLEAN_REPORT)
        fixer = Fixer(tmp_path, HookSettings(), checker)

        with patch("quality_hook.infra.fixer.run_command_async", AsyncMock(return_value=missing)):
            result = await fixer.auto_fix("a.ts", make_report(prettier=["fmt"]))

        assert result.success is False
        assert checker.calls == []
