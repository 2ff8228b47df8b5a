"""Unit tests for outcome reporting."""

from __future__ import annotations

from quality_hook.domain.models import Issue
from quality_hook.pipeline.reporter import (
    ACTION_REQUIRED,
    BLOCKING_HEADER,
    DO_NOT_PROCEED,
    ExitCode,
    IssueReporter,
    ProgressNarrator,
    format_blocking_message,
    format_issue_messages,
)
from tests.fakes import make_report


def _issue_lines(text: str) -> list[str]:
    return [line for line in text.splitlines() if ". QUALITY ISSUE: " in line]


class TestExitCode:
    def test_values(self) -> None:
        assert ExitCode.SUCCESS == 0
        assert ExitCode.ERROR == 1
        assert ExitCode.QUALITY_ISSUES == 2


class TestFormatBlockingMessage:
    def test_structure(self) -> None:
        text = format_blocking_message(
            "❌ Quality issues found:\n\nfirst problem\nsecond problem",
            "Some context",
        )

        lines = text.splitlines()
        assert lines[0] == ""
        assert lines[1] == BLOCKING_HEADER
        assert lines[3] == "1. QUALITY ISSUE: first problem"
        assert lines[4] == ACTION_REQUIRED
        assert lines[6] == "2. QUALITY ISSUE: second problem"
        assert lines[7] == ACTION_REQUIRED
        assert "CONTEXT: Some context" in lines
        assert text.rstrip("\n").splitlines()[-1] == DO_NOT_PROCEED

    def test_skips_header_and_blank_lines(self) -> None:
        text = format_blocking_message("❌ Quality issues found:\n\n  \nonly one\n\n")

        assert _issue_lines(text) == ["1. QUALITY ISSUE: only one"]

    def test_context_omitted_when_missing_or_same_as_reason(self) -> None:
        assert "CONTEXT:" not in format_blocking_message("problem")
        assert "CONTEXT:" not in format_blocking_message("problem", "problem")

    def test_every_issue_followed_by_action_line(self) -> None:
        text = format_blocking_message("a\nb\nc")
        lines = text.splitlines()

        for index, line in enumerate(lines):
            if ". QUALITY ISSUE: " in line:
                assert lines[index + 1] == ACTION_REQUIRED


class TestFormatIssueMessages:
    def test_uses_message_then_rule(self) -> None:
        issues = [
            Issue(rule="typescript-error", message="Type error", file="f.ts", fixable=False),
            Issue(rule="no-var", message="", file="f.ts", fixable=True),
        ]

        text = format_issue_messages(issues)

        assert text == "❌ Quality issues found:\n\nType error\nno-var"

    def test_empty_returns_none(self) -> None:
        assert format_issue_messages([]) is None

    def test_multiline_message_stays_one_issue(self) -> None:
        issues = [
            Issue(
                rule="typescript-error",
                message="f.ts(1,1): error TS2322: Type 'A' is not assignable\n  to type 'B'.",
                file="f.ts",
                fixable=False,
            ),
            Issue(rule="typescript-error", message="second", file="f.ts", fixable=False),
        ]

        text = format_issue_messages(issues)

        assert text is not None
        assert _issue_lines(format_blocking_message(text)) == [
            "1. QUALITY ISSUE: f.ts(1,1): error TS2322: Type 'A' is not assignable to type 'B'.",
            "2. QUALITY ISSUE: second",
        ]


class TestIssueReporter:
    def test_prefixes_tool_names_in_order(self) -> None:
        report = make_report(
            prettier=["Code style issues found in f.ts."],
            eslint=["1:1 Unexpected var (no-var)"],
            typescript=["f.ts(1,1): error TS2322: bad"],
        )

        text = IssueReporter().format_for_agent(report)

        assert text is not None
        assert text.splitlines()[2:] == [
            "Prettier: Code style issues found in f.ts.",
            "ESLint: 1:1 Unexpected var (no-var)",
            "TypeScript: f.ts(1,1): error TS2322: bad",
        ]

    def test_multiline_error_stays_one_issue(self) -> None:
        report = make_report(typescript=["line one\n  line two"])

        text = IssueReporter().format_for_agent(report)

        assert text is not None
        assert _issue_lines(format_blocking_message(text)) == [
            "1. QUALITY ISSUE: TypeScript: line one line two"
        ]

    def test_no_errors_returns_none(self) -> None:
        assert IssueReporter().format_for_agent(make_report(prettier=[], eslint=[])) is None


class TestProgressNarrator:
    def test_records_lines_in_order(self) -> None:
        narrator = ProgressNarrator()
        narrator.say("🔍", "starting")
        narrator.say("✅", "done")

        assert narrator.snapshot() == ("🔍 starting", "✅ done")
