"""Outcome reporting: issue text, blocking message, exit status.

Everything here returns strings or values; writing to stdout/stderr and
exiting the process is left to the CLI boundary.

The blocking message has a fixed line structure so the editing agent can
enumerate issues without a schema:

    🚫 BLOCKING: You must fix these issues before proceeding:

    1. QUALITY ISSUE: <line>
       ACTION REQUIRED: Fix this issue before continuing

    CONTEXT: <context>

    ❌ DO NOT PROCEED until all issues are resolved. Update your code now.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING

from quality_hook.domain.models import ESLINT, PRETTIER, TYPESCRIPT

if TYPE_CHECKING:
    from collections.abc import Iterable

    from quality_hook.domain.models import CheckReport, Issue


class ExitCode(IntEnum):
    """Process exit statuses.

    The core only ever produces SUCCESS or QUALITY_ISSUES. ERROR is
    reserved for the outer boundary. Claude Code shows stderr to the agent
    when a PostToolUse hook exits with 2.
    """

    SUCCESS = 0
    ERROR = 1
    QUALITY_ISSUES = 2


ISSUES_HEADER = "❌ Quality issues found:"
BLOCKING_HEADER = "🚫 BLOCKING: You must fix these issues before proceeding:"
ACTION_REQUIRED = "   ACTION REQUIRED: Fix this issue before continuing"
DO_NOT_PROCEED = "❌ DO NOT PROCEED until all issues are resolved. Update your code now."

TOOL_DISPLAY_NAMES = {
    PRETTIER: "Prettier",
    ESLINT: "ESLint",
    TYPESCRIPT: "TypeScript",
}


def flatten_message(text: str) -> str:
    """Join multi-line tool output into one line so it stays one issue."""
    return " ".join(part.strip() for part in text.splitlines() if part.strip())


def format_issue_messages(issues: Iterable[Issue]) -> str | None:
    """Issue text for a set of Issues, or None when there is nothing to say."""
    messages = [flatten_message(issue.message) or issue.rule for issue in issues]
    messages = [m for m in messages if m]
    if not messages:
        return None
    return f"{ISSUES_HEADER}\n\n" + "\n".join(messages)


def format_blocking_message(reason: str, additional_context: str | None = None) -> str:
    """Render issue text into the numbered blocking message.

    Every non-empty line of ``reason`` other than the issues header becomes
    one numbered issue followed by the action-required line.
    """
    out: list[str] = ["", BLOCKING_HEADER, ""]

    issue_count = 1
    for line in reason.split("\n"):
        if not line.strip() or ISSUES_HEADER in line:
            continue
        out.append(f"{issue_count}. QUALITY ISSUE: {line}")
        out.append(ACTION_REQUIRED)
        out.append("")
        issue_count += 1

    if additional_context and additional_context != reason:
        out.append(f"CONTEXT: {additional_context}")
        out.append("")

    out.append(DO_NOT_PROCEED)
    out.append("")
    return "\n".join(out) + "\n"


class IssueReporter:
    """Formats raw check reports for the editing agent."""

    def format_for_agent(self, report: CheckReport) -> str | None:
        """One line per tool error, prefixed with the tool name.

        Returns:
            Issue text starting with the issues header, or None when the
            report contains no errors.
        """
        lines: list[str] = []
        for tool in (PRETTIER, ESLINT, TYPESCRIPT):
            tool_report = report.checkers.get(tool)
            if tool_report is None:
                continue
            name = TOOL_DISPLAY_NAMES[tool]
            for error in tool_report.errors:
                flattened = flatten_message(error)
                if flattened:
                    lines.append(f"{name}: {flattened}")
        if not lines:
            return None
        return f"{ISSUES_HEADER}\n\n" + "\n".join(lines)


@dataclass
class ProgressNarrator:
    """Collects short progress lines for each phase transition.

    The lines are informational only; a non-interactive consumer may drop
    them without losing anything the agent needs.
    """

    lines: list[str] = field(default_factory=list)

    def say(self, icon: str, message: str) -> None:
        self.lines.append(f"{icon} {message}")

    def snapshot(self) -> tuple[str, ...]:
        return tuple(self.lines)
