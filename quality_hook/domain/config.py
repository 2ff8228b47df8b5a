"""Configuration dataclasses for quality-hook.yaml.

Users may place a quality-hook.yaml at the repository root to change which
tools run, the commands used to run them, and how linter findings are
classified as fixable. These frozen dataclasses hold the deserialized form;
see config_loader for parsing.

Key types:
- CheckerSettings: Check/fix commands for one tool
- FixabilityPolicy: Per-tool fixable defaults plus per-rule overrides
- HookSettings: Top-level repository configuration
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from quality_hook.domain.models import ESLINT, PRETTIER, TYPESCRIPT

if TYPE_CHECKING:
    from collections.abc import Mapping


class ConfigError(Exception):
    """Base exception for configuration errors.

    Raised when quality-hook.yaml has invalid content, unknown fields,
    or values of the wrong type.
    """

    pass


@dataclass(frozen=True)
class CheckerSettings:
    """Commands for a single diagnostic tool.

    The file path is appended to both commands, except for the type
    checker which runs project-wide and filters its output by path.

    Attributes:
        command: Shell-style command string for checking.
        fix_command: Command string for fixing, or None if the tool
            cannot fix.
        enabled: Whether the tool runs at all.
    """

    command: str
    fix_command: str | None = None
    enabled: bool = True

    def argv(self) -> list[str]:
        return shlex.split(self.command)

    def fix_argv(self) -> list[str] | None:
        if self.fix_command is None:
            return None
        return shlex.split(self.fix_command)


DEFAULT_CHECKERS: Mapping[str, CheckerSettings] = MappingProxyType(
    {
        PRETTIER: CheckerSettings(
            command="npx prettier --check",
            fix_command="npx prettier --write",
        ),
        ESLINT: CheckerSettings(
            command="npx eslint --format json",
            fix_command="npx eslint --fix",
        ),
        TYPESCRIPT: CheckerSettings(command="npx tsc --noEmit --pretty false"),
    }
)

DEFAULT_EXTENSIONS: tuple[str, ...] = (".js", ".jsx", ".ts", ".tsx")

DEFAULT_COMMAND_TIMEOUT = 60


@dataclass(frozen=True)
class FixabilityPolicy:
    """Which findings are treated as automatically fixable.

    Formatter findings are always fixable and type errors never are; only
    the linter's classification is configurable: a default (True) plus
    per-rule overrides.

    Attributes:
        lint_default: Fixability of lint findings without an override.
        lint_rules: Per-rule overrides keyed by rule id.
    """

    lint_default: bool = True
    lint_rules: Mapping[str, bool] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def is_fixable(self, tool: str, rule: str) -> bool:
        if tool == PRETTIER:
            return True
        if tool == TYPESCRIPT:
            return False
        return self.lint_rules.get(rule, self.lint_default)


DEFAULT_FIXABILITY = FixabilityPolicy()


@dataclass(frozen=True)
class HookSettings:
    """Repository-level settings loaded from quality-hook.yaml.

    Attributes:
        checkers: Per-tool settings keyed by tool name.
        fixability: Fixability classification policy.
        supported_extensions: File suffixes the hook checks.
        command_timeout: Per-subprocess timeout in seconds.
    """

    checkers: Mapping[str, CheckerSettings] = field(
        default_factory=lambda: DEFAULT_CHECKERS
    )
    fixability: FixabilityPolicy = DEFAULT_FIXABILITY
    supported_extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    command_timeout: int = DEFAULT_COMMAND_TIMEOUT

    def enabled_checkers(self) -> list[tuple[str, CheckerSettings]]:
        """Enabled tools in aggregation order."""
        return [
            (name, self.checkers[name])
            for name in (PRETTIER, ESLINT, TYPESCRIPT)
            if name in self.checkers and self.checkers[name].enabled
        ]

    def is_supported_file(self, file_path: str) -> bool:
        return file_path.endswith(self.supported_extensions)
