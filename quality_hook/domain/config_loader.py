"""YAML configuration loader for quality-hook.yaml.

The file is optional: when it is missing, defaults are used. When present
it is validated strictly so that typos surface as errors instead of being
silently ignored.

Example quality-hook.yaml:

    supported_extensions: [".ts", ".tsx"]
    command_timeout: 30
    checkers:
      typescript:
        enabled: false
      eslint:
        command: "pnpm exec eslint --format json"
        fix_command: "pnpm exec eslint --fix"
    fixability:
      eslint:
        default: true
        rules:
          no-undef: false
"""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Any

import yaml

from quality_hook.domain.config import (
    DEFAULT_CHECKERS,
    DEFAULT_COMMAND_TIMEOUT,
    DEFAULT_EXTENSIONS,
    CheckerSettings,
    ConfigError,
    FixabilityPolicy,
    HookSettings,
)
from quality_hook.domain.models import CHECKER_NAMES, ESLINT

if TYPE_CHECKING:
    from pathlib import Path

CONFIG_FILENAME = "quality-hook.yaml"

_ALLOWED_TOP_LEVEL_FIELDS = frozenset(
    {"supported_extensions", "command_timeout", "checkers", "fixability"}
)
_ALLOWED_CHECKER_FIELDS = frozenset({"enabled", "command", "fix_command"})
_ALLOWED_FIXABILITY_FIELDS = frozenset({"default", "rules"})


def load_settings(repo_path: Path) -> HookSettings:
    """Load quality-hook.yaml from the repository root.

    Args:
        repo_path: Repository root directory.

    Returns:
        HookSettings from the file, or defaults when no file exists.

    Raises:
        ConfigError: If the file cannot be read or fails validation.
    """
    config_file = repo_path / CONFIG_FILENAME
    if not config_file.exists():
        return HookSettings()

    try:
        content = config_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Failed to read {config_file}: {e}") from e
    return parse_settings(content)


def parse_settings(content: str) -> HookSettings:
    """Parse and validate quality-hook.yaml content."""
    data = _parse_yaml(content)
    _check_fields(data, _ALLOWED_TOP_LEVEL_FIELDS, CONFIG_FILENAME)
    return HookSettings(
        checkers=_build_checkers(data.get("checkers")),
        fixability=_build_fixability(data.get("fixability")),
        supported_extensions=_build_extensions(data.get("supported_extensions")),
        command_timeout=_build_timeout(data.get("command_timeout")),
    )


def _parse_yaml(content: str) -> dict[str, Any]:
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax in {CONFIG_FILENAME}: {e}") from e

    # Empty file or only comments
    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigError(
            f"{CONFIG_FILENAME} must be a YAML mapping, got {type(data).__name__}"
        )
    return data


def _check_fields(data: dict[str, Any], allowed: frozenset[str], where: str) -> None:
    unknown = set(data.keys()) - allowed
    if unknown:
        first = sorted(str(k) for k in unknown)[0]
        raise ConfigError(f"Unknown field '{first}' in {where}")


def _build_checkers(data: object) -> MappingProxyType[str, CheckerSettings]:
    if data is None:
        return MappingProxyType(dict(DEFAULT_CHECKERS))
    if not isinstance(data, dict):
        raise ConfigError(
            f"'checkers' must be a mapping, got {type(data).__name__}"
        )

    checkers = dict(DEFAULT_CHECKERS)
    for name, entry in data.items():
        if name not in CHECKER_NAMES:
            raise ConfigError(
                f"Unknown checker '{name}'. Known checkers: {', '.join(CHECKER_NAMES)}"
            )
        if entry is None:
            continue
        if not isinstance(entry, dict):
            raise ConfigError(
                f"Checker '{name}' must be a mapping, got {type(entry).__name__}"
            )
        _check_fields(entry, _ALLOWED_CHECKER_FIELDS, f"checker '{name}'")

        base = checkers[name]
        enabled = entry.get("enabled", base.enabled)
        if not isinstance(enabled, bool):
            raise ConfigError(f"'enabled' must be a boolean for checker '{name}'")
        command = _command_string(entry, "command", name, base.command)
        fix_command = _command_string(entry, "fix_command", name, base.fix_command)
        if command is None:
            raise ConfigError(f"'command' cannot be null for checker '{name}'")
        checkers[name] = CheckerSettings(
            command=command, fix_command=fix_command, enabled=enabled
        )
    return MappingProxyType(checkers)


def _command_string(
    entry: dict[str, Any], key: str, checker: str, default: str | None
) -> str | None:
    if key not in entry:
        return default
    value = entry[key]
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(
            f"'{key}' must be a string for checker '{checker}', "
            f"got {type(value).__name__}"
        )
    if not value.strip():
        raise ConfigError(
            f"'{key}' cannot be empty for checker '{checker}'. Use null to disable."
        )
    return value


def _build_fixability(data: object) -> FixabilityPolicy:
    if data is None:
        return FixabilityPolicy()
    if not isinstance(data, dict):
        raise ConfigError(
            f"'fixability' must be a mapping, got {type(data).__name__}"
        )

    for tool in data:
        if tool != ESLINT:
            # Formatter findings are always fixable, type errors never are.
            raise ConfigError(
                f"Fixability of '{tool}' findings is fixed and cannot be configured"
            )

    eslint = data.get(ESLINT) or {}
    if not isinstance(eslint, dict):
        raise ConfigError(
            f"'fixability.eslint' must be a mapping, got {type(eslint).__name__}"
        )
    _check_fields(eslint, _ALLOWED_FIXABILITY_FIELDS, "fixability.eslint")

    default = eslint.get("default", True)
    if not isinstance(default, bool):
        raise ConfigError("'fixability.eslint.default' must be a boolean")

    rules_data = eslint.get("rules") or {}
    if not isinstance(rules_data, dict):
        raise ConfigError(
            f"'fixability.eslint.rules' must be a mapping, got {type(rules_data).__name__}"
        )
    rules: dict[str, bool] = {}
    for rule, fixable in rules_data.items():
        if not isinstance(fixable, bool):
            raise ConfigError(
                f"Fixability for rule '{rule}' must be a boolean, "
                f"got {type(fixable).__name__}"
            )
        rules[str(rule)] = fixable

    return FixabilityPolicy(lint_default=default, lint_rules=MappingProxyType(rules))


def _build_extensions(data: object) -> tuple[str, ...]:
    if data is None:
        return DEFAULT_EXTENSIONS
    if not isinstance(data, list) or not data:
        raise ConfigError("'supported_extensions' must be a non-empty list")
    extensions: list[str] = []
    for ext in data:
        if not isinstance(ext, str) or not ext.strip():
            raise ConfigError(
                f"Invalid extension {ext!r} in 'supported_extensions'"
            )
        extensions.append(ext if ext.startswith(".") else f".{ext}")
    return tuple(extensions)


def _build_timeout(data: object) -> int:
    if data is None:
        return DEFAULT_COMMAND_TIMEOUT
    if isinstance(data, bool) or not isinstance(data, int) or data <= 0:
        raise ConfigError(
            f"'command_timeout' must be a positive integer, got {data!r}"
        )
    return data
