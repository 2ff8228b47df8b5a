"""Unit tests for quality-hook.yaml loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from quality_hook.domain.config import (
    DEFAULT_EXTENSIONS,
    ConfigError,
    FixabilityPolicy,
    HookSettings,
)
from quality_hook.domain.config_loader import load_settings, parse_settings


class TestLoadSettings:
    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        settings = load_settings(tmp_path)

        assert settings == HookSettings()
        assert settings.supported_extensions == DEFAULT_EXTENSIONS

    def test_reads_file(self, tmp_path: Path) -> None:
        (tmp_path / "quality-hook.yaml").write_text(
            "supported_extensions: [ts]\ncommand_timeout: 30\n"
        )

        settings = load_settings(tmp_path)

        assert settings.supported_extensions == (".ts",)
        assert settings.command_timeout == 30

    def test_empty_file_uses_defaults(self, tmp_path: Path) -> None:
        (tmp_path / "quality-hook.yaml").write_text("# nothing here\n")

        assert load_settings(tmp_path) == HookSettings()


class TestParseSettings:
    def test_checker_override_keeps_other_defaults(self) -> None:
        settings = parse_settings(
            """
checkers:
  eslint:
    command: "pnpm exec eslint --format json"
  typescript:
    enabled: false
"""
        )

        eslint = settings.checkers["eslint"]
        assert eslint.command == "pnpm exec eslint --format json"
        assert eslint.fix_command == "npx eslint --fix"
        assert [name for name, _ in settings.enabled_checkers()] == ["prettier", "eslint"]

    def test_fix_command_null_disables_fixing(self) -> None:
        settings = parse_settings("checkers:\n  prettier:\n    fix_command: null\n")

        assert settings.checkers["prettier"].fix_argv() is None

    def test_fixability_rules(self) -> None:
        settings = parse_settings(
            """
fixability:
  eslint:
    default: false
    rules:
      semi: true
"""
        )

        policy = settings.fixability
        assert isinstance(policy, FixabilityPolicy)
        assert policy.is_fixable("eslint", "semi") is True
        assert policy.is_fixable("eslint", "no-undef") is False
        assert policy.is_fixable("prettier", "prettier/prettier") is True
        assert policy.is_fixable("typescript", "typescript-error") is False

    @pytest.mark.parametrize(
        ("content", "match"),
        [
            ("- a\n- b\n", "must be a YAML mapping"),
            ("checkers: [\n", "Invalid YAML syntax"),
            ("unknown: 1\n", "Unknown field 'unknown'"),
            ("checkers:\n  ruff: {}\n", "Unknown checker 'ruff'"),
            ("checkers:\n  eslint:\n    cmd: x\n", "Unknown field 'cmd'"),
            ("checkers:\n  eslint:\n    enabled: 'yes'\n", "'enabled' must be a boolean"),
            ("checkers:\n  eslint:\n    command: ''\n", "cannot be empty"),
            ("checkers:\n  eslint:\n    command: null\n", "cannot be null"),
            ("fixability:\n  typescript:\n    default: true\n", "cannot be configured"),
            ("fixability:\n  eslint:\n    rules:\n      semi: maybe\n", "must be a boolean"),
            ("supported_extensions: []\n", "non-empty list"),
            ("command_timeout: 0\n", "positive integer"),
            ("command_timeout: true\n", "positive integer"),
        ],
    )
    def test_invalid_content(self, content: str, match: str) -> None:
        with pytest.raises(ConfigError, match=match):
            parse_settings(content)


class TestHookSettings:
    def test_is_supported_file(self) -> None:
        settings = HookSettings()

        assert settings.is_supported_file("src/app.tsx")
        assert settings.is_supported_file("lib/index.js")
        assert not settings.is_supported_file("README.md")
        assert not settings.is_supported_file("main.py")

    def test_argv_splits_command(self) -> None:
        checker = HookSettings().checkers["typescript"]

        assert checker.argv() == ["npx", "tsc", "--noEmit", "--pretty", "false"]
