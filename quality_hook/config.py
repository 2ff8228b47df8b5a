"""Configuration dataclass for quality-hook.

Provides HookConfig for the process-level settings of the hook. Programmatic
users construct it directly; the CLI loads it from environment variables via
from_env(). Repository-level tool settings live in quality-hook.yaml (see
quality_hook.domain.config_loader).

Environment Variables:
    QUALITY_HOOK_LOG_DIR: Directory for JSONL logs (default: ~/.config/quality-hook/logs)
    QUALITY_HOOK_LOG_LEVEL: Minimum log level written to the file (default: INFO)
    QUALITY_HOOK_DEBUG: Truthy value enables debug logging to stderr
    QUALITY_HOOK_STDIN_TIMEOUT: Seconds to wait for the hook payload (default: 5)
    QUALITY_HOOK_REVALIDATE: Re-check after partial auto-fix (default: on)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from quality_hook.tools.env import get_log_dir

DEFAULT_STDIN_TIMEOUT = 5.0

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off"})
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigurationError(Exception):
    """Raised when configuration validation fails."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        message = "Configuration validation failed:\n" + "\n".join(
            f"  - {e}" for e in errors
        )
        super().__init__(message)


@dataclass(frozen=True)
class HookConfig:
    """Process-level configuration for the quality hook.

    Attributes:
        log_dir: Directory where the JSONL log file is written.
            Env: QUALITY_HOOK_LOG_DIR
        log_level: Name of the minimum log level for the file.
            Env: QUALITY_HOOK_LOG_LEVEL (default: INFO)
        debug: Write debug records to stderr as well.
            Env: QUALITY_HOOK_DEBUG
        stdin_timeout: Seconds to wait for the payload before treating it
            as empty. Env: QUALITY_HOOK_STDIN_TIMEOUT (default: 5)
        revalidate: Re-check the file after a successful partial fix so
            that fixable issues the fixer missed are still reported.
            Env: QUALITY_HOOK_REVALIDATE (default: on)
    """

    log_dir: Path = field(default_factory=get_log_dir)
    log_level: str = "INFO"
    debug: bool = False
    stdin_timeout: float = DEFAULT_STDIN_TIMEOUT
    revalidate: bool = True

    @property
    def log_level_number(self) -> int:
        return logging.DEBUG if self.debug else getattr(logging, self.log_level, logging.INFO)

    @classmethod
    def from_env(cls, *, validate: bool = True) -> HookConfig:
        """Create HookConfig from environment variables.

        Args:
            validate: If True (default), raise ConfigurationError on any
                invalid value.

        Raises:
            ConfigurationError: If validate=True and configuration is invalid.
        """
        errors: list[str] = []

        timeout_raw = os.environ.get("QUALITY_HOOK_STDIN_TIMEOUT")
        stdin_timeout = DEFAULT_STDIN_TIMEOUT
        if timeout_raw:
            try:
                stdin_timeout = float(timeout_raw)
            except ValueError:
                errors.append(
                    f"QUALITY_HOOK_STDIN_TIMEOUT must be a number, got: {timeout_raw!r}"
                )

        revalidate = _parse_flag("QUALITY_HOOK_REVALIDATE", True, errors)
        debug = _parse_flag("QUALITY_HOOK_DEBUG", False, errors)

        config = cls(
            log_dir=get_log_dir(),
            log_level=(os.environ.get("QUALITY_HOOK_LOG_LEVEL") or "INFO").upper(),
            debug=debug,
            stdin_timeout=stdin_timeout,
            revalidate=revalidate,
        )

        if validate:
            errors.extend(config.validate())
            if errors:
                raise ConfigurationError(errors)
        return config

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors."""
        errors: list[str] = []
        if self.log_level not in _LOG_LEVELS:
            errors.append(
                f"log_level must be one of {', '.join(_LOG_LEVELS)}, got: {self.log_level}"
            )
        if self.stdin_timeout <= 0:
            errors.append(f"stdin_timeout must be positive, got: {self.stdin_timeout}")
        if not self.log_dir.is_absolute():
            errors.append(f"log_dir should be an absolute path, got: {self.log_dir}")
        return errors


def _parse_flag(name: str, default: bool, errors: list[str]) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    errors.append(f"{name} must be a boolean flag, got: {raw!r}")
    return default
