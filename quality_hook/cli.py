#!/usr/bin/env python3
"""
quality-hook CLI: automatic quality gate for agent file edits.

Usage:
    quality-hook claude [--repo PATH]        # Claude Code PostToolUse hook
    quality-hook check FILE [--fix/--no-fix] # run the gate from a terminal

Claude Code settings.json:

    {"hooks": {"PostToolUse": [{"matcher": "Write|Edit|MultiEdit",
        "hooks": [{"type": "command", "command": "quality-hook claude"}]}]}}
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Annotated, Never

import typer

from .config import ConfigurationError, HookConfig
from .domain.config import ConfigError
from .domain.config_loader import load_settings
from .infra.checker import QualityChecker
from .infra.fixer import Fixer
from .infra.payload import PayloadError, parse_payload, read_payload
from .logging import hook_log
from .logging.console import Colors, emit_blocking, log, print_progress, set_color
from .logging.hook_log import HookContext, configure_logging
from .pipeline.hook_runner import HookRunner
from .pipeline.reporter import (
    ExitCode,
    IssueReporter,
    ProgressNarrator,
    format_blocking_message,
)
from .tools.env import load_user_env

logger = logging.getLogger(__name__)

_bootstrapped = False


def bootstrap() -> None:
    """Load user environment once, before any command runs."""
    global _bootstrapped
    if _bootstrapped:
        return
    load_user_env()
    _bootstrapped = True


app = typer.Typer(
    name="quality-hook",
    help="Quality gate for files written by coding agents",
    add_completion=False,
)


def _load_config() -> HookConfig:
    """Load HookConfig, falling back to defaults when the env is invalid."""
    try:
        return HookConfig.from_env()
    except ConfigurationError as e:
        # Logging is not configured yet; stderr is the only place to say it
        print(f"quality-hook: {e}", file=sys.stderr)
        return HookConfig()


def build_runner(repo_path: Path, config: HookConfig) -> tuple[HookRunner, set[str]]:
    """Wire a HookRunner for a repository.

    Returns:
        The runner and the supported file extensions.

    Raises:
        ConfigError: If quality-hook.yaml is invalid.
    """
    settings = load_settings(repo_path)
    checker = QualityChecker(repo_path, settings)
    runner = HookRunner(
        checker=checker,
        fixer=Fixer(repo_path, settings, checker),
        reporter=IssueReporter(),
        policy=settings.fixability,
        revalidate=config.revalidate,
    )
    return runner, set(settings.supported_extensions)


async def run_claude_hook(
    stdin_text: str, repo_path: Path, config: HookConfig, ctx: HookContext
) -> ExitCode:
    """Handle one Claude Code PostToolUse payload.

    Malformed input, unsupported operations or file types, an invalid
    quality-hook.yaml and any unexpected fault all resolve to SUCCESS: a
    broken hook must never stop the editing agent.
    """
    narrator = ProgressNarrator()
    narrator.say("🔍", "Quality check hook starting...")
    try:
        try:
            payload = parse_payload(stdin_text)
        except PayloadError as e:
            hook_log.payload_rejected(ctx, str(e))
            # An empty or timed-out read is not worth a console line
            if stdin_text.strip() not in ("", "{}"):
                narrator.say("❌", "Invalid payload format")
            print_progress(narrator.snapshot())
            return ExitCode.SUCCESS

        hook_log.payload_received(ctx, payload.tool_name, payload.file_path)
        if not payload.should_process():
            ctx.event(
                logging.DEBUG,
                "Skipping unsupported operation",
                event="skipped",
                operation=payload.tool_name,
            )
            return ExitCode.SUCCESS

        try:
            runner, extensions = build_runner(repo_path, config)
        except ConfigError as e:
            ctx.event(logging.ERROR, "Invalid quality-hook.yaml", event="config_error", error=str(e))
            narrator.say("❌", f"Invalid quality-hook.yaml: {e}")
            print_progress(narrator.snapshot())
            return ExitCode.SUCCESS

        if not payload.file_path.endswith(tuple(extensions)):
            ctx.event(
                logging.DEBUG,
                "Skipping non-code file",
                event="skipped",
                file_path=payload.file_path,
            )
            return ExitCode.SUCCESS

        narrator.say("📝", f"Processing: {payload.file_name}")
        hook_log.hook_started(ctx, payload.tool_name, payload.file_path)
        outcome = await runner.run(payload.file_path, ctx, narrator)

        print_progress(outcome.progress)
        if outcome.blocking_message:
            emit_blocking(outcome.blocking_message)
        hook_log.hook_completed(
            ctx, payload.tool_name, payload.file_path, not outcome.blocked
        )
        return outcome.exit_code
    except Exception:
        logger.exception(
            "Claude hook error",
            extra={"correlation_id": ctx.correlation_id, "phase": "hook-error"},
        )
        log("❌", "Hook error occurred", Colors.RED)
        hook_log.hook_completed(ctx, "unknown", "unknown", False)
        return ExitCode.SUCCESS


@app.command()
def claude(
    repo_path: Annotated[
        Path,
        typer.Option(
            "--repo",
            envvar="CLAUDE_PROJECT_DIR",
            help="Repository root (default: $CLAUDE_PROJECT_DIR or current directory)",
        ),
    ] = Path("."),
    color: Annotated[
        bool,
        typer.Option("--color/--no-color", help="Colorize progress output"),
    ] = True,
) -> Never:
    """Claude Code PostToolUse hook: reads the tool payload from stdin."""
    bootstrap()
    set_color(color)
    config = _load_config()
    configure_logging(config.log_dir, config.log_level_number, config.debug)
    ctx = HookContext()

    async def _main() -> ExitCode:
        stdin_text = await read_payload(sys.stdin, config.stdin_timeout)
        return await run_claude_hook(stdin_text, repo_path.resolve(), config, ctx)

    try:
        exit_code = asyncio.run(_main())
    except Exception:
        logger.exception("Claude hook crashed", extra={"correlation_id": ctx.correlation_id})
        exit_code = ExitCode.SUCCESS
    raise typer.Exit(int(exit_code))


@app.command()
def check(
    file_path: Annotated[
        Path,
        typer.Argument(help="File to check"),
    ],
    fix: Annotated[
        bool,
        typer.Option("--fix/--no-fix", help="Apply automatic fixes (default: on)"),
    ] = True,
    repo_path: Annotated[
        Path,
        typer.Option("--repo", help="Repository root (default: current directory)"),
    ] = Path("."),
    color: Annotated[
        bool,
        typer.Option("--color/--no-color", help="Colorize progress output"),
    ] = True,
) -> Never:
    """Run the quality gate for one file and exit with its status."""
    bootstrap()
    set_color(color)
    try:
        config = HookConfig.from_env()
        runner, _ = build_runner(repo_path.resolve(), config)
    except (ConfigurationError, ConfigError) as e:
        log("✗", str(e), Colors.RED)
        raise typer.Exit(int(ExitCode.ERROR))
    configure_logging(config.log_dir, config.log_level_number, config.debug)

    if not file_path.exists():
        log("✗", f"File not found: {file_path}", Colors.RED)
        raise typer.Exit(int(ExitCode.ERROR))

    ctx = HookContext()
    target = str(file_path.resolve())
    log("📝", f"Checking: {file_path.name}", Colors.BLUE)

    if fix:
        outcome = asyncio.run(runner.run(target, ctx))
        print_progress(outcome.progress)
        if outcome.blocking_message:
            emit_blocking(outcome.blocking_message)
        raise typer.Exit(int(outcome.exit_code))

    report = asyncio.run(runner.checker.check(target))
    if report.success:
        log("✅", "All quality checks passed!", Colors.GREEN)
        raise typer.Exit(int(ExitCode.SUCCESS))
    text = runner.reporter.format_for_agent(report) or "Quality check failed"
    emit_blocking(format_blocking_message(text))
    raise typer.Exit(int(ExitCode.QUALITY_ISSUES))
