"""PostToolUse hook for Claude Agent SDK sessions.

Runs the same pipeline as the ``quality-hook claude`` command, in-process.
A QUALITY_ISSUES outcome becomes a block decision carrying the blocking
message; every other outcome, including internal faults, lets the agent
proceed.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from quality_hook.domain.config import HookSettings
from quality_hook.infra.checker import QualityChecker
from quality_hook.infra.payload import PayloadError, payload_from_mapping
from quality_hook.logging import hook_log
from quality_hook.logging.hook_log import HookContext

if TYPE_CHECKING:
    from claude_agent_sdk.types import (
        HookContext as SdkHookContext,
        PostToolUseHookInput,
        SyncHookJSONOutput,
    )

    from quality_hook.pipeline.hook_runner import HookRunner

logger = logging.getLogger(__name__)

# Type alias for PostToolUse hooks (using string annotations to avoid import)
PostToolUseHook = Callable[
    ["PostToolUseHookInput", str | None, "SdkHookContext"],
    Awaitable["SyncHookJSONOutput"],
]


def make_quality_check_hook(
    runner: HookRunner,
    settings: HookSettings | None = None,
) -> PostToolUseHook:
    """Create a PostToolUse hook that blocks on quality issues.

    Args:
        runner: HookRunner wired with checker and fixer.
        settings: Repository settings; selects supported file types.
            Defaults to the settings of the runner's QualityChecker, or
            HookSettings() for any other checker.

    Returns:
        An async hook function for ClaudeAgentOptions.hooks["PostToolUse"].
    """
    if settings is None:
        if isinstance(runner.checker, QualityChecker):
            settings = runner.checker.settings
        else:
            settings = HookSettings()

    async def quality_check_hook(
        hook_input: PostToolUseHookInput,
        stderr: str | None,
        context: SdkHookContext,
    ) -> SyncHookJSONOutput:
        """PostToolUse hook to check edited files."""
        ctx = HookContext()
        try:
            payload = payload_from_mapping(dict(hook_input))
        except PayloadError as e:
            hook_log.payload_rejected(ctx, str(e))
            return {}

        if not payload.should_process() or not settings.is_supported_file(payload.file_path):
            return {}

        hook_log.hook_started(ctx, payload.tool_name, payload.file_path)
        try:
            outcome = await runner.run(payload.file_path, ctx)
        except Exception:
            # A fault in the hook must never stop the agent
            logger.exception(
                "Quality check hook error",
                extra={"correlation_id": ctx.correlation_id},
            )
            hook_log.hook_completed(ctx, payload.tool_name, payload.file_path, False)
            return {}

        hook_log.hook_completed(
            ctx, payload.tool_name, payload.file_path, not outcome.blocked
        )
        if outcome.blocked and outcome.blocking_message:
            return {"decision": "block", "reason": outcome.blocking_message}
        return {}

    return quality_check_hook
