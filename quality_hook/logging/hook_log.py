"""Structured logging for hook invocations.

Each invocation gets a HookContext carrying its correlation id and timers.
The context is passed explicitly to every call that logs, so there is no
module-level correlation state. Event helpers log through the standard
logging module with the event fields attached as ``extra``; the CLI routes
them to a JSON-lines file because stdout/stderr belong to the agent.
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator

    from quality_hook.domain.models import Action

logger = logging.getLogger(__name__)

LOG_FILENAME = "quality-hook.jsonl"

# LogRecord attributes that are not event fields
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None)).keys()
) | {"message", "asctime"}


def new_correlation_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass
class HookContext:
    """Per-invocation logging context.

    Attributes:
        correlation_id: Identifier tying together all records of one run.
        started_at: Monotonic start time of the invocation.
        durations: Completed timer durations in milliseconds, by name.
    """

    correlation_id: str = field(default_factory=new_correlation_id)
    started_at: float = field(default_factory=time.monotonic)
    durations: dict[str, float] = field(default_factory=dict)

    def elapsed_ms(self) -> float:
        return round((time.monotonic() - self.started_at) * 1000, 2)

    @contextmanager
    def timer(self, name: str) -> Iterator[None]:
        """Record the wall time of a block under ``name``."""
        start = time.monotonic()
        try:
            yield
        finally:
            self.durations[name] = round((time.monotonic() - start) * 1000, 2)

    def event(self, level: int, message: str, **fields: Any) -> None:
        fields["correlation_id"] = self.correlation_id
        logger.log(level, message, extra=fields)


def payload_received(ctx: HookContext, tool_name: str | None, file_path: str | None) -> None:
    ctx.event(
        logging.DEBUG,
        "Payload received",
        event="payload_received",
        tool_name=tool_name,
        file_path=file_path,
    )


def payload_rejected(ctx: HookContext, reason: str) -> None:
    ctx.event(logging.WARNING, "Payload rejected", event="payload_rejected", reason=reason)


def hook_started(ctx: HookContext, operation: str, file_path: str) -> None:
    ctx.event(
        logging.INFO,
        "Hook started",
        event="hook_started",
        operation=operation,
        file_path=file_path,
    )


def quality_check_started(ctx: HookContext, file_path: str) -> None:
    ctx.event(
        logging.INFO,
        "Quality check started",
        event="quality_check_started",
        file_path=file_path,
    )


def quality_check_completed(ctx: HookContext, file_path: str, issue_count: int) -> None:
    ctx.event(
        logging.INFO,
        "Quality check completed",
        event="quality_check_completed",
        file_path=file_path,
        issue_count=issue_count,
        duration_ms=ctx.durations.get("quality-check"),
    )


def autopilot_decision(
    ctx: HookContext,
    file_path: str,
    action: Action,
    issue_count: int,
    reasoning: str,
) -> None:
    ctx.event(
        logging.INFO,
        "Autopilot decision",
        event="autopilot_decision",
        file_path=file_path,
        action=action.value,
        issue_count=issue_count,
        reasoning=reasoning,
    )


def auto_fix_started(ctx: HookContext, file_path: str) -> None:
    ctx.event(logging.INFO, "Auto-fix started", event="auto_fix_started", file_path=file_path)


def auto_fix_completed(
    ctx: HookContext, file_path: str, fixed_count: int, remaining_count: int
) -> None:
    ctx.event(
        logging.INFO,
        "Auto-fix completed",
        event="auto_fix_completed",
        file_path=file_path,
        fixed_count=fixed_count,
        remaining_count=remaining_count,
        duration_ms=ctx.durations.get("auto-fix"),
    )


def hook_completed(ctx: HookContext, operation: str, file_path: str, success: bool) -> None:
    ctx.event(
        logging.INFO,
        "Hook completed",
        event="hook_completed",
        operation=operation,
        file_path=file_path,
        success=success,
        duration_ms=ctx.elapsed_ms(),
    )


class JsonLineFormatter(logging.Formatter):
    """Formats records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc)
            .strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3]
            + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                entry[key] = value
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def configure_logging(log_dir: Path, level: int = logging.INFO, debug: bool = False) -> Path | None:
    """Send quality_hook records to a JSON-lines file.

    Args:
        log_dir: Directory for the log file (created if missing).
        level: Minimum level written to the file.
        debug: Also write human-readable records to stderr.

    Returns:
        Path to the log file, or None if the log file cannot be opened.
    """
    package_logger = logging.getLogger("quality_hook")
    package_logger.setLevel(logging.DEBUG if debug else level)
    package_logger.propagate = False
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    if debug:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(
            logging.Formatter("DEBUG: %(name)s %(levelname)s %(message)s")
        )
        package_logger.addHandler(stream_handler)

    log_path = log_dir / LOG_FILENAME
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
    except OSError:
        package_logger.addHandler(logging.NullHandler())
        return None

    file_handler.setFormatter(JsonLineFormatter())
    package_logger.addHandler(file_handler)
    return log_path
