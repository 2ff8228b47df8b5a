"""Unit tests for HookContext and the JSON-lines log setup."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from quality_hook.domain.models import Action
from quality_hook.logging import hook_log
from quality_hook.logging.hook_log import (
    LOG_FILENAME,
    HookContext,
    JsonLineFormatter,
    configure_logging,
)


class _ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@pytest.fixture
def records() -> Iterator[list[logging.LogRecord]]:
    handler = _ListHandler()
    log = logging.getLogger("quality_hook.logging.hook_log")
    previous = log.level
    log.addHandler(handler)
    log.setLevel(logging.DEBUG)
    yield handler.records
    log.removeHandler(handler)
    log.setLevel(previous)


@pytest.fixture
def restore_package_logger() -> Iterator[None]:
    package_logger = logging.getLogger("quality_hook")
    handlers = list(package_logger.handlers)
    level, propagate = package_logger.level, package_logger.propagate
    yield
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        package_logger.addHandler(handler)
    package_logger.setLevel(level)
    package_logger.propagate = propagate


class TestHookContext:
    def test_correlation_ids_are_unique(self) -> None:
        assert HookContext().correlation_id != HookContext().correlation_id

    def test_timer_records_duration(self) -> None:
        ctx = HookContext()

        with ctx.timer("quality-check"):
            pass

        assert ctx.durations["quality-check"] >= 0

    def test_timer_records_on_error(self) -> None:
        ctx = HookContext()

        with pytest.raises(RuntimeError):
            with ctx.timer("auto-fix"):
                raise RuntimeError("boom")

        assert "auto-fix" in ctx.durations

    def test_event_carries_correlation_id(self, records: list[logging.LogRecord]) -> None:
        ctx = HookContext()

        hook_log.autopilot_decision(ctx, "a.ts", Action.REPORT_ONLY, 2, "Type errors")

        assert len(records) == 1
        record = records[0]
        assert record.correlation_id == ctx.correlation_id  # type: ignore[attr-defined]
        assert record.action == "REPORT_ONLY"  # type: ignore[attr-defined]
        assert record.issue_count == 2  # type: ignore[attr-defined]

    def test_hook_completed_includes_duration(self, records: list[logging.LogRecord]) -> None:
        hook_log.hook_completed(HookContext(), "Edit", "a.ts", True)

        assert records[0].duration_ms >= 0  # type: ignore[attr-defined]
        assert records[0].success is True  # type: ignore[attr-defined]


class TestJsonLineFormatter:
    def test_includes_extra_fields(self) -> None:
        record = logging.getLogger("quality_hook.test").makeRecord(
            "quality_hook.test",
            logging.INFO,
            __file__,
            1,
            "Hook started",
            None,
            None,
            extra={"correlation_id": "abc123", "file_path": "a.ts"},
        )

        entry = json.loads(JsonLineFormatter().format(record))

        assert entry["message"] == "Hook started"
        assert entry["level"] == "INFO"
        assert entry["correlation_id"] == "abc123"
        assert entry["file_path"] == "a.ts"
        assert entry["timestamp"].endswith("Z")
        assert "args" not in entry


@pytest.mark.usefixtures("restore_package_logger")
class TestConfigureLogging:
    def test_writes_json_lines(self, tmp_path: Path) -> None:
        log_path = configure_logging(tmp_path / "logs", logging.INFO)

        hook_log.hook_started(HookContext(), "Write", "src/a.ts")
        for handler in logging.getLogger("quality_hook").handlers:
            handler.flush()

        assert log_path == tmp_path / "logs" / LOG_FILENAME
        lines = log_path.read_text().splitlines()
        assert json.loads(lines[-1])["event"] == "hook_started"

    def test_level_filters_debug(self, tmp_path: Path) -> None:
        log_path = configure_logging(tmp_path, logging.INFO)

        hook_log.payload_received(HookContext(), "Edit", "a.ts")
        for handler in logging.getLogger("quality_hook").handlers:
            handler.flush()

        assert log_path is not None
        assert log_path.read_text() == ""

    def test_unwritable_dir_returns_none(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("")

        assert configure_logging(blocker / "logs") is None

    def test_unopenable_log_file_returns_none(self, tmp_path: Path) -> None:
        (tmp_path / LOG_FILENAME).mkdir()

        assert configure_logging(tmp_path) is None
        # Logging still works, it just goes nowhere
        hook_log.hook_started(HookContext(), "Edit", "a.ts")
