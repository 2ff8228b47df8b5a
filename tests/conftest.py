"""Pytest configuration for quality-hook tests."""

import os

import pytest


def pytest_configure(config: pytest.Config) -> None:
    """Configure test environment before collection.

    Redirects hook logs to /tmp so tests never write to
    ~/.config/quality-hook/logs, and clears flags that would change
    defaults under test.
    """
    os.environ["QUALITY_HOOK_LOG_DIR"] = "/tmp/quality-hook-test-logs"
    for name in (
        "QUALITY_HOOK_DEBUG",
        "QUALITY_HOOK_LOG_LEVEL",
        "QUALITY_HOOK_STDIN_TIMEOUT",
        "QUALITY_HOOK_REVALIDATE",
        "CLAUDE_PROJECT_DIR",
    ):
        os.environ.pop(name, None)


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Default unmarked tests to unit category."""
    for item in items:
        if any(marker in item.keywords for marker in ("unit", "integration")):
            continue
        item.add_marker(pytest.mark.unit)
