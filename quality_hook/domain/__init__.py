"""Pure decision logic: models, aggregation, autopilot policy, configuration.

Nothing in this package performs I/O other than reading quality-hook.yaml
in config_loader.
"""

from __future__ import annotations

from .aggregator import aggregate_issues, build_outcome, extract_lint_rule
from .autopilot import Autopilot, decide
from .models import (
    Action,
    CheckerReport,
    CheckOutcome,
    CheckReport,
    Decision,
    Issue,
    RemediationResult,
)

__all__ = [
    "Action",
    "Autopilot",
    "CheckOutcome",
    "CheckReport",
    "CheckerReport",
    "Decision",
    "Issue",
    "RemediationResult",
    "aggregate_issues",
    "build_outcome",
    "decide",
    "extract_lint_rule",
]
