"""Hook logic for Claude Agent SDK.

Re-exports the PostToolUse quality check hook factory.
"""

from __future__ import annotations

from .quality_check import PostToolUseHook, make_quality_check_hook

__all__ = [
    "PostToolUseHook",
    "make_quality_check_hook",
]
