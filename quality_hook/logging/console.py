"""Console output helpers for the quality hook.

Two channels, never mixed:
- stdout carries short progress narration for humans watching the session.
- stderr carries the blocking message that Claude Code feeds back to the
  agent when the hook exits with the quality-issues status.
"""

import sys
from datetime import datetime


# Global color setting (can be modified at runtime)
_color_enabled: bool = True


def set_color(enabled: bool) -> None:
    """Enable or disable ANSI colors globally."""
    global _color_enabled
    _color_enabled = enabled


class Colors:
    """ANSI color codes for terminal output (bright variants)."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    CYAN = "\033[96m"
    RED = "\033[91m"
    GRAY = "\033[90m"
    MUTED = "\033[90m"


# Progress icons mapped to the color used when printing them
ICON_COLORS = {
    "🔍": Colors.CYAN,
    "📝": Colors.BLUE,
    "🤖": Colors.YELLOW,
    "🔧": Colors.YELLOW,
    "✅": Colors.GREEN,
    "❌": Colors.RED,
    "💡": Colors.GRAY,
}


def log(icon: str, message: str, color: str = Colors.RESET, dim: bool = False) -> None:
    """Claude Code style progress line on stdout."""
    timestamp = datetime.now().strftime("%H:%M:%S")
    if not _color_enabled:
        print(f"{timestamp} {icon} {message}", flush=True)
        return
    style = Colors.MUTED if dim else ""
    print(
        f"{Colors.GRAY}{timestamp}{Colors.RESET} {style}{color}{icon} {message}{Colors.RESET}",
        flush=True,
    )


def print_progress(lines: tuple[str, ...] | list[str]) -> None:
    """Print recorded progress lines, coloring by leading icon."""
    for line in lines:
        icon, _, message = line.partition(" ")
        log(icon, message, ICON_COLORS.get(icon, Colors.RESET))


def emit_blocking(text: str) -> None:
    """Write the blocking message to stderr for the agent to read."""
    sys.stderr.write(text)
    if not text.endswith("\n"):
        sys.stderr.write("\n")
    sys.stderr.flush()
