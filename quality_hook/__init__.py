"""quality-hook: automatic quality gate for agent file edits."""

__version__ = "0.1.0"
