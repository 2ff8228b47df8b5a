#!/usr/bin/env python3
"""
quality-hook: quality gate for files written by coding agents.

This module is a thin shim that exposes the CLI app from quality_hook.cli.

Usage:
    quality-hook claude
    quality-hook check FILE
"""

from .cli import bootstrap

# Load the user environment before the console entrypoint builds the app
bootstrap()

from .cli import app  # noqa: E402

if __name__ == "__main__":
    app()
