"""Subprocess-backed collaborators and agent boundary adapters."""
