"""Command-line entry point and error handling."""

from __future__ import annotations

from hostsnap.cli.main import handle_runtime_error, handle_value_error, main

__all__ = [
    "handle_runtime_error",
    "handle_value_error",
    "main",
]
