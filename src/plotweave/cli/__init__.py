"""Command-line interface for plotweave.

This module provides the CLI using Typer with rich output for
user-friendly feedback.

Key features:
- Generate any registered algorithm to JSON (stdout or file)
- Parameter presets and key=value overrides
- Algorithm listing and formula display
"""

from plotweave.cli.app import app, cli, main

__all__ = ["app", "cli", "main"]
