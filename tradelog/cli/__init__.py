"""CLI commands for tradelog.

This package provides the command-line interface: importing broker
exports, managing stored trades, and daily and overall reports.
"""

from tradelog.cli.main import cli, main

__all__ = ["cli", "main"]
