"""Command-line interface."""

from kitab.cli.main import cli

__all__ = ["cli"]
