"""Command-line entry point."""

from pickline.cli.serve import main

__all__ = ["main"]
