"""Argument parsing for the pickline CLI."""

import argparse
from pathlib import Path

from pickline import __version__


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="pickline",
        description="Stdio dispatch backend for an editor fuzzy picker",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Config file (default: ~/.pickline/config.json merged with ./.pickline/config.json)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (overrides config; default: WARNING)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Rotating log file (overrides config)",
    )
    parser.add_argument(
        "--max-tasks",
        type=int,
        dest="max_tasks",
        help="Maximum handlers running at once (default: unbounded)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)
