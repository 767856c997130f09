"""Core constants and paths for pickline.

Single source of truth for global paths.
"""

from pathlib import Path

PICKLINE_DIR_NAME = ".pickline"

# Output frame header; the payload length is its UTF-8 byte count.
FRAME_HEADER = "Content-length: {length}\n\n"

MAX_REQUEST_ID = 2**64 - 1


def get_pickline_dir() -> Path:
    """Get ~/.pickline (global config directory)."""
    return Path.home() / PICKLINE_DIR_NAME


def get_default_config_path() -> Path:
    """Get global config file path."""
    return get_pickline_dir() / "config.json"


def get_local_config_path(cwd: Path) -> Path:
    """Get project config file path for a working directory."""
    return cwd / PICKLINE_DIR_NAME / "config.json"
