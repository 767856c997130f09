"""File-system listing helpers."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from pickline.config.schema import SourceConfig

logger = logging.getLogger(__name__)


def read_entries(directory: str | Path) -> list[str]:
    """List a directory's entries, sorted, with directories suffixed by ``/``.

    Raises:
        OSError: If the directory cannot be read.
    """
    entries: list[str] = []
    with os.scandir(directory) as it:
        for entry in it:
            entries.append(f"{entry.name}/" if entry.is_dir() else entry.name)
    # scandir order is arbitrary
    entries.sort()
    return entries


def walk_files(root: Path, config: SourceConfig | None = None) -> list[str]:
    """Collect file paths under ``root``, relative and using ``/`` separators.

    Directories named in ``config.skip_dirs`` are pruned, hidden entries are
    skipped unless ``config.show_hidden``, and collection stops at
    ``config.max_files``. Unreadable subdirectories are skipped.
    """
    config = config or SourceConfig()
    skip = set(config.skip_dirs)
    files: list[str] = []

    def _on_error(error: OSError) -> None:
        logger.debug("Skipping unreadable path: %s", error)

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        dirnames[:] = sorted(
            d for d in dirnames
            if d not in skip and (config.show_hidden or not d.startswith("."))
        )
        rel_dir = Path(dirpath).relative_to(root)
        for name in sorted(filenames):
            if not config.show_hidden and name.startswith("."):
                continue
            files.append((rel_dir / name).as_posix())
            if len(files) >= config.max_files:
                logger.info("Source truncated at %d files under %s", config.max_files, root)
                return files
    return files
