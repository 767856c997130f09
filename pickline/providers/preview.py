"""Preview of the line under the cursor."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from pickline.core.errors import HandlerError, InvalidParamsError
from pickline.providers.listing import read_entries

# path:lnum[:col][:text]
_CURLINE_RE = re.compile(r"^(?P<path>.+?):(?P<lnum>\d+)(?::\d+)?(?::.*)?$")


@dataclass(frozen=True)
class PreviewTarget:
    """File and 1-based line a curline points at (lnum 0: no line)."""

    path: str
    lnum: int = 0


def parse_curline(curline: str) -> PreviewTarget:
    """Parse a picker line into a preview target.

    Plain paths preview from the top; ``path:lnum`` forms (grep output)
    center on the line.

    Raises:
        InvalidParamsError: If the line is empty.
    """
    curline = curline.strip()
    if not curline:
        raise InvalidParamsError("curline is empty")
    match = _CURLINE_RE.match(curline)
    if match is None:
        return PreviewTarget(path=curline)
    return PreviewTarget(path=match.group("path"), lnum=int(match.group("lnum")))


def read_preview(
    path: Path,
    lnum: int,
    size: int,
    context_above: int = 0,
) -> tuple[int, list[str]]:
    """Read up to ``size`` lines of ``path`` around ``lnum``.

    Directories preview as their entry listing.

    Returns:
        ``(start, lines)`` where ``start`` is the 1-based number of the first line.

    Raises:
        HandlerError: If the path cannot be read.
    """
    try:
        if path.is_dir():
            return 1, read_entries(path)[:size]
        start = max(lnum - context_above, 1) if lnum > 0 else 1
        lines: list[str] = []
        with path.open(encoding="utf-8", errors="replace") as f:
            for number, line in enumerate(f, start=1):
                if number < start:
                    continue
                if len(lines) >= size:
                    break
                lines.append(line.rstrip("\r\n"))
    except OSError as e:
        raise HandlerError(f"{path}: {e.strerror or e}") from e
    return start, lines
