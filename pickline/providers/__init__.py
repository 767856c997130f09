"""Default collaborators behind the dispatch core.

These are synchronous and run in worker threads. Handlers accept any
callable with the same signature, sync or async.
"""

from pickline.providers.listing import read_entries, walk_files
from pickline.providers.matcher import MatchedItem, SubsequenceMatcher
from pickline.providers.preview import PreviewTarget, parse_curline, read_preview

__all__ = [
    "MatchedItem",
    "PreviewTarget",
    "SubsequenceMatcher",
    "parse_curline",
    "read_entries",
    "read_preview",
    "walk_files",
]
