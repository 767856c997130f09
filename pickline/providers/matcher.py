"""Default query matcher: whitespace-separated subsequence terms.

Each term must appear in the line as a subsequence. The match window is
tightened from the right (first full match, then the latest start that
still matches), and scored with bonuses for consecutive characters and word
boundaries and a penalty for gaps. Lines are ranked by score, then length.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from pickline.config.schema import CaseMatching

SCORE_MATCH = 16
BONUS_CONSECUTIVE = 8
BONUS_BOUNDARY = 8
PENALTY_GAP = 1
MAX_GAP_PENALTY = 12

_BOUNDARY_CHARS = frozenset("/\\_-.: ")


@dataclass(frozen=True)
class MatchedItem:
    """A line that matched, with the character positions that matched."""

    text: str
    score: int
    indices: tuple[int, ...] = ()


class SubsequenceMatcher:
    """Callable matcher: ``matcher(query, lines) -> list[MatchedItem]``."""

    def __init__(self, case_matching: CaseMatching = CaseMatching.SMART) -> None:
        self.case_matching = case_matching

    def __call__(self, query: str, lines: Sequence[str]) -> list[MatchedItem]:
        return self.match(query, lines)

    def match(self, query: str, lines: Sequence[str]) -> list[MatchedItem]:
        """Filter and rank ``lines``; an empty query keeps every line in order."""
        terms = query.split()
        if not terms:
            return [MatchedItem(line, 0) for line in lines]

        sensitive = self._case_sensitive(query)
        if not sensitive:
            terms = [t.lower() for t in terms]

        matched = []
        for line in lines:
            item = self.match_line(terms, line, sensitive)
            if item is not None:
                matched.append(item)
        matched.sort(key=lambda m: (-m.score, len(m.text)))
        return matched

    def match_line(
        self,
        terms: Sequence[str],
        line: str,
        case_sensitive: bool = True,
    ) -> MatchedItem | None:
        """Match all ``terms`` against one line, or return None."""
        chars = list(line) if case_sensitive else [c.lower() for c in line]
        score = 0
        indices: set[int] = set()
        for term in terms:
            positions = _match_term(term, chars)
            if positions is None:
                return None
            score += _score(line, positions)
            indices.update(positions)
        return MatchedItem(line, score, tuple(sorted(indices)))

    def _case_sensitive(self, query: str) -> bool:
        if self.case_matching is CaseMatching.RESPECT:
            return True
        if self.case_matching is CaseMatching.IGNORE:
            return False
        return any(c.isupper() for c in query)


def _match_term(term: str, chars: list[str]) -> list[int] | None:
    end = -1
    pos = 0
    for i, ch in enumerate(chars):
        if ch == term[pos]:
            pos += 1
            if pos == len(term):
                end = i
                break
    if end < 0:
        return None

    start = end
    pos = len(term) - 1
    for i in range(end, -1, -1):
        if chars[i] == term[pos]:
            pos -= 1
            if pos < 0:
                start = i
                break

    positions = []
    pos = 0
    for i in range(start, end + 1):
        if pos < len(term) and chars[i] == term[pos]:
            positions.append(i)
            pos += 1
    return positions


def _score(line: str, positions: list[int]) -> int:
    score = 0
    prev = -1
    for idx in positions:
        score += SCORE_MATCH
        if prev >= 0:
            if idx == prev + 1:
                score += BONUS_CONSECUTIVE
            else:
                score -= min((idx - prev - 1) * PENALTY_GAP, MAX_GAP_PENALTY)
        if idx == 0 or line[idx - 1] in _BOUNDARY_CHARS or (
            line[idx - 1].islower() and line[idx].isupper()
        ):
            score += BONUS_BOUNDARY
        prev = idx
    return score
