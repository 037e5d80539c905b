from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, NamedTuple, Optional

from .errors import InvalidSpanRange

logger = logging.getLogger(__name__)


class Span(NamedTuple):
    """A styled character range. end is exclusive"""

    start: int
    end: int
    face: str

    def overlaps(self, start: int, end: int) -> bool:
        return self.start < end and self.end > start

    def contains(self, pos: int) -> bool:
        return self.start <= pos < self.end

    def __len__(self) -> int:
        return max(0, self.end - self.start)


class OverlapPolicy(Enum):
    """How to pick a single face for a character covered by several spans"""

    LAST_WINS = "last"
    FIRST_WINS = "first"
    NARROWEST_WINS = "narrowest"


def _validate(start: int, end: int, face: str):
    if start >= end:
        raise InvalidSpanRange(start, end, face)


class SpanStore:
    """Insertion ordered highlight spans for one buffer

    Spans may overlap. Picking the face to draw for a character is done at
    query time according to an OverlapPolicy.
    """

    def __init__(self):
        self._spans: list[Span] = []

    def add_span(self, start: int, end: int, face: str) -> bool:
        """Append a span

        Returns:
            False (and nothing is stored) if start is not before end
        """
        try:
            _validate(start, end, face)
        except InvalidSpanRange as e:
            logger.warning("Skipping span: %s", e)
            return False
        self._spans.append(Span(start, end, face))
        return True

    def add_spans(self, batch: Iterable[tuple[int, int, str]]) -> int:
        """Append many spans. Invalid entries are skipped, not fatal

        Returns:
            The number of spans that were actually added
        """
        added = 0
        skipped = 0
        for start, end, face in batch:
            try:
                _validate(start, end, face)
            except InvalidSpanRange as e:
                logger.debug("Skipping span: %s", e)
                skipped += 1
                continue
            self._spans.append(Span(start, end, face))
            added += 1
        if skipped:
            logger.warning("Skipped %d invalid spans out of %d", skipped, added + skipped)
        return added

    def clear(self):
        self._spans.clear()

    def clear_range(self, start: int, end: int):
        """Remove every span that intersects [start, end)"""
        self._spans = [s for s in self._spans if not s.overlaps(start, end)]

    def has_spans(self) -> bool:
        return bool(self._spans)

    def __len__(self) -> int:
        return len(self._spans)

    def __iter__(self):
        return iter(list(self._spans))

    def all_spans(self) -> list[Span]:
        return list(self._spans)

    def spans_in_range(self, start: int, end: int) -> list[Span]:
        """Get the spans intersecting [start, end) in insertion order"""
        return [s for s in self._spans if s.overlaps(start, end)]

    def face_at(
        self, pos: int, policy: OverlapPolicy = OverlapPolicy.LAST_WINS
    ) -> Optional[str]:
        """Get the face that wins at a single character"""
        covering = [s for s in self._spans if s.contains(pos)]
        return _pick(covering, policy)

    def resolved_runs(
        self,
        start: int,
        end: int,
        policy: OverlapPolicy = OverlapPolicy.LAST_WINS,
    ) -> list[tuple[int, int, str]]:
        """Flatten the spans over [start, end) into non-overlapping runs

        Characters with no covering span are left out. Adjacent characters
        that resolve to the same face are merged into one run.
        """
        candidates = self.spans_in_range(start, end)
        if not candidates:
            return []

        # Only the span boundaries can change the winning face
        cuts = {start, end}
        for span in candidates:
            cuts.add(max(start, span.start))
            cuts.add(min(end, span.end))
        edges = sorted(cuts)

        runs: list[tuple[int, int, str]] = []
        for lo, hi in zip(edges, edges[1:]):
            covering = [s for s in candidates if s.start <= lo and s.end >= hi]
            face = _pick(covering, policy)
            if face is None:
                continue
            if runs and runs[-1][1] == lo and runs[-1][2] == face:
                runs[-1] = (runs[-1][0], hi, face)
            else:
                runs.append((lo, hi, face))
        return runs

    def adjust_for_insert(self, pos: int, length: int):
        """Shift spans after an insertion of length characters at pos

        Spans starting at or after pos move right, spans containing pos grow.
        """
        if length <= 0:
            return
        adjusted = []
        for s in self._spans:
            if s.start >= pos:
                s = Span(s.start + length, s.end + length, s.face)
            elif s.end > pos:
                s = Span(s.start, s.end + length, s.face)
            adjusted.append(s)
        self._spans = adjusted

    def adjust_for_delete(self, start: int, end: int):
        """Shift, shrink or drop spans after [start, end) was deleted"""
        if start >= end:
            return
        removed = end - start
        adjusted = []
        for s in self._spans:
            if s.end <= start:
                pass
            elif s.start >= end:
                s = Span(s.start - removed, s.end - removed, s.face)
            else:
                # Keep whatever of the span lies outside the deleted range
                new_start = min(s.start, start)
                new_end = max(start, s.end - removed)
                if new_start >= new_end:
                    continue
                s = Span(new_start, new_end, s.face)
            adjusted.append(s)
        self._spans = adjusted


def _pick(covering: list[Span], policy: OverlapPolicy) -> Optional[str]:
    if not covering:
        return None
    if policy is OverlapPolicy.FIRST_WINS:
        return covering[0].face
    if policy is OverlapPolicy.NARROWEST_WINS:
        # min keeps the first of equals, so reverse to let the latest win ties
        return min(reversed(covering), key=len).face
    return covering[-1].face
