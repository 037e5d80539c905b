from __future__ import annotations

import logging
import re
from bisect import bisect_right
from typing import Callable, NamedTuple, Optional, Sequence, Union

from ..spans import Span
from ..utils import leading_whitespace
from . import GrammarAdapter, HighlightResult

logger = logging.getLogger(__name__)


FaceChoice = Union[str, Callable[["re.Match[str]"], str]]


class PatternRule(NamedTuple):
    """One regex, one face, applied to every match in the buffer

    Args:
        name: Used in log messages
        regex: The compiled pattern
        face: A face name, or a callable picking the face from the match
        group: Only style this capture group instead of the whole match
    """

    name: str
    regex: re.Pattern
    face: FaceChoice
    group: int = 0

    def face_for(self, match: re.Match) -> str:
        if callable(self.face):
            return self.face(match)
        return self.face


class FencedRegion(NamedTuple):
    start: int
    end: int
    fence: str
    language: str


class FenceRule:
    """Finds multi-line fenced regions and styles them

    A fence is a run of at least three identical delimiter characters at the
    start of a line, optionally followed by a language tag. The region ends
    at the next line holding a run of the same fence character at least as
    long as the opening one.
    """

    regex = re.compile(
        r"^(?P<fence>`{3,}|~{3,})(?P<lang>[\w+-]*)[^\n]*\n(?P<body>.*?)^(?P<close>(?P=fence)(?:(?<=`)`|(?<=~)~)*)[ \t]*$",
        re.MULTILINE | re.DOTALL,
    )

    def __init__(self, fence_face: str, language_face: str, body_face: str):
        self.fence_face = fence_face
        self.language_face = language_face
        self.body_face = body_face

    def regions(self, text: str) -> list[tuple[FencedRegion, list[Span]]]:
        out = []
        for m in self.regex.finditer(text):
            region = FencedRegion(m.start(), m.end(), m.group("fence"), m.group("lang"))
            spans = [Span(m.start("fence"), m.end("fence"), self.fence_face)]
            if m.group("lang"):
                spans.append(Span(m.start("lang"), m.end("lang"), self.language_face))
            body_end = m.end("body")
            if body_end > m.start("body") and text[body_end - 1] == "\n":
                body_end -= 1
            if body_end > m.start("body"):
                spans.append(Span(m.start("body"), body_end, self.body_face))
            spans.append(Span(m.start("close"), m.end("close"), self.fence_face))
            out.append((region, spans))
        return out


class PatternAdapter(GrammarAdapter):
    """Highlights from an ordered list of regex rules

    Fenced regions are found first. A match of any other rule that starts
    inside a fenced region is dropped, and the region gets the fence rule's
    own spans instead, added after every other rule.
    """

    def __init__(
        self,
        name: str,
        rules: Sequence[PatternRule],
        fence: Optional[FenceRule] = None,
    ):
        self.name = name
        self.rules = list(rules)
        self.fence = fence

    def fenced_regions(self, text: str) -> list[FencedRegion]:
        if self.fence is None:
            return []
        return [region for region, _ in self.fence.regions(text)]

    def _highlight(self, text: str) -> HighlightResult:
        fenced = self.fence.regions(text) if self.fence is not None else []
        starts = [region.start for region, _ in fenced]

        def excluded(pos: int) -> bool:
            idx = bisect_right(starts, pos) - 1
            return idx >= 0 and pos < fenced[idx][0].end

        spans: list[Span] = []
        dropped = 0
        for rule in self.rules:
            for m in rule.regex.finditer(text):
                if excluded(m.start()):
                    dropped += 1
                    continue
                start, end = m.span(rule.group)
                if start < end:
                    spans.append(Span(start, end, rule.face_for(m)))

        for _, fence_spans in fenced:
            spans.extend(fence_spans)

        logger.debug(
            "%s: %d spans, %d matches inside %d fenced regions",
            self.name,
            len(spans),
            dropped,
            len(fenced),
        )
        return HighlightResult(spans)


class LineRules:
    """Indentation from the neighbouring lines alone, without a parse tree

    Args:
        list_item: Matches a list item line. Group 1 is the leading
            whitespace and group 2 the marker
        blockquote: Matches a block-quote line. Group 1 is the run of markers
        fence_line: Matches a line that opens or closes a fenced region.
            Group 1 is the fence
    """

    def __init__(
        self,
        list_item: re.Pattern,
        blockquote: re.Pattern,
        fence_line: re.Pattern,
    ):
        self.list_item = list_item
        self.blockquote = blockquote
        self.fence_line = fence_line

    def in_fence(self, lines: Sequence[str], line: int) -> bool:
        """Check if a 0-indexed line is inside a fenced region

        A fence only closes on a run of the same character at least as long
        as the one that opened it.
        """
        opened = None
        for text in lines[:line]:
            m = self.fence_line.match(text)
            if m is None:
                continue
            fence = m.group(1)
            if opened is None:
                opened = fence
            elif fence[0] == opened[0] and len(fence) >= len(opened):
                opened = None
        return opened is not None

    def indent_for_line(self, lines: Sequence[str], line: int) -> int:
        """Get the column for a 0-indexed line"""
        if line <= 0 or line >= len(lines):
            return 0
        if self.in_fence(lines, line):
            return len(leading_whitespace(lines[line]))
        m = self.list_item.match(lines[line - 1])
        if m is not None:
            return len(m.group(1)) + len(m.group(2)) + 1
        return 0

    def newline_text(self, lines: Sequence[str], line: int) -> str:
        """Get what pressing enter at the end of a 0-indexed line inserts"""
        current = lines[line]
        if self.in_fence(lines, line):
            return "\n" + leading_whitespace(current)

        m = self.list_item.match(current)
        if m is not None:
            indent, marker = m.group(1), m.group(2)
            if not current[m.end() :].strip():
                # Enter on an empty item ends the list
                return "\n"
            return "\n" + indent + self.next_marker(marker) + " "

        m = self.blockquote.match(current)
        if m is not None:
            return "\n" + "> " * len(m.group(1))
        return "\n"

    @staticmethod
    def next_marker(marker: str) -> str:
        if marker[:-1].isdigit():
            return f"{int(marker[:-1]) + 1}{marker[-1]}"
        return marker
