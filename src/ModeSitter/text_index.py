from __future__ import annotations

from bisect import bisect_left, bisect_right
from itertools import accumulate
from typing import Optional

from .constants import ENC


class TextIndex:
    """Line and encoding lookups over an immutable snapshot of buffer text

    Character offsets are python string indices. Byte offsets are into the
    utf-8 encoding of the text, which is what tree-sitter reports. Lines
    are split on "\\n" only and are 0-indexed here.
    """

    def __init__(self, text: str):
        self.text = text
        self.encoded: bytes = text.encode(ENC)
        self.lines: list[str] = text.split("\n")

        # char offset of the first character of each line
        starts = [0]
        for line in self.lines[:-1]:
            starts.append(starts[-1] + len(line) + 1)
        self._line_starts: list[int] = starts

        # ascii text has identical byte and char offsets, so skip the table
        self._byte_starts: Optional[list[int]] = None
        if len(self.encoded) != len(text):
            self._byte_starts = [0] + list(
                accumulate(len(ch.encode(ENC)) for ch in text)
            )

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def line_start(self, line: int) -> int:
        """Get the char offset where a 0-indexed line starts"""
        return self._line_starts[line]

    def line_text(self, line: int) -> str:
        return self.lines[line]

    def line_of_char(self, pos: int) -> int:
        """Get the 0-indexed line containing a char offset"""
        return bisect_right(self._line_starts, pos) - 1

    def char_to_byte(self, pos: int) -> int:
        if self._byte_starts is None:
            return pos
        return self._byte_starts[pos]

    def byte_to_char(self, byteidx: int) -> int:
        """Convert a utf-8 byte offset on a character boundary to a char offset"""
        if self._byte_starts is None:
            return byteidx
        return bisect_left(self._byte_starts, byteidx)

    def line_to_byte(self, line: int) -> int:
        """Get the byte offset of the first character of a 0-indexed line"""
        return self.char_to_byte(self._line_starts[line])

    def line_of_byte(self, byteidx: int) -> int:
        return self.line_of_char(self.byte_to_char(byteidx))
