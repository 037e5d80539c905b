"""Indentation for a line of buffer text

Every calculation works on a full text snapshot and never touches the
buffer. The results are handed back as actions for the host to apply.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from .actions import IndentLineAction, InsertAction
from .constants import CLOSE_BRACKETS
from .errors import AdapterUnavailable, ParseFailure
from .grammars.pattern import LineRules
from .grammars.tree_walking import TreeAdapter
from .utils import dedent_column, first_word, leading_whitespace, spaces

logger = logging.getLogger(__name__)


def split_at(text: str, cursor: int) -> tuple[str, int]:
    """Split the text at the cursor like pressing enter would

    Returns:
        The simulated text and the 0-indexed line the cursor lands on
    """
    cursor = max(0, min(cursor, len(text)))
    before = text[:cursor]
    return before + "\n" + text[cursor:], before.count("\n") + 1


class Indenter:
    """Computes the column a line should be indented to

    Lines are 1-based in the public methods, matching what the host shows.
    """

    def __init__(self, indent_width: int):
        self.indent_width = indent_width

    def column(self, text: str, line: int, indent_width: int) -> int:
        raise NotImplementedError("An Indenter must override the .column() method")

    def indent_for_line(self, text: str, line: int, indent_width: Optional[int] = None) -> int:
        """Get the indent column for a 1-based line. Lines out of range get 0"""
        if line < 1 or line > text.count("\n") + 1:
            return 0
        return self.column(text, line, indent_width or self.indent_width)

    def indent_line(self, text: str, line: int, indent_width: Optional[int] = None) -> IndentLineAction:
        column = self.indent_for_line(text, line, indent_width)
        return IndentLineAction(line - 1, column)

    def newline_text(self, text: str, cursor: int, indent_width: Optional[int] = None) -> str:
        simulated, new_line = split_at(text, cursor)
        return "\n" + spaces(self.indent_for_line(simulated, new_line + 1, indent_width))

    def newline_and_indent(
        self, text: str, cursor: int, indent_width: Optional[int] = None
    ) -> InsertAction:
        """Build the single edit that breaks the line at cursor and indents"""
        cursor = max(0, min(cursor, len(text)))
        return InsertAction(cursor, self.newline_text(text, cursor, indent_width))


class TreeIndenter(Indenter):
    """Indentation from the block/continuation depth in a parse tree

    Args:
        adapter: The tree adapter that classifies the node kinds
        indent_width: Spaces per indent level
        dedent_keywords: Words that take a line back out one level when they
            start it, eg "end"
    """

    def __init__(self, adapter: TreeAdapter, indent_width: int, dedent_keywords: Iterable[str] = ()):
        super().__init__(indent_width)
        self.adapter = adapter
        self.dedent_keywords = frozenset(dedent_keywords)

    def is_dedent_line(self, line_text: str) -> bool:
        stripped = line_text.lstrip()
        if not stripped:
            return False
        if stripped[0] in CLOSE_BRACKETS:
            return True
        return first_word(stripped) in self.dedent_keywords

    def depth(self, text: str, line: int) -> int:
        """Get the nesting depth at the start of a 1-based line"""
        try:
            parsed = self.adapter.parse(text)
        except (AdapterUnavailable, ParseFailure) as e:
            logger.warning("%s: no indentation for line %d: %s", self.adapter.name, line, e)
            return 0
        index = parsed.index
        return self.adapter.nesting_depth(parsed.root_node, index.line_to_byte(line - 1), index)

    def column(self, text: str, line: int, indent_width: int) -> int:
        column = self.depth(text, line) * indent_width
        if self.is_dedent_line(text.split("\n")[line - 1]):
            column = dedent_column(column, indent_width)
        return column


class OffsideIndenter(TreeIndenter):
    """Tree indentation for languages whose blocks end at their last token

    A blank line has nothing of its own inside a block, so it is measured
    from the last character of the previous non-blank line instead. A line
    ending in a block opener, eg ":", indents one level past that line.
    """

    def __init__(
        self,
        adapter: TreeAdapter,
        indent_width: int,
        dedent_keywords: Iterable[str] = (),
        block_openers: Iterable[str] = (":",),
    ):
        super().__init__(adapter, indent_width, dedent_keywords)
        self.block_openers = tuple(block_openers)

    def column(self, text: str, line: int, indent_width: int) -> int:
        lines = text.split("\n")
        if lines[line - 1].strip():
            return super().column(text, line, indent_width)

        prev = line - 2
        while prev >= 0 and not lines[prev].strip():
            prev -= 1
        if prev < 0:
            return 0
        code = lines[prev].rstrip()
        if code.endswith(self.block_openers):
            return len(leading_whitespace(code)) + indent_width

        try:
            parsed = self.adapter.parse(text)
        except (AdapterUnavailable, ParseFailure) as e:
            logger.warning("%s: no indentation for line %d: %s", self.adapter.name, line, e)
            return 0
        index = parsed.index
        anchor = index.char_to_byte(index.line_start(prev) + len(code) - 1)
        depth = self.adapter.nesting_depth(parsed.root_node, anchor, index, line - 1)
        return depth * indent_width


class LineIndenter(Indenter):
    """Indentation from the preceding line alone, for pattern based modes"""

    def __init__(self, rules: LineRules, indent_width: int):
        super().__init__(indent_width)
        self.rules = rules

    def column(self, text: str, line: int, indent_width: int) -> int:
        return self.rules.indent_for_line(text.split("\n"), line - 1)

    def newline_text(self, text: str, cursor: int, indent_width: Optional[int] = None) -> str:
        cursor = max(0, min(cursor, len(text)))
        lines = text.split("\n")
        return self.rules.newline_text(lines, text.count("\n", 0, cursor))
