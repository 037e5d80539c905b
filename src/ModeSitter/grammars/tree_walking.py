from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Callable, Iterator, Mapping, NamedTuple, Optional, Protocol, Sequence, Union

from tree_sitter import Node, Query, QueryCursor

from ..errors import ParseFailure
from ..spans import Span
from ..text_index import TextIndex
from ..tree_manager import ParsedText, TreeManager
from . import GrammarAdapter, HighlightResult
from .support import GrammarAvailable, tree_sitter_language

logger = logging.getLogger(__name__)


class IndentRole(Enum):
    BLOCK = "block"
    CONTINUATION = "continuation"
    NEUTRAL = "neutral"


class SyntaxNode(Protocol):
    """The parts of a tree-sitter Node the indentation walk relies on"""

    type: str
    start_byte: int
    end_byte: int

    @property
    def children(self) -> Sequence[SyntaxNode]: ...


class FieldFace(NamedTuple):
    """Style only the child stored under a field of the node, eg "name" """

    field: str
    face: str


FaceRule = Union[str, FieldFace]


def walk(node: Node) -> Iterator[Node]:
    """Yield every node of a tree in pre-order"""
    cursor = node.walk()
    visited_children = False
    while True:
        if not visited_children:
            yield cursor.node
            if cursor.goto_first_child():
                continue
        if cursor.goto_next_sibling():
            visited_children = False
        elif cursor.goto_parent():
            visited_children = True
        else:
            return


class NodeKindHighlighter:
    """Produce spans by looking every node's kind up in a face table

    Whole-node spans come first in tree order so that smaller nodes added
    later win over their ancestors. FieldFace spans are appended after all of
    them, so a function name wins over the generic identifier face.
    """

    def __init__(self, node_kinds: type[Enum], faces: Mapping[Enum, FaceRule]):
        self.kinds: dict[str, Enum] = {k.value: k for k in node_kinds}
        self.faces = dict(faces)

    def spans(self, parsed: ParsedText) -> list[Span]:
        index = parsed.index
        whole: list[Span] = []
        fields: list[Span] = []
        for node in walk(parsed.root_node):
            kind = self.kinds.get(node.type)
            if kind is None:
                continue
            rule = self.faces.get(kind)
            if rule is None:
                continue
            if isinstance(rule, FieldFace):
                child = node.child_by_field_name(rule.field)
                if child is not None:
                    fields.append(_node_span(child, rule.face, index))
            else:
                whole.append(_node_span(node, rule, index))
        return whole + fields


class QueryHighlighter:
    """Produce spans from the captures of a tree-sitter highlights query

    Args:
        query_source: The highlights query, or a function returning it that is
            only called on the first pass
        capture_faces: capture name -> face name. Unlisted captures are ignored
    """

    def __init__(
        self,
        query_source: Union[str, Callable[[], str]],
        capture_faces: Mapping[str, str],
    ):
        self.query_source = query_source
        self.capture_faces = dict(capture_faces)
        self._query: Optional[Query] = None

    def spans(self, parsed: ParsedText) -> list[Span]:
        if self._query is None:
            source = self.query_source() if callable(self.query_source) else self.query_source
            self._query = Query(parsed.tree.language, source)

        # Create a fresh QueryCursor for each pass to avoid stale state issues
        cursor = QueryCursor(self._query)
        captures = cursor.captures(parsed.root_node)
        # Outer nodes first, and the most specific capture last on the same node
        keyed = []
        for capture_name, nodes in captures.items():
            face = self.capture_faces.get(capture_name)
            if face is None:
                continue
            specificity = capture_name.count(".")
            for node in nodes:
                span = _node_span(node, face, parsed.index)
                keyed.append(((span.start, -span.end, specificity), span))
        keyed.sort(key=lambda item: item[0])
        return [span for _, span in keyed]


def _node_span(node: Node, face: str, index: TextIndex) -> Span:
    return Span(index.byte_to_char(node.start_byte), index.byte_to_char(node.end_byte), face)


class TreeAdapter(GrammarAdapter):
    """Highlights and indentation hints from a tree-sitter parse tree

    Args:
        name: Name used in log messages
        module_name: The grammar distribution to load, eg "tree_sitter_rust"
        node_kinds: The closed enumeration of node kinds this grammar knows
        indent_roles: Node kind -> IndentRole. Kinds not listed are neutral
        highlighter: Produces the spans from a parse, or None for a tree
            that is only used for indentation
        comment_prefixes: How a line comment starts in this language
    """

    def __init__(
        self,
        name: str,
        module_name: str,
        node_kinds: type[Enum],
        indent_roles: Mapping[Enum, IndentRole],
        highlighter: Optional[Union[NodeKindHighlighter, QueryHighlighter]] = None,
        comment_prefixes: Sequence[str] = ("#",),
    ):
        self.name = name
        self.module_name = module_name
        self.node_kinds = node_kinds
        self._kinds: dict[str, Enum] = {k.value: k for k in node_kinds}
        self.indent_roles = dict(indent_roles)
        self.highlighter = highlighter
        self.comment_prefixes = tuple(p.encode() for p in comment_prefixes)
        self._manager: Optional[TreeManager] = None
        self._manager_lock = threading.Lock()

    def is_available(self) -> bool:
        return isinstance(tree_sitter_language(self.module_name), GrammarAvailable)

    @property
    def manager(self) -> TreeManager:
        """The memoized TreeManager for this grammar

        Raises:
            AdapterUnavailable: If the grammar distribution failed to load
        """
        with self._manager_lock:
            if self._manager is None:
                support = tree_sitter_language(self.module_name)
                if not isinstance(support, GrammarAvailable):
                    raise support.error()
                self._manager = TreeManager(support.language)
            return self._manager

    def parse(self, text: str) -> ParsedText:
        """Parse a full text

        Raises:
            AdapterUnavailable: If the grammar could not be loaded
            ParseFailure: If no tree could be produced
        """
        return self.manager.parse(text)

    def _highlight(self, text: str) -> HighlightResult:
        parsed = self.parse(text)
        if self.highlighter is None:
            return HighlightResult([], parsed)
        try:
            spans = self.highlighter.spans(parsed)
        except Exception as e:
            raise ParseFailure(f"walking the {self.name} tree failed: {e}") from e
        logger.debug("%s: %d spans", self.name, len(spans))
        return HighlightResult(spans, parsed)

    def classify(self, node_type: str) -> IndentRole:
        kind = self._kinds.get(node_type)
        if kind is None:
            return IndentRole.NEUTRAL
        return self.indent_roles.get(kind, IndentRole.NEUTRAL)

    def nesting_depth(
        self,
        root: SyntaxNode,
        byte_pos: int,
        index: TextIndex,
        target_line: Optional[int] = None,
    ) -> int:
        """Count the indent levels that apply at a byte position

        Args:
            root: Root of the parse tree
            byte_pos: utf-8 offset of the first character of the target line
            index: TextIndex of the parsed text
            target_line: The 0-indexed line being indented, when byte_pos
                lies on an earlier line

        Returns:
            The number of indent levels (not columns)
        """
        if target_line is None:
            target_line = index.line_of_byte(byte_pos)
        block_lines: set[int] = set()
        continuation_lines: set[int] = set()
        depth = 0

        stack: list[SyntaxNode] = [root]
        while stack:
            node = stack.pop()
            # The root always applies, even at the very end of the text
            if node is not root and not (node.start_byte <= byte_pos < node.end_byte):
                continue

            role = self.classify(node.type)
            if role is IndentRole.BLOCK:
                start_line = index.line_of_byte(node.start_byte)
                if start_line < target_line and start_line not in block_lines:
                    block_lines.add(start_line)
                    depth += 1
            elif role is IndentRole.CONTINUATION:
                start_line = self._continuation_line(node, index)
                if (
                    start_line is not None
                    and start_line < target_line
                    and index.line_of_byte(node.end_byte - 1) >= target_line
                    and start_line not in continuation_lines
                ):
                    continuation_lines.add(start_line)
                    depth += 1

            stack.extend(reversed(node.children))
        return depth

    def _continuation_line(self, node: SyntaxNode, index: TextIndex) -> Optional[int]:
        """Get the line a continuation construct starts on, if it counts

        It only counts when its content spans several lines and does not
        start with a comment.
        """
        data = index.encoded
        content = node.start_byte
        while content < node.end_byte and data[content : content + 1] in (b" ", b"\t", b"\r", b"\n"):
            content += 1
        if content >= node.end_byte:
            return None
        if any(data.startswith(p, content) for p in self.comment_prefixes):
            return None

        start_line = index.line_of_byte(content)
        end_line = index.line_of_byte(node.end_byte - 1)
        if end_line <= start_line:
            return None
        return start_line
