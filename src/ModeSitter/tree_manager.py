from __future__ import annotations

import logging
import threading
from typing import NamedTuple

from tree_sitter import Language, Node, Parser, Tree

from .errors import ParseFailure
from .text_index import TextIndex

logger = logging.getLogger(__name__)


class ParsedText(NamedTuple):
    tree: Tree
    index: TextIndex

    @property
    def root_node(self) -> Node:
        return self.tree.root_node


class TreeManager:
    """Owns a tree-sitter parser for one language

    Every parse is a full parse of a text snapshot, and the result belongs to
    the caller. A single TreeManager is shared by every buffer using the
    language, so parses are serialized behind a lock.
    """

    def __init__(self, language: Language):
        """Initialize the tree manager

        Args:
            language: The tree-sitter Language to use for parsing
        """
        self.language = language
        self.parser = Parser(language)
        self._lock = threading.Lock()

    def parse(self, text: str) -> ParsedText:
        """Parse a full text snapshot

        Args:
            text: The complete buffer contents

        Returns:
            The tree along with the TextIndex used to map its byte offsets

        Raises:
            ParseFailure: If the parser raised or produced no tree
        """
        index = TextIndex(text)
        with self._lock:
            try:
                tree = self.parser.parse(index.encoded)
            except Exception as e:
                raise ParseFailure(f"tree-sitter parse failed: {e}") from e
        if tree is None:
            raise ParseFailure("tree-sitter returned no tree")
        if tree.root_node.has_error:
            logger.debug("Parsed with recoverable syntax errors")
        return ParsedText(tree, index)
