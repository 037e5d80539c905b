from enum import Enum

import pytest

from ModeSitter.grammars.tree_walking import IndentRole, TreeAdapter
from ModeSitter.indentation import TreeIndenter
from ModeSitter.text_index import TextIndex
from ModeSitter.tree_manager import ParsedText


class ToyNode(Enum):
    ROOT = "root"
    IF = "if_block"
    CALL = "call"
    GROUP = "group"


ROLES = {
    ToyNode.IF: IndentRole.BLOCK,
    ToyNode.CALL: IndentRole.CONTINUATION,
    ToyNode.GROUP: IndentRole.CONTINUATION,
}


class FakeNode:
    """Just enough of a tree-sitter Node for the indentation walk"""

    def __init__(self, type, start_byte, end_byte, children=()):
        self.type = type
        self.start_byte = start_byte
        self.end_byte = end_byte
        self.children = list(children)


class FakeTree:
    def __init__(self, root_node):
        self.root_node = root_node


class ToyAdapter(TreeAdapter):
    """A tree adapter whose parse tree is handed to it instead of parsed"""

    def __init__(self, build):
        super().__init__("toy", "tree_sitter_toy", ToyNode, ROLES)
        self.build = build

    def parse(self, text):
        return ParsedText(FakeTree(self.build(text)), TextIndex(text))


def indenter_for(build, dedent_keywords=("end",), width=4):
    return TreeIndenter(ToyAdapter(build), width, dedent_keywords)


class TestBlockAndDedent:
    text = "if x\n  y\nend"

    @staticmethod
    def build(text):
        return FakeNode("root", 0, len(text), [FakeNode("if_block", 0, len(text))])

    def test_body_line(self):
        assert indenter_for(self.build).indent_for_line(self.text, 2) == 4

    def test_end_line_is_dedented(self):
        assert indenter_for(self.build).indent_for_line(self.text, 3) == 0

    def test_end_line_without_dedent_keyword(self):
        indenter = indenter_for(self.build, dedent_keywords=())
        assert indenter.indent_for_line(self.text, 3) == 4

    def test_block_start_line(self):
        """A block does not indent the line it starts on"""
        assert indenter_for(self.build).indent_for_line(self.text, 1) == 0

    @pytest.mark.parametrize("line", [0, -1, 4, 100])
    def test_out_of_range(self, line):
        assert indenter_for(self.build).indent_for_line(self.text, line) == 0

    def test_idempotent(self):
        indenter = indenter_for(self.build)
        first = indenter.indent_for_line(self.text, 2)
        assert indenter.indent_for_line(self.text, 2) == first

    def test_width_override(self):
        assert indenter_for(self.build).indent_for_line(self.text, 2, indent_width=2) == 2

    def test_indent_line_action(self):
        action = indenter_for(self.build).indent_line(self.text, 2)
        assert action.to_dict() == {"type": "indent_line", "line": 1, "column": 4}


class TestNestingDepth:
    def depth(self, text, root, line):
        adapter = ToyAdapter(lambda _text: root)
        index = TextIndex(text)
        return adapter.nesting_depth(root, index.line_to_byte(line), index)

    def test_prunes_blocks_that_ended(self):
        text = "if a\nend\nb"
        root = FakeNode("root", 0, len(text), [FakeNode("if_block", 0, 8)])
        assert self.depth(text, root, 2) == 0

    def test_blocks_on_one_line_count_once(self):
        text = "if a if b\n  c\nend end"
        inner = FakeNode("if_block", 5, len(text) - 4)
        root = FakeNode("root", 0, len(text), [FakeNode("if_block", 0, len(text), [inner])])
        assert self.depth(text, root, 1) == 1

    def test_nested_blocks(self):
        text = "if a\n  if b\n    c\n  end\nend"
        inner = FakeNode("if_block", 7, 23)
        root = FakeNode("root", 0, len(text), [FakeNode("if_block", 0, len(text), [inner])])
        assert self.depth(text, root, 2) == 2
        assert self.depth(text, root, 4) == 1

    def test_multiline_continuation(self):
        text = "f(\n  a)"
        root = FakeNode("root", 0, len(text), [FakeNode("call", 1, len(text))])
        assert self.depth(text, root, 1) == 1

    def test_single_line_continuation(self):
        text = "f(a)\nb"
        root = FakeNode("root", 0, len(text), [FakeNode("call", 1, 4)])
        assert self.depth(text, root, 1) == 0

    def test_continuation_starting_with_comment(self):
        text = "x = # note\n  1"
        root = FakeNode("root", 0, len(text), [FakeNode("group", 4, len(text))])
        assert self.depth(text, root, 1) == 0

    def test_continuations_on_one_line_count_once(self):
        text = "f(g(\n  a))"
        inner = FakeNode("call", 3, len(text) - 1)
        root = FakeNode("root", 0, len(text), [FakeNode("call", 1, len(text), [inner])])
        assert self.depth(text, root, 1) == 1

    def test_block_and_continuation_stack(self):
        text = "if f(\n  a)\nend"
        call = FakeNode("call", 4, 10)
        root = FakeNode("root", 0, len(text), [FakeNode("if_block", 0, len(text), [call])])
        assert self.depth(text, root, 1) == 2

    def test_unknown_kinds_are_neutral(self):
        adapter = ToyAdapter(None)
        assert adapter.classify("whatever") is IndentRole.NEUTRAL
        assert adapter.classify("if_block") is IndentRole.BLOCK
        assert adapter.classify("call") is IndentRole.CONTINUATION


class TestUnavailableGrammar:
    @pytest.fixture
    def adapter(self):
        return TreeAdapter("nope", "tree_sitter_does_not_exist", ToyNode, ROLES)

    def test_is_available(self, adapter):
        assert not adapter.is_available()

    def test_highlight_is_empty(self, adapter):
        result = adapter.highlight("if x\nend")
        assert result.spans == []
        assert result.tree is None

    def test_indent_defaults_to_zero(self, adapter):
        indenter = TreeIndenter(adapter, 4, ("end",))
        assert indenter.indent_for_line("if x\n  y\nend", 2) == 0
