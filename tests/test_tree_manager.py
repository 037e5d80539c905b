import pytest
from tree_sitter import Language
import tree_sitter_python as tspython

from ModeSitter.errors import ParseFailure
from ModeSitter.tree_manager import TreeManager


class TestTreeManager:
    """Tests for the TreeManager class"""

    @pytest.fixture
    def source_text(self):
        """Sample Python source code for testing"""
        return "def foo():\n    pass\n"

    @pytest.fixture
    def tree_manager(self):
        """Create a TreeManager instance for testing"""
        language = Language(tspython.language())
        return TreeManager(language)

    def test_tree_manager_initialization(self, tree_manager):
        """Test that TreeManager initializes correctly"""
        assert tree_manager.parser is not None

    def test_parse(self, tree_manager, source_text):
        """Test that a parse creates a tree and a matching text index"""
        parsed = tree_manager.parse(source_text)

        assert parsed.root_node.type == "module"
        assert parsed.root_node.children[0].type == "function_definition"
        assert parsed.index.text == source_text

    def test_multibyte_offsets(self, tree_manager):
        """Test that node bytes map back to chars through the index"""
        text = 'x = "é😀"\ny = 1\n'
        parsed = tree_manager.parse(text)

        second = parsed.root_node.children[1]
        assert parsed.index.byte_to_char(second.start_byte) == text.index("y")

    def test_syntax_error_still_parses(self, tree_manager):
        """Test that broken code still produces a tree"""
        parsed = tree_manager.parse("def foo(:\n")
        assert parsed.root_node.has_error

    def test_parses_are_independent(self, tree_manager, source_text):
        """Each parse is a full parse of its own snapshot"""
        first = tree_manager.parse(source_text)
        second = tree_manager.parse("x = 1\n")

        assert first.root_node.children[0].type == "function_definition"
        assert second.root_node.children[0].type == "expression_statement"

    def test_parser_failure(self, tree_manager):
        """Test that a parser exception becomes a ParseFailure"""

        class BrokenParser:
            def parse(self, source):
                raise ValueError("broken")

        tree_manager.parser = BrokenParser()
        with pytest.raises(ParseFailure, match="broken"):
            tree_manager.parse("x = 1\n")
