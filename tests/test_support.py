import logging

import pytest
from tree_sitter import Language

from ModeSitter.errors import AdapterUnavailable
from ModeSitter.grammars import support


@pytest.fixture(autouse=True)
def fresh_support():
    support.reset()
    yield
    support.reset()


class TestTreeSitterLanguage:
    def test_available(self):
        result = support.tree_sitter_language("tree_sitter_python")
        assert isinstance(result, support.GrammarAvailable)
        assert isinstance(result.language, Language)

    def test_unavailable(self):
        result = support.tree_sitter_language("tree_sitter_does_not_exist")
        assert isinstance(result, support.GrammarUnavailable)
        err = result.error()
        assert isinstance(err, AdapterUnavailable)
        assert err.grammar == "tree_sitter_does_not_exist"

    def test_memoized_and_reported_once(self, caplog):
        with caplog.at_level(logging.WARNING, logger="ModeSitter.grammars.support"):
            first = support.tree_sitter_language("tree_sitter_does_not_exist")
            second = support.tree_sitter_language("tree_sitter_does_not_exist")
        assert first is second
        assert len(caplog.records) == 1

    def test_reset_forgets(self):
        first = support.tree_sitter_language("tree_sitter_python")
        support.reset()
        assert support.tree_sitter_language("tree_sitter_python") is not first


class TestPygmentsLexer:
    def test_available(self):
        result = support.pygments_lexer("julia")
        assert isinstance(result, support.GrammarAvailable)
        assert "julia" in result.language.aliases

    def test_unavailable(self):
        result = support.pygments_lexer("no-such-lexer")
        assert isinstance(result, support.GrammarUnavailable)
        assert result.name == "no-such-lexer"
        assert support.pygments_lexer("no-such-lexer") is result
