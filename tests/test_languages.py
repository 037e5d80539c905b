import pytest

from ModeSitter.buffer import TextBuffer, apply_action
from ModeSitter.errors import AdapterUnavailable
from ModeSitter.grammars import support
from ModeSitter.languages import julia, python, rust


def face_of(spans, text, word, offset=0):
    """Get the winning face at a word, the last covering span wins"""
    pos = text.index(word) + offset
    covering = [s.face for s in spans if s.start <= pos < s.end]
    return covering[-1] if covering else None


RUST_IF_ELSE = """\
fn main() {
    if x {
        y();
    } else {
        z();
    }
}"""

RUST_CALL = """\
fn main() {
    foo(
        a,
    );
}"""

RUST_STRUCT = """\
struct Point {
    x: i32,
}"""


# fmt: off
@pytest.mark.parametrize(
    "text, line, column",
    [
        pytest.param("fn main() {\n    let x = 1;\n}", 2, 4, id="fn_body"),
        pytest.param("fn main() {\n    let x = 1;\n}", 3, 0, id="fn_close"),
        pytest.param(RUST_IF_ELSE,                     3, 8, id="if_body"),
        pytest.param(RUST_IF_ELSE,                     4, 4, id="close_else_line"),
        pytest.param(RUST_IF_ELSE,                     5, 8, id="else_body"),
        pytest.param(RUST_IF_ELSE,                     6, 4, id="else_close"),
        pytest.param(RUST_IF_ELSE,                     7, 0, id="outer_close"),
        pytest.param(RUST_CALL,                        3, 8, id="multiline_arguments"),
        pytest.param(RUST_CALL,                        4, 4, id="closing_paren"),
        pytest.param(RUST_STRUCT,                      2, 4, id="struct_field"),
        pytest.param("let x = 1;\nlet y = 2;",         2, 0, id="top_level"),
    ],
)
# fmt: on
def test_rust_indent(text, line, column):
    assert rust.indenter.indent_for_line(text, line) == column


JULIA_IF = """\
if a
    b
elseif c
    d
else
    e
end"""

JULIA_NESTED = """\
module M
function f(x)
    for i in x
        println(i)
    end
end
end"""


# fmt: off
@pytest.mark.parametrize(
    "text, line, column",
    [
        pytest.param("function f(x)\n    x + 1\nend", 2, 4, id="function_body"),
        pytest.param("function f(x)\n    x + 1\nend", 3, 0, id="function_end"),
        pytest.param(JULIA_IF,                        2, 4, id="if_body"),
        pytest.param(JULIA_IF,                        3, 0, id="elseif"),
        pytest.param(JULIA_IF,                        5, 0, id="else"),
        pytest.param(JULIA_IF,                        6, 4, id="else_body"),
        pytest.param(JULIA_IF,                        7, 0, id="end"),
        pytest.param(JULIA_NESTED,                    4, 12, id="nested_body"),
        pytest.param(JULIA_NESTED,                    5, 8, id="nested_end"),
        pytest.param("foo(a,\n    b)",                2, 4, id="multiline_call"),
        pytest.param("x = [1,\n     2]",              2, 4, id="multiline_vector"),
        pytest.param("foo(a, b)\nbar()",              2, 0, id="closed_call"),
    ],
)
# fmt: on
def test_julia_indent(text, line, column):
    assert julia.indenter.indent_for_line(text, line) == column


# fmt: off
@pytest.mark.parametrize(
    "text, line, column",
    [
        pytest.param("def f():\n    return 1\n",              2, 4, id="def_body"),
        pytest.param("if a:\n    b\nelse:\n    c\n",          3, 0, id="else"),
        pytest.param("if a:\n    b\nelse:\n    c\n",          4, 4, id="else_body"),
        pytest.param("try:\n    a\nexcept E:\n    b\n",       3, 0, id="except"),
        pytest.param("class A:\n    def f(self):\n        pass\n", 3, 8, id="method_body"),
        pytest.param("x = foo(\n    1,\n)\n",                 2, 4, id="multiline_call"),
        pytest.param("x = foo(\n    1,\n)\n",                 3, 0, id="closing_paren"),
        pytest.param("x = 1\ny = 2\n",                        2, 0, id="top_level"),
        pytest.param("def f():\n    x = 1\n\ny = 2\n",        3, 4, id="blank_line_after_body"),
        pytest.param("def f():\n    x = 1\n\ny = 2\n",        4, 0, id="after_blank_line"),
        pytest.param("\nx = 1\n",                            1, 0, id="leading_blank_line"),
    ],
)
# fmt: on
def test_python_indent(text, line, column):
    assert python.indenter.indent_for_line(text, line) == column


class TestNewlineAndIndent:
    # fmt: off
    @pytest.mark.parametrize(
        "indenter, text, anchor, inserted",
        [
            pytest.param(rust.indenter,   "fn main() {\n    let x = 1;\n}", ";",  "\n    ", id="rust_in_block"),
            pytest.param(rust.indenter,   "fn main() {\n}",                "{",  "\n    ", id="rust_open_brace"),
            pytest.param(julia.indenter,  "function f()\nend",             ")",  "\n    ", id="julia_function"),
            pytest.param(julia.indenter,  "x = 1",                         "1",  "\n",     id="julia_top_level"),
            pytest.param(python.indenter, "def f():",                      ":",  "\n    ", id="python_after_colon"),
            pytest.param(python.indenter, "def f():\n    x = 1",          "1",  "\n    ", id="python_body_end_of_file"),
            pytest.param(python.indenter, "def f():\n    x = 1\n\ny = 2\n", "1", "\n    ", id="python_body_mid_file"),
            pytest.param(python.indenter, "class A:\n    def f(self):\n        return 1", "1", "\n        ", id="python_method_body"),
            pytest.param(python.indenter, "if a:\n    b\nc = 1",        "1",  "\n",     id="python_after_dedent"),
            pytest.param(python.indenter, "x = foo(\n    1,\n)",        ")",  "\n",     id="python_closed_call"),
            pytest.param(python.indenter, "for i in x:  \n",           ":",  "\n    ", id="python_colon_trailing_space"),
        ],
    )
    # fmt: on
    def test_single_insert(self, indenter, text, anchor, inserted):
        cursor = text.index(anchor) + 1
        action = indenter.newline_and_indent(text, cursor)
        assert action.pos == cursor
        assert action.text == inserted

    @pytest.mark.parametrize(
        "indenter, text, anchor",
        [
            pytest.param(rust.indenter, "fn main() {\n    if x {\n        y();\n    }\n}", "y();", id="rust"),
            pytest.param(julia.indenter, "function f(x)\n    for i in x\n        g(i)\n    end\nend", "g(i)", id="julia"),
            pytest.param(python.indenter, "def f(x):\n    for i in x:\n        g(i)\n    return x\n", "g(i)", id="python"),
        ],
    )
    def test_round_trip(self, indenter, text, anchor):
        """Indenting the new line after the insert changes nothing"""
        cursor = text.index(anchor) + len(anchor)
        action = indenter.newline_and_indent(text, cursor)

        buffer = TextBuffer(text)
        apply_action(buffer, action)
        new_text = buffer.content()
        new_line = new_text[: cursor + 1].count("\n") + 1

        assert indenter.indent_for_line(new_text, new_line) == len(action.text) - 1
        assert apply_action(buffer, indenter.indent_line(new_text, new_line)) == []

    def test_does_not_mutate(self):
        text = "fn main() {\n}"
        rust.indenter.newline_and_indent(text, 11)
        assert text == "fn main() {\n}"


class TestRustHighlight:
    text = '#[derive(Debug)]\nfn add(a: i32) -> i32 {\n    // sum\n    let s = "x";\n    println!("{}", a);\n    helper(a + 1)\n}'

    @pytest.fixture
    def spans(self):
        result = rust.tree.highlight(self.text)
        assert result.tree is not None
        return result.spans

    # fmt: off
    @pytest.mark.parametrize(
        "word, offset, face",
        [
            pytest.param("fn",      0, "rust-keyword",       id="keyword"),
            pytest.param("let",     0, "rust-keyword",       id="let"),
            pytest.param("add",     0, "rust-function",      id="function_name"),
            pytest.param("a: i32",  0, "rust-parameter",     id="parameter"),
            pytest.param("i32",     0, "rust-type",          id="type"),
            pytest.param("// sum",  0, "rust-comment",       id="comment"),
            pytest.param('"x"',     1, "rust-string",        id="string"),
            pytest.param("println", 0, "rust-macro",         id="macro"),
            pytest.param("helper",  0, "rust-function-call", id="call"),
            pytest.param("1)",      0, "rust-number",        id="number"),
            pytest.param("#[",      0, "rust-attribute",     id="attribute"),
            pytest.param("+",       0, "rust-operator",      id="operator"),
        ],
    )
    # fmt: on
    def test_faces(self, spans, word, offset, face):
        assert face_of(spans, self.text, word, offset) == face

    def test_error_tree_still_highlights(self):
        """A tree with syntax errors is still used"""
        text = "fn main() {\n    let x = ;\n}"
        result = rust.tree.highlight(text)
        assert result.tree.root_node.has_error
        assert face_of(result.spans, text, "fn") == "rust-keyword"


class TestPythonHighlight:
    text = 'def foo(x):\n    # hi\n    return len("s") + 1\n'

    @pytest.fixture
    def spans(self):
        return python.tree.highlight(self.text).spans

    # fmt: off
    @pytest.mark.parametrize(
        "word, offset, face",
        [
            pytest.param("def",    0, "py-keyword",          id="keyword"),
            pytest.param("return", 0, "py-keyword",          id="return"),
            pytest.param("foo",    0, "py-function",         id="function"),
            pytest.param("# hi",   0, "py-comment",          id="comment"),
            pytest.param('"s"',    1, "py-string",           id="string"),
            pytest.param("len",    0, "py-function-builtin", id="builtin"),
        ],
    )
    # fmt: on
    def test_faces(self, spans, word, offset, face):
        assert face_of(spans, self.text, word, offset) == face

    def test_spans_are_valid(self, spans):
        assert spans
        assert all(s.start < s.end for s in spans)

    def test_query_is_loaded_with_the_grammar(self):
        assert callable(python.tree.highlighter.query_source)
        assert "@keyword" in python.highlights_query()

    def test_missing_grammar_query(self, monkeypatch):
        monkeypatch.setattr(python, "GRAMMAR", "tree_sitter_does_not_exist")
        with pytest.raises(AdapterUnavailable):
            python.highlights_query()


@pytest.mark.parametrize(
    "adapter",
    [
        pytest.param(rust.tree, id="rust"),
        pytest.param(python.tree, id="python"),
    ],
)
def test_node_kinds_exist_in_grammar(adapter):
    """Every classified node kind is a real kind of the loaded grammar"""
    language = support.tree_sitter_language(adapter.module_name).language
    missing = [
        kind.value
        for kind in adapter.node_kinds
        if language.id_for_node_kind(kind.value, True) is None
        and language.id_for_node_kind(kind.value, False) is None
    ]
    assert missing == []
