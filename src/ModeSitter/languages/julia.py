"""julia-mode: Pygments tokens with rainbow brackets, tree-sitter indentation"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from ..commands import register_language_commands
from ..faces import FACES
from ..grammars.tokenizing import TokenizingAdapter, TokenKind
from ..grammars.tree_walking import IndentRole, TreeAdapter
from ..indentation import TreeIndenter
from ..modes import MODES, MajorMode

if TYPE_CHECKING:
    from ..session import BufferSession

MODE_NAME = "julia-mode"
EXTENSIONS = (".jl",)
INDENT_WIDTH = 4
DEDENT_KEYWORDS = ("else", "elseif", "catch", "finally", "end")


class JuliaNode(Enum):
    FUNCTION_DEFINITION = "function_definition"
    MACRO_DEFINITION = "macro_definition"
    FOR_STATEMENT = "for_statement"
    WHILE_STATEMENT = "while_statement"
    IF_STATEMENT = "if_statement"
    LET_STATEMENT = "let_statement"
    TRY_STATEMENT = "try_statement"
    STRUCT_DEFINITION = "struct_definition"
    ABSTRACT_DEFINITION = "abstract_definition"
    MODULE_DEFINITION = "module_definition"
    COMPOUND_STATEMENT = "compound_statement"
    DO_CLAUSE = "do_clause"
    QUOTE_STATEMENT = "quote_statement"
    ELSEIF_CLAUSE = "elseif_clause"
    ELSE_CLAUSE = "else_clause"
    CATCH_CLAUSE = "catch_clause"
    FINALLY_CLAUSE = "finally_clause"
    CALL_EXPRESSION = "call_expression"
    ARGUMENT_LIST = "argument_list"
    TUPLE_EXPRESSION = "tuple_expression"
    VECTOR_EXPRESSION = "vector_expression"
    MATRIX_EXPRESSION = "matrix_expression"
    CURLY_EXPRESSION = "curly_expression"
    PARENTHESIZED_EXPRESSION = "parenthesized_expression"
    COMPREHENSION_EXPRESSION = "comprehension_expression"
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"


B, C = IndentRole.BLOCK, IndentRole.CONTINUATION

# The clauses stay neutral: the enclosing statement already counts for them
# fmt: off
INDENT_ROLES = {
    JuliaNode.FUNCTION_DEFINITION:      B,
    JuliaNode.MACRO_DEFINITION:         B,
    JuliaNode.FOR_STATEMENT:            B,
    JuliaNode.WHILE_STATEMENT:          B,
    JuliaNode.IF_STATEMENT:             B,
    JuliaNode.LET_STATEMENT:            B,
    JuliaNode.TRY_STATEMENT:            B,
    JuliaNode.STRUCT_DEFINITION:        B,
    JuliaNode.ABSTRACT_DEFINITION:      B,
    JuliaNode.MODULE_DEFINITION:        B,
    JuliaNode.COMPOUND_STATEMENT:       B,
    JuliaNode.DO_CLAUSE:                B,
    JuliaNode.QUOTE_STATEMENT:          B,
    JuliaNode.CALL_EXPRESSION:          C,
    JuliaNode.ARGUMENT_LIST:            C,
    JuliaNode.TUPLE_EXPRESSION:         C,
    JuliaNode.VECTOR_EXPRESSION:        C,
    JuliaNode.MATRIX_EXPRESSION:        C,
    JuliaNode.CURLY_EXPRESSION:         C,
    JuliaNode.PARENTHESIZED_EXPRESSION: C,
    JuliaNode.COMPREHENSION_EXPRESSION: C,
}

JULIA_FACES = {
    "julia-keyword":  {"foreground": "#c586c0", "bold": True},
    "julia-macro":    {"foreground": "#c586c0"},
    "julia-type":     {"foreground": "#4ec9b0"},
    "julia-string":   {"foreground": "#ce9178"},
    "julia-number":   {"foreground": "#b5cea8"},
    "julia-constant": {"foreground": "#569cd6"},
    "julia-comment":  {"foreground": "#6a9955", "italic": True},
    "julia-operator": {"foreground": "#d4d4d4"},
    "julia-paren-1":  {"foreground": "#ffd700"},
    "julia-paren-2":  {"foreground": "#da70d6"},
    "julia-paren-3":  {"foreground": "#87cefa"},
    "julia-paren-4":  {"foreground": "#98fb98"},
    "julia-paren-5":  {"foreground": "#ff6347"},
    "julia-paren-6":  {"foreground": "#00ced1"},
}

KIND_FACES = {
    TokenKind.KEYWORD:  "julia-keyword",
    TokenKind.STRING:   "julia-string",
    TokenKind.NUMBER:   "julia-number",
    TokenKind.CONSTANT: "julia-constant",
    TokenKind.COMMENT:  "julia-comment",
    TokenKind.OPERATOR: "julia-operator",
    TokenKind.MACRO:    "julia-macro",
    TokenKind.TYPE:     "julia-type",
}
# fmt: on

RAINBOW_PALETTE = tuple(f"julia-paren-{i}" for i in range(1, 7))

highlighter = TokenizingAdapter("julia", "julia", KIND_FACES, RAINBOW_PALETTE)
tree = TreeAdapter("julia", "tree_sitter_julia", JuliaNode, INDENT_ROLES, comment_prefixes=("#",))
indenter = TreeIndenter(tree, INDENT_WIDTH, DEDENT_KEYWORDS)


def define_julia_faces():
    FACES.define_faces(JULIA_FACES)


def _init(session: BufferSession):
    if not FACES.face_exists("julia-keyword"):
        define_julia_faces()


def register() -> MajorMode:
    define_julia_faces()
    properties = register_language_commands("julia")
    return MODES.register(
        MODE_NAME,
        EXTENSIONS,
        init=_init,
        properties=properties,
        adapter=highlighter,
        indenter=indenter,
    )
