"""python-mode: tree-sitter highlights query and tree-sitter indentation"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from ..commands import register_language_commands
from ..faces import FACES
from ..grammars.support import GrammarAvailable, tree_sitter_language
from ..grammars.tree_walking import IndentRole, QueryHighlighter, TreeAdapter
from ..indentation import OffsideIndenter
from ..modes import MODES, MajorMode

if TYPE_CHECKING:
    from ..session import BufferSession

MODE_NAME = "python-mode"
GRAMMAR = "tree_sitter_python"
EXTENSIONS = (".py", ".pyw")
INDENT_WIDTH = 4
DEDENT_KEYWORDS = ("else", "elif", "except", "finally")


class PythonNode(Enum):
    FUNCTION_DEFINITION = "function_definition"
    CLASS_DEFINITION = "class_definition"
    DECORATED_DEFINITION = "decorated_definition"
    IF_STATEMENT = "if_statement"
    ELIF_CLAUSE = "elif_clause"
    ELSE_CLAUSE = "else_clause"
    FOR_STATEMENT = "for_statement"
    WHILE_STATEMENT = "while_statement"
    WITH_STATEMENT = "with_statement"
    TRY_STATEMENT = "try_statement"
    EXCEPT_CLAUSE = "except_clause"
    FINALLY_CLAUSE = "finally_clause"
    MATCH_STATEMENT = "match_statement"
    CASE_CLAUSE = "case_clause"
    BLOCK = "block"
    ARGUMENT_LIST = "argument_list"
    PARAMETERS = "parameters"
    TUPLE = "tuple"
    LIST = "list"
    DICTIONARY = "dictionary"
    SET = "set"
    PARENTHESIZED_EXPRESSION = "parenthesized_expression"
    LIST_COMPREHENSION = "list_comprehension"
    DICTIONARY_COMPREHENSION = "dictionary_comprehension"
    SET_COMPREHENSION = "set_comprehension"
    GENERATOR_EXPRESSION = "generator_expression"
    COMMENT = "comment"


B, C = IndentRole.BLOCK, IndentRole.CONTINUATION

# A block node starts on the first line of its body, so the statements count
# instead. Their clauses stay neutral, the statement already covers them
# fmt: off
INDENT_ROLES = {
    PythonNode.FUNCTION_DEFINITION:      B,
    PythonNode.CLASS_DEFINITION:         B,
    PythonNode.IF_STATEMENT:             B,
    PythonNode.FOR_STATEMENT:            B,
    PythonNode.WHILE_STATEMENT:          B,
    PythonNode.WITH_STATEMENT:           B,
    PythonNode.TRY_STATEMENT:            B,
    PythonNode.MATCH_STATEMENT:          B,
    PythonNode.CASE_CLAUSE:              B,
    PythonNode.ARGUMENT_LIST:            C,
    PythonNode.PARAMETERS:               C,
    PythonNode.TUPLE:                    C,
    PythonNode.LIST:                     C,
    PythonNode.DICTIONARY:               C,
    PythonNode.SET:                      C,
    PythonNode.PARENTHESIZED_EXPRESSION: C,
    PythonNode.LIST_COMPREHENSION:       C,
    PythonNode.DICTIONARY_COMPREHENSION: C,
    PythonNode.SET_COMPREHENSION:        C,
    PythonNode.GENERATOR_EXPRESSION:     C,
}

# highlights query capture name -> face
CAPTURE_FACES = {
    "keyword":             "py-keyword",
    "function":            "py-function",
    "function.builtin":    "py-function-builtin",
    "function.method":     "py-function-method",
    "type":                "py-type",
    "constructor":         "py-type",
    "constant":            "py-constant",
    "constant.builtin":    "py-constant",
    "number":              "py-number",
    "string":              "py-string",
    "escape":              "py-string-escape",
    "comment":             "py-comment",
    "operator":            "py-operator",
    "property":            "py-property",
    "embedded":            "py-embedded",
    "punctuation.special": "py-punctuation",
}

PYTHON_FACES = {
    "py-keyword":          {"foreground": "#569cd6", "bold": True},
    "py-function":         {"foreground": "#dcdcaa", "bold": True},
    "py-function-builtin": {"foreground": "#569cd6"},
    "py-function-method":  {"foreground": "#4ec9b0"},
    "py-type":             {"foreground": "#4ec9b0", "bold": True},
    "py-constant":         {"foreground": "#569cd6"},
    "py-number":           {"foreground": "#b5cea8"},
    "py-string":           {"foreground": "#ce9178"},
    "py-string-escape":    {"foreground": "#d7ba7d", "bold": True},
    "py-comment":          {"foreground": "#6a9955", "italic": True},
    "py-operator":         {"foreground": "#d4d4d4"},
    "py-property":         {"foreground": "#9cdcfe"},
    "py-embedded":         {"foreground": "#9cdcfe"},
    "py-punctuation":      {"foreground": "#808080"},
}
# fmt: on


def highlights_query() -> str:
    """Get the highlights query shipped with the grammar distribution"""
    support = tree_sitter_language(GRAMMAR)
    if not isinstance(support, GrammarAvailable):
        raise support.error()
    return support.module.HIGHLIGHTS_QUERY


tree = TreeAdapter(
    "python",
    GRAMMAR,
    PythonNode,
    INDENT_ROLES,
    highlighter=QueryHighlighter(highlights_query, CAPTURE_FACES),
    comment_prefixes=("#",),
)
indenter = OffsideIndenter(tree, INDENT_WIDTH, DEDENT_KEYWORDS)


def define_python_faces():
    FACES.define_faces(PYTHON_FACES)


def _init(session: BufferSession):
    if not FACES.face_exists("py-keyword"):
        define_python_faces()


def register() -> MajorMode:
    define_python_faces()
    properties = register_language_commands("python")
    return MODES.register(
        MODE_NAME,
        EXTENSIONS,
        init=_init,
        properties=properties,
        adapter=tree,
        indenter=indenter,
    )
