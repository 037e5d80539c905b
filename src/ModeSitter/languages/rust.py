"""rust-mode: tree-sitter highlighting by node kind and tree-sitter indentation"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from ..commands import register_language_commands
from ..faces import FACES
from ..grammars.tree_walking import FieldFace, IndentRole, NodeKindHighlighter, TreeAdapter
from ..indentation import TreeIndenter
from ..modes import MODES, MajorMode

if TYPE_CHECKING:
    from ..session import BufferSession

MODE_NAME = "rust-mode"
EXTENSIONS = (".rs",)
INDENT_WIDTH = 4


class RustNode(Enum):
    # Literals and comments
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"
    STRING_LITERAL = "string_literal"
    RAW_STRING_LITERAL = "raw_string_literal"
    CHAR_LITERAL = "char_literal"
    FLOAT_LITERAL = "float_literal"
    INTEGER_LITERAL = "integer_literal"
    BOOLEAN_LITERAL = "boolean_literal"

    # Keywords
    FN = "fn"
    LET = "let"
    PUB = "pub"
    CRATE = "crate"
    SUPER = "super"
    SELF = "self"
    STRUCT = "struct"
    ENUM = "enum"
    UNION = "union"
    IMPL = "impl"
    TRAIT = "trait"
    TYPE = "type"
    WHERE = "where"
    USE = "use"
    MOD = "mod"
    EXTERN = "extern"
    STATIC = "static"
    CONST = "const"
    MOVE = "move"
    REF = "ref"
    UNSAFE = "unsafe"
    ASYNC = "async"
    AWAIT = "await"
    LOOP = "loop"
    WHILE = "while"
    FOR = "for"
    IN = "in"
    IF = "if"
    ELSE = "else"
    MATCH = "match"
    RETURN = "return"
    BREAK = "break"
    CONTINUE = "continue"
    DYN = "dyn"
    AS = "as"
    VISIBILITY_MODIFIER = "visibility_modifier"
    MUTABLE_SPECIFIER = "mutable_specifier"

    # Items and expressions
    FUNCTION_ITEM = "function_item"
    FUNCTION_SIGNATURE_ITEM = "function_signature_item"
    CALL_EXPRESSION = "call_expression"
    MACRO_INVOCATION = "macro_invocation"
    IF_EXPRESSION = "if_expression"
    ELSE_CLAUSE = "else_clause"
    MATCH_EXPRESSION = "match_expression"
    MATCH_BLOCK = "match_block"
    MATCH_ARM = "match_arm"
    MATCH_PATTERN = "match_pattern"
    LOOP_EXPRESSION = "loop_expression"
    WHILE_EXPRESSION = "while_expression"
    FOR_EXPRESSION = "for_expression"
    IMPL_ITEM = "impl_item"
    STRUCT_ITEM = "struct_item"
    ENUM_ITEM = "enum_item"
    TRAIT_ITEM = "trait_item"
    MOD_ITEM = "mod_item"
    BLOCK = "block"
    UNSAFE_BLOCK = "unsafe_block"
    ASYNC_BLOCK = "async_block"
    CONST_BLOCK = "const_block"
    CLOSURE_EXPRESSION = "closure_expression"
    DECLARATION_LIST = "declaration_list"
    FIELD_DECLARATION_LIST = "field_declaration_list"
    FIELD_DECLARATION = "field_declaration"
    ENUM_VARIANT_LIST = "enum_variant_list"
    ENUM_VARIANT = "enum_variant"
    USE_LIST = "use_list"
    ARGUMENTS = "arguments"
    PARAMETERS = "parameters"
    PARAMETER = "parameter"
    TYPE_PARAMETERS = "type_parameters"
    TUPLE_EXPRESSION = "tuple_expression"
    TUPLE_PATTERN = "tuple_pattern"
    ARRAY_EXPRESSION = "array_expression"

    # Types
    TYPE_IDENTIFIER = "type_identifier"
    PRIMITIVE_TYPE = "primitive_type"
    GENERIC_TYPE = "generic_type"
    QUALIFIED_TYPE = "qualified_type"
    POINTER_TYPE = "pointer_type"
    REFERENCE_TYPE = "reference_type"
    ARRAY_TYPE = "array_type"
    TUPLE_TYPE = "tuple_type"
    UNIT_TYPE = "unit_type"
    NEVER_TYPE = "never_type"
    DYNAMIC_TYPE = "dynamic_type"
    TRAIT_BOUNDS = "trait_bounds"
    WHERE_CLAUSE = "where_clause"
    LIFETIME = "lifetime"

    # Attributes and names
    ATTRIBUTE_ITEM = "attribute_item"
    INNER_ATTRIBUTE_ITEM = "inner_attribute_item"
    IDENTIFIER = "identifier"
    FIELD_IDENTIFIER = "field_identifier"
    SHORTHAND_FIELD_IDENTIFIER = "shorthand_field_identifier"

    # Operators
    BANG = "!"
    AND_AND = "&&"
    OR_OR = "||"
    EQ_EQ = "=="
    NOT_EQ = "!="
    LT = "<"
    GT = ">"
    LT_EQ = "<="
    GT_EQ = ">="
    PLUS = "+"
    MINUS = "-"
    STAR = "*"
    SLASH = "/"
    PERCENT = "%"
    CARET = "^"
    AMP = "&"
    PIPE = "|"
    FAT_ARROW = "=>"
    ARROW = "->"
    EQ = "="
    PLUS_EQ = "+="
    MINUS_EQ = "-="
    STAR_EQ = "*="
    SLASH_EQ = "/="
    PERCENT_EQ = "%="
    AMP_EQ = "&="
    PIPE_EQ = "|="
    CARET_EQ = "^="
    SHL = "<<"
    SHR = ">>"
    SHL_EQ = "<<="
    SHR_EQ = ">>="
    DOT_DOT_EQ = "..="
    DOT_DOT = ".."
    QUESTION = "?"

    # Punctuation
    LPAREN = "("
    RPAREN = ")"
    LBRACKET = "["
    RBRACKET = "]"
    LBRACE = "{"
    RBRACE = "}"
    COMMA = ","
    DOT = "."
    COLON = ":"
    SEMICOLON = ";"
    COLON_COLON = "::"


# fmt: off
_KEYWORDS = (
    RustNode.FN, RustNode.LET, RustNode.PUB, RustNode.CRATE,
    RustNode.SUPER, RustNode.SELF, RustNode.STRUCT,
    RustNode.ENUM, RustNode.UNION, RustNode.IMPL, RustNode.TRAIT, RustNode.TYPE,
    RustNode.WHERE, RustNode.USE, RustNode.MOD, RustNode.EXTERN, RustNode.STATIC,
    RustNode.CONST, RustNode.MOVE, RustNode.REF, RustNode.UNSAFE, RustNode.ASYNC,
    RustNode.AWAIT, RustNode.LOOP, RustNode.WHILE, RustNode.FOR, RustNode.IN,
    RustNode.IF, RustNode.ELSE, RustNode.MATCH, RustNode.RETURN, RustNode.BREAK,
    RustNode.CONTINUE, RustNode.DYN, RustNode.AS, RustNode.VISIBILITY_MODIFIER,
    RustNode.MUTABLE_SPECIFIER,
)

_TYPES = (
    RustNode.TYPE_IDENTIFIER, RustNode.PRIMITIVE_TYPE, RustNode.GENERIC_TYPE,
    RustNode.QUALIFIED_TYPE, RustNode.POINTER_TYPE, RustNode.REFERENCE_TYPE,
    RustNode.ARRAY_TYPE, RustNode.TUPLE_TYPE, RustNode.UNIT_TYPE,
    RustNode.NEVER_TYPE, RustNode.DYNAMIC_TYPE,
)

_OPERATORS = (
    RustNode.BANG, RustNode.AND_AND, RustNode.OR_OR, RustNode.EQ_EQ,
    RustNode.NOT_EQ, RustNode.LT, RustNode.GT, RustNode.LT_EQ, RustNode.GT_EQ,
    RustNode.PLUS, RustNode.MINUS, RustNode.STAR, RustNode.SLASH,
    RustNode.PERCENT, RustNode.CARET, RustNode.AMP, RustNode.PIPE,
    RustNode.FAT_ARROW, RustNode.ARROW, RustNode.EQ, RustNode.PLUS_EQ,
    RustNode.MINUS_EQ, RustNode.STAR_EQ, RustNode.SLASH_EQ, RustNode.PERCENT_EQ,
    RustNode.AMP_EQ, RustNode.PIPE_EQ, RustNode.CARET_EQ, RustNode.SHL,
    RustNode.SHR, RustNode.SHL_EQ, RustNode.SHR_EQ, RustNode.DOT_DOT_EQ,
    RustNode.DOT_DOT, RustNode.QUESTION,
)

_PUNCTUATION = (
    RustNode.LPAREN, RustNode.RPAREN, RustNode.LBRACKET, RustNode.RBRACKET,
    RustNode.LBRACE, RustNode.RBRACE, RustNode.COMMA, RustNode.DOT,
    RustNode.COLON, RustNode.SEMICOLON, RustNode.COLON_COLON,
)

NODE_FACES = {
    RustNode.LINE_COMMENT:               "rust-comment",
    RustNode.BLOCK_COMMENT:              "rust-comment",
    RustNode.STRING_LITERAL:             "rust-string",
    RustNode.RAW_STRING_LITERAL:         "rust-string",
    RustNode.CHAR_LITERAL:               "rust-char",
    RustNode.FLOAT_LITERAL:              "rust-float",
    RustNode.INTEGER_LITERAL:            "rust-number",
    RustNode.BOOLEAN_LITERAL:            "rust-constant",
    RustNode.TRAIT_BOUNDS:               "rust-trait",
    RustNode.WHERE_CLAUSE:               "rust-trait",
    RustNode.LIFETIME:                   "rust-lifetime",
    RustNode.ATTRIBUTE_ITEM:             "rust-attribute",
    RustNode.INNER_ATTRIBUTE_ITEM:       "rust-attribute",
    RustNode.MATCH_PATTERN:              "rust-pattern",
    RustNode.IDENTIFIER:                 "rust-identifier",
    RustNode.FIELD_IDENTIFIER:           "rust-identifier",
    RustNode.SHORTHAND_FIELD_IDENTIFIER: "rust-identifier",

    RustNode.FUNCTION_ITEM:           FieldFace("name", "rust-function"),
    RustNode.FUNCTION_SIGNATURE_ITEM: FieldFace("name", "rust-function"),
    RustNode.CALL_EXPRESSION:         FieldFace("function", "rust-function-call"),
    RustNode.MACRO_INVOCATION:        FieldFace("macro", "rust-macro"),
    RustNode.FIELD_DECLARATION:       FieldFace("name", "rust-field"),
    RustNode.ENUM_VARIANT:            FieldFace("name", "rust-enum-variant"),
    RustNode.PARAMETER:               FieldFace("pattern", "rust-parameter"),
}
NODE_FACES.update({kind: "rust-keyword" for kind in _KEYWORDS})
NODE_FACES.update({kind: "rust-type" for kind in _TYPES})
NODE_FACES.update({kind: "rust-operator" for kind in _OPERATORS})
NODE_FACES.update({kind: "rust-punctuation" for kind in _PUNCTUATION})

B, C = IndentRole.BLOCK, IndentRole.CONTINUATION

# if_expression and else_clause stay neutral. Their blocks carry the level,
# so else and else-if chains are not counted twice
INDENT_ROLES = {
    RustNode.FUNCTION_ITEM:          B,
    RustNode.MATCH_EXPRESSION:       B,
    RustNode.MATCH_ARM:              B,
    RustNode.LOOP_EXPRESSION:        B,
    RustNode.WHILE_EXPRESSION:       B,
    RustNode.FOR_EXPRESSION:         B,
    RustNode.IMPL_ITEM:              B,
    RustNode.STRUCT_ITEM:            B,
    RustNode.ENUM_ITEM:              B,
    RustNode.TRAIT_ITEM:             B,
    RustNode.MOD_ITEM:               B,
    RustNode.BLOCK:                  B,
    RustNode.UNSAFE_BLOCK:           B,
    RustNode.ASYNC_BLOCK:            B,
    RustNode.CONST_BLOCK:            B,
    RustNode.CLOSURE_EXPRESSION:     B,
    RustNode.DECLARATION_LIST:       B,
    RustNode.FIELD_DECLARATION_LIST: B,
    RustNode.ENUM_VARIANT_LIST:      B,
    RustNode.USE_LIST:               B,
    RustNode.ARGUMENTS:              C,
    RustNode.PARAMETERS:             C,
    RustNode.TYPE_PARAMETERS:        C,
    RustNode.TUPLE_EXPRESSION:       C,
    RustNode.TUPLE_PATTERN:          C,
    RustNode.ARRAY_EXPRESSION:       C,
    RustNode.TUPLE_TYPE:             C,
    RustNode.MACRO_INVOCATION:       C,
}

RUST_FACES = {
    "rust-keyword":      {"foreground": "#c586c0", "bold": True},
    "rust-function":     {"foreground": "#dcdcaa"},
    "rust-function-call": {"foreground": "#dcdcaa"},
    "rust-type":         {"foreground": "#4ec9b0"},
    "rust-trait":        {"foreground": "#4ec9b0"},
    "rust-lifetime":     {"foreground": "#4fc1ff"},
    "rust-macro":        {"foreground": "#c586c0"},
    "rust-string":       {"foreground": "#ce9178"},
    "rust-char":         {"foreground": "#ce9178"},
    "rust-number":       {"foreground": "#b5cea8"},
    "rust-float":        {"foreground": "#b5cea8"},
    "rust-constant":     {"foreground": "#569cd6"},
    "rust-identifier":   {"foreground": "#9cdcfe"},
    "rust-field":        {"foreground": "#9cdcfe"},
    "rust-parameter":    {"foreground": "#9cdcfe"},
    "rust-enum-variant": {"foreground": "#dcdcaa"},
    "rust-attribute":    {"foreground": "#808080"},
    "rust-comment":      {"foreground": "#6a9955", "italic": True},
    "rust-operator":     {"foreground": "#d4d4d4"},
    "rust-punctuation":  {"foreground": "#808080"},
    "rust-pattern":      {"foreground": "#4ec9b0"},
}
# fmt: on

tree = TreeAdapter(
    "rust",
    "tree_sitter_rust",
    RustNode,
    INDENT_ROLES,
    highlighter=NodeKindHighlighter(RustNode, NODE_FACES),
    comment_prefixes=("//", "/*"),
)
indenter = TreeIndenter(tree, INDENT_WIDTH)


def define_rust_faces():
    FACES.define_faces(RUST_FACES)


def _init(session: BufferSession):
    if not FACES.face_exists("rust-keyword"):
        define_rust_faces()


def register() -> MajorMode:
    define_rust_faces()
    properties = register_language_commands("rust")
    return MODES.register(
        MODE_NAME,
        EXTENSIONS,
        init=_init,
        properties=properties,
        adapter=tree,
        indenter=indenter,
    )
