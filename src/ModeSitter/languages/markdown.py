"""markdown-mode: regex highlighting with fenced code exclusion"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from ..commands import register_language_commands
from ..faces import FACES
from ..grammars.pattern import FenceRule, LineRules, PatternAdapter, PatternRule
from ..indentation import LineIndenter
from ..modes import MODES, MajorMode

if TYPE_CHECKING:
    from ..session import BufferSession

MODE_NAME = "markdown-mode"
EXTENSIONS = (".md", ".markdown", ".mkd", ".mdown")
INDENT_WIDTH = 2

M = re.MULTILINE


def _header_face(match: re.Match) -> str:
    return f"md-header-{len(match.group(1))}"


# fmt: off
RULES = [
    PatternRule("header",      re.compile(r"^(#{1,6})[ \t]+(.*)$", M), _header_face),
    PatternRule("bold",        re.compile(r"\*\*[^*\n]+\*\*|__[^_\n]+__"), "md-bold"),
    PatternRule("italic",      re.compile(r"(?<![*\w])\*(?!\*)[^*\n]+(?<!\*)\*(?![*\w])|(?<![_\w])_(?!_)[^_\n]+(?<!_)_(?![_\w])"), "md-italic"),
    PatternRule("code-double", re.compile(r"``[^`]+``"), "md-code"),
    PatternRule("code",        re.compile(r"(?<!`)`(?!`)[^`\n]+`(?!`)"), "md-code"),
    PatternRule("link",        re.compile(r"(?<!!)\[([^\]\n]+)\]\(([^)\n]+)\)"), "md-link-text", 1),
    PatternRule("image",       re.compile(r"!\[([^\]\n]*)\]\(([^)\n]+)\)"), "md-image"),
    PatternRule("blockquote",  re.compile(r"^(>+)", M), "md-blockquote-marker", 1),
    PatternRule("list-marker", re.compile(r"^([ \t]*)([-*+]|\d+[.)])[ \t]", M), "md-list-marker", 2),
    PatternRule("hr",          re.compile(r"^([-*_])\1{2,}[ \t]*$", M), "md-hr"),
]

MARKDOWN_FACES = {
    "md-header-1":          {"foreground": "#569cd6", "bold": True},
    "md-header-2":          {"foreground": "#569cd6", "bold": True},
    "md-header-3":          {"foreground": "#4ec9b0", "bold": True},
    "md-header-4":          {"foreground": "#4ec9b0"},
    "md-header-5":          {"foreground": "#9cdcfe"},
    "md-header-6":          {"foreground": "#9cdcfe"},
    "md-bold":              {"bold": True},
    "md-italic":            {"italic": True},
    "md-code":              {"foreground": "#ce9178"},
    "md-code-block":        {"foreground": "#ce9178"},
    "md-code-fence":        {"foreground": "#808080"},
    "md-code-language":     {"foreground": "#4ec9b0"},
    "md-link-text":         {"foreground": "#4ec9b0", "underline": True},
    "md-image":             {"foreground": "#c586c0"},
    "md-list-marker":       {"foreground": "#dcdcaa", "bold": True},
    "md-blockquote-marker": {"foreground": "#6a9955", "bold": True},
    "md-hr":                {"foreground": "#808080"},
}
# fmt: on

LINE_RULES = LineRules(
    list_item=re.compile(r"^(\s*)([-*+]|\d+[.)])(?=\s|$)"),
    blockquote=re.compile(r"^(>+)"),
    fence_line=re.compile(r"^\s*(`{3,}|~{3,})"),
)

highlighter = PatternAdapter(
    "markdown",
    RULES,
    FenceRule("md-code-fence", "md-code-language", "md-code-block"),
)
indenter = LineIndenter(LINE_RULES, INDENT_WIDTH)


def define_markdown_faces():
    FACES.define_faces(MARKDOWN_FACES)


def _init(session: BufferSession):
    if not FACES.face_exists("md-header-1"):
        define_markdown_faces()


def register() -> MajorMode:
    define_markdown_faces()
    properties = register_language_commands("markdown", show_gutter=False)
    return MODES.register(
        MODE_NAME,
        EXTENSIONS,
        init=_init,
        properties=properties,
        adapter=highlighter,
        indenter=indenter,
    )
