from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Callable, Mapping, NamedTuple, Sequence

from pygments.token import (
    Comment,
    Keyword,
    Name,
    Number,
    Operator,
    Punctuation,
    String,
    _TokenType,
)

from ..constants import CLOSE_BRACKETS, OPEN_BRACKETS
from ..errors import ParseFailure
from ..spans import Span
from . import GrammarAdapter, HighlightResult
from .support import GrammarAvailable, pygments_lexer

logger = logging.getLogger(__name__)


class TokenKind(Enum):
    KEYWORD = "keyword"
    STRING = "string"
    NUMBER = "number"
    CONSTANT = "constant"
    COMMENT = "comment"
    OPERATOR = "operator"
    MACRO = "macro"
    BRACKET = "bracket"
    TYPE = "type"
    IDENTIFIER = "identifier"
    TEXT = "text"


class Token(NamedTuple):
    start: int
    end: int
    kind: TokenKind
    value: str


def pygments_token_kind(ttype: _TokenType, value: str) -> TokenKind:
    """Map a Pygments token type onto the coarse TokenKind set"""
    if ttype in Punctuation and value in BRACKET_FAMILIES:
        return TokenKind.BRACKET
    if ttype in Comment:
        return TokenKind.COMMENT
    if ttype in String:
        return TokenKind.STRING
    if ttype in Number:
        return TokenKind.NUMBER
    if ttype in Keyword.Constant or ttype in Name.Builtin:
        return TokenKind.CONSTANT
    if ttype in Keyword.Type:
        return TokenKind.TYPE
    if ttype in Keyword:
        return TokenKind.KEYWORD
    if ttype in Operator:
        return TokenKind.OPERATOR
    if ttype in Name.Decorator:
        return TokenKind.MACRO
    if ttype in Name:
        return TokenKind.IDENTIFIER
    return TokenKind.TEXT


# bracket char -> (family, is_opening)
BRACKET_FAMILIES: dict[str, tuple[str, bool]] = {}
for _open, _close in zip(OPEN_BRACKETS, CLOSE_BRACKETS):
    BRACKET_FAMILIES[_open] = (_open, True)
    BRACKET_FAMILIES[_close] = (_open, False)


class BracketRainbow:
    """Colors brackets by nesting depth, one depth counter per bracket family

    An opening bracket takes the color of the current depth and then goes one
    deeper. A closing bracket first comes back up one level, floored at zero,
    and then takes that color, so a matched pair shares a color.
    """

    def __init__(self, palette: Sequence[str]):
        if not palette:
            raise ValueError("A bracket rainbow needs at least one face")
        self.palette = tuple(palette)
        self.depths: dict[str, int] = {}

    def reset(self):
        self.depths = {}

    def face_for(self, bracket: str) -> str:
        family, is_opening = BRACKET_FAMILIES[bracket]
        depth = self.depths.get(family, 0)
        if is_opening:
            face = self.palette[depth % len(self.palette)]
            self.depths[family] = depth + 1
        else:
            depth = max(0, depth - 1)
            self.depths[family] = depth
            face = self.palette[depth % len(self.palette)]
        return face


class TokenizingAdapter(GrammarAdapter):
    """Highlights from a flat Pygments token stream

    Args:
        name: Name used in log messages
        lexer_alias: Pygments lexer alias, eg "julia"
        kind_faces: TokenKind -> face name. Kinds missing here stay unstyled
        rainbow_palette: Faces cycled through by bracket depth. If empty,
            brackets are styled like any other kind
        classify: Maps a pygments token type and value to a TokenKind
    """

    def __init__(
        self,
        name: str,
        lexer_alias: str,
        kind_faces: Mapping[TokenKind, str],
        rainbow_palette: Sequence[str] = (),
        classify: Callable[[_TokenType, str], TokenKind] = pygments_token_kind,
    ):
        self.name = name
        self.lexer_alias = lexer_alias
        self.kind_faces = dict(kind_faces)
        self.rainbow_palette = tuple(rainbow_palette)
        self.classify = classify
        self._lock = threading.Lock()

    def is_available(self) -> bool:
        return isinstance(pygments_lexer(self.lexer_alias), GrammarAvailable)

    def tokenize(self, text: str) -> list[Token]:
        """Tokenize a full text

        Raises:
            AdapterUnavailable: If the lexer could not be loaded
            ParseFailure: If the lexer raised on this text
        """
        support = pygments_lexer(self.lexer_alias)
        if not isinstance(support, GrammarAvailable):
            raise support.error()

        tokens = []
        with self._lock:
            try:
                for start, ttype, value in support.language.get_tokens_unprocessed(text):
                    if not value:
                        continue
                    kind = self.classify(ttype, value)
                    tokens.append(Token(start, start + len(value), kind, value))
            except Exception as e:
                raise ParseFailure(f"{self.lexer_alias} tokenizer failed: {e}") from e
        return tokens

    def _highlight(self, text: str) -> HighlightResult:
        rainbow = BracketRainbow(self.rainbow_palette) if self.rainbow_palette else None
        spans = []
        for tok in self.tokenize(text):
            if tok.kind is TokenKind.BRACKET and rainbow is not None:
                face = rainbow.face_for(tok.value)
            else:
                face = self.kind_faces.get(tok.kind)
            if face is not None:
                spans.append(Span(tok.start, tok.end, face))
        logger.debug("%s: %d spans", self.name, len(spans))
        return HighlightResult(spans)
