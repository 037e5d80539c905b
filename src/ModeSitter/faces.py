from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterator, NamedTuple, Optional

logger = logging.getLogger(__name__)


class Color(NamedTuple):
    r: int
    g: int
    b: int

    @classmethod
    def from_hex(cls, value: str) -> Color:
        """Parse a "#rrggbb" or "#rgb" color string

        Raises:
            ValueError: If the string is not a hex color
        """
        digits = value.lstrip("#")
        try:
            if len(digits) == 6:
                return cls(
                    int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)
                )
            if len(digits) == 3:
                return cls(*(int(d, 16) * 17 for d in digits))
        except ValueError:
            pass
        raise ValueError(f"Not a hex color: {value!r}")

    def to_hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"


@dataclass(frozen=True)
class Face:
    """A named visual style. Faces are replaced whole, never edited in place"""

    name: str
    foreground: Optional[Color] = None
    background: Optional[Color] = None
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False


class FaceRegistry:
    """Process-wide registry of faces keyed by name

    Defining a face under an existing name replaces the old definition.
    """

    def __init__(self):
        self._faces: dict[str, Face] = {}

    def define_face(
        self,
        name: str,
        foreground: Optional[str] = None,
        background: Optional[str] = None,
        bold: bool = False,
        italic: bool = False,
        underline: bool = False,
        strikethrough: bool = False,
    ) -> Face:
        """Define (or redefine) the face with the given name

        Args:
            name: Unique name of the face, eg "julia-keyword"
            foreground: Foreground color as a hex string
            background: Background color as a hex string
            bold: Whether text should be bold
            italic: Whether text should be italic
            underline: Whether text should be underlined
            strikethrough: Whether text should be struck through

        Returns:
            The stored Face
        """
        face = Face(
            name=name,
            foreground=None if foreground is None else Color.from_hex(foreground),
            background=None if background is None else Color.from_hex(background),
            bold=bold,
            italic=italic,
            underline=underline,
            strikethrough=strikethrough,
        )
        self._faces[name] = face
        return face

    def define_faces(self, table: dict[str, dict[str, Any]]):
        """Define a whole table of faces. Each entry holds define_face keywords"""
        for name, style in table.items():
            self.define_face(name, **style)

    def face_exists(self, name: str) -> bool:
        return name in self._faces

    def get(self, name: str) -> Optional[Face]:
        return self._faces.get(name)

    def names(self) -> list[str]:
        return list(self._faces)

    def __iter__(self) -> Iterator[Face]:
        return iter(list(self._faces.values()))

    def __len__(self) -> int:
        return len(self._faces)

    def reset(self):
        """Forget every face. Only meant for test isolation"""
        self._faces.clear()


# fmt: off
STANDARD_FACES: dict[str, dict[str, Any]] = {
    "keyword":     {"foreground": "#569cd6", "bold": True},
    "type":        {"foreground": "#4ec9b0"},
    "function":    {"foreground": "#dcdcaa"},
    "variable":    {"foreground": "#9cdcfe"},
    "string":      {"foreground": "#ce9178"},
    "number":      {"foreground": "#b5cea8"},
    "comment":     {"foreground": "#6a9955", "italic": True},
    "operator":    {"foreground": "#d4d4d4"},
    "punctuation": {"foreground": "#808080"},
    "constant":    {"foreground": "#4fc1ff"},
    "error":       {"foreground": "#f44747", "underline": True},
    "warning":     {"foreground": "#cca700", "underline": True},
}
# fmt: on


FACES = FaceRegistry()


def define_face(name: str, **style) -> Face:
    return FACES.define_face(name, **style)


def face_exists(name: str) -> bool:
    return FACES.face_exists(name)


def define_standard_faces():
    """Define the generic faces shared by every mode"""
    FACES.define_faces(STANDARD_FACES)
    logger.debug("Defined %d standard faces", len(STANDARD_FACES))
