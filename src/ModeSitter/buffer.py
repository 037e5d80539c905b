from __future__ import annotations

from typing import NamedTuple, Optional, Protocol

from .actions import Action, IndentLineAction, InsertAction
from .utils import leading_whitespace, spaces


class Change(NamedTuple):
    """An edit that was applied to a buffer, in characters

    Args:
        start: Where the edit happened
        removed: How many characters were deleted at start
        added: How many characters were inserted at start
    """

    start: int
    removed: int
    added: int


class HostBuffer(Protocol):
    """What this package needs from the editor's text storage

    Offsets are 0-indexed characters and ranges are end-exclusive.
    """

    def content(self) -> str: ...

    def line(self, i: int) -> str: ...

    def lineCount(self) -> int: ...

    def charCount(self) -> int: ...

    def substring(self, start: int, stop: int) -> str: ...

    def insert(self, pos: int, text: str): ...

    def delete(self, start: int, stop: int): ...

    def majorModeName(self) -> Optional[str]: ...

    def setMajorModeName(self, name: Optional[str]): ...

    def showGutter(self) -> bool: ...

    def setShowGutter(self, show: bool): ...


class TextBuffer:
    """A plain in-memory HostBuffer"""

    def __init__(self, text: str = ""):
        self._text = text
        self._mode_name: Optional[str] = None
        self._show_gutter = True

    def content(self) -> str:
        return self._text

    def line(self, i: int) -> str:
        return self._text.split("\n")[i]

    def lineCount(self) -> int:
        return self._text.count("\n") + 1

    def charCount(self) -> int:
        return len(self._text)

    def substring(self, start: int, stop: int) -> str:
        return self._text[start:stop]

    def insert(self, pos: int, text: str) -> Change:
        self._text = self._text[:pos] + text + self._text[pos:]
        return Change(pos, 0, len(text))

    def delete(self, start: int, stop: int) -> Change:
        stop = min(stop, len(self._text))
        self._text = self._text[:start] + self._text[stop:]
        return Change(start, max(0, stop - start), 0)

    def majorModeName(self) -> Optional[str]:
        return self._mode_name

    def setMajorModeName(self, name: Optional[str]):
        self._mode_name = name

    def showGutter(self) -> bool:
        return self._show_gutter

    def setShowGutter(self, show: bool):
        self._show_gutter = show


def line_start(buffer: HostBuffer, line: int) -> int:
    """Get the char offset of the start of a 0-indexed line"""
    return sum(len(buffer.line(i)) + 1 for i in range(line))


def apply_action(buffer: HostBuffer, action: Action) -> list[Change]:
    """Apply an action to a buffer the way a host editor would

    Returns:
        The changes made, in the order they were made
    """
    if isinstance(action, InsertAction):
        buffer.insert(action.pos, action.text)
        return [Change(action.pos, 0, len(action.text))]

    if isinstance(action, IndentLineAction):
        start = line_start(buffer, action.line)
        current = leading_whitespace(buffer.line(action.line))
        wanted = spaces(action.column)
        if current == wanted:
            return []
        changes = []
        if current:
            buffer.delete(start, start + len(current))
            changes.append(Change(start, len(current), 0))
        if wanted:
            buffer.insert(start, wanted)
            changes.append(Change(start, 0, len(wanted)))
        return changes
    return []
