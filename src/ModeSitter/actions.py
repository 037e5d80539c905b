"""Edits and messages handed back to the host editor

This package never mutates a buffer. Commands return one of these and the
host applies it as a single atomic operation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class Action:
    def to_dict(self) -> dict[str, Any]:
        raise NotImplementedError("An Action must override the .to_dict() method")


@dataclass(frozen=True)
class NoAction(Action):
    def to_dict(self) -> dict[str, Any]:
        return {"type": "none"}


@dataclass(frozen=True)
class EchoAction(Action):
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "echo", "message": self.message}


@dataclass(frozen=True)
class InsertAction(Action):
    """Insert text at a 0-indexed char position"""

    pos: int
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "insert", "pos": self.pos, "text": self.text}


@dataclass(frozen=True)
class IndentLineAction(Action):
    """Set the leading whitespace of a 0-indexed line to column spaces"""

    line: int
    column: int

    def to_dict(self) -> dict[str, Any]:
        return {"type": "indent_line", "line": self.line, "column": self.column}
