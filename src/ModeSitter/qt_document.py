from __future__ import annotations

from typing import Optional, TYPE_CHECKING

from Qt.QtCore import Signal, Slot
from Qt.QtGui import QTextCursor, QTextDocument
from Qt.QtWidgets import QPlainTextDocumentLayout

from .buffer import Change
from .utils import len16, utf16_to_char

if TYPE_CHECKING:
    from .session import BufferSession


class DocumentBuffer(QTextDocument):
    """A QTextDocument that works as a HostBuffer

    Qt positions are UTF-16 code units while a HostBuffer speaks in code
    points. Every content change is converted and re-emitted as a Change on
    the `bufferChanged` signal.
    """

    bufferChanged = Signal(object)  # Change

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.lay = QPlainTextDocumentLayout(self)
        self.setDocumentLayout(self.lay)
        self._prev_text = self.toPlainText()
        self._mode_name: Optional[str] = None
        self._show_gutter = True
        self.contentsChange.connect(self._on_contents_change)

    def attach(self, session: BufferSession):
        """Feed every change of this document to a session"""
        self.bufferChanged.connect(session.notify_changed)

    def content(self) -> str:
        return self.toPlainText()

    def line(self, i: int) -> str:
        return self.findBlockByNumber(i).text()

    def lineCount(self) -> int:
        return self.blockCount()

    def charCount(self) -> int:
        return len(self.toPlainText())

    def substring(self, start: int, stop: int) -> str:
        return self.toPlainText()[start:stop]

    def char_to_position(self, pos: int) -> int:
        """Convert a code point offset to a Qt position"""
        return len16(self.toPlainText()[:pos])

    def insert(self, pos: int, text: str):
        cursor = QTextCursor(self)
        cursor.setPosition(self.char_to_position(pos))
        cursor.insertText(text)

    def delete(self, start: int, stop: int):
        cursor = QTextCursor(self)
        cursor.setPosition(self.char_to_position(start))
        cursor.setPosition(self.char_to_position(stop), QTextCursor.MoveMode.KeepAnchor)
        cursor.removeSelectedText()

    def majorModeName(self) -> Optional[str]:
        return self._mode_name

    def setMajorModeName(self, name: Optional[str]):
        self._mode_name = name

    def showGutter(self) -> bool:
        return self._show_gutter

    def setShowGutter(self, show: bool):
        self._show_gutter = show

    @Slot(int, int, int)
    def _on_contents_change(self, position: int, chars_removed: int, chars_added: int):
        """Convert a Qt content change to code points and re-emit it

        Args:
            position: UTF-16 code unit position where change occurred
            chars_removed: Number of UTF-16 code units removed
            chars_added: Number of UTF-16 code units added
        """
        prev = self._prev_text
        new = self.toPlainText()
        if prev == new:
            return
        self._prev_text = new

        start = utf16_to_char(prev, position)
        removed = utf16_to_char(prev, chars_removed, start) - start
        added = utf16_to_char(new, chars_added, start) - start
        if len(prev) - removed + added != len(new):
            # Qt counts the final paragraph separator in some changes, so
            # the counts don't line up. Report it as a full replace
            self.bufferChanged.emit(Change(0, len(prev), len(new)))
            return
        self.bufferChanged.emit(Change(start, removed, added))
