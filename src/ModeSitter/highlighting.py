from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from Qt.QtCore import QTimer, Slot
from Qt.QtGui import QColor, QFont, QSyntaxHighlighter, QTextCharFormat

from .faces import FACES, Face, FaceRegistry
from .text_index import TextIndex
from .utils import len16

if TYPE_CHECKING:
    from .qt_document import DocumentBuffer
    from .session import BufferSession


def face_format(face: Face) -> QTextCharFormat:
    """Convert a Face -> QTextCharFormat"""
    fmt = QTextCharFormat()
    if face.foreground is not None:
        fmt.setForeground(QColor(face.foreground.to_hex()))
    if face.background is not None:
        fmt.setBackground(QColor(face.background.to_hex()))
    if face.bold:
        fmt.setFontWeight(QFont.Bold)
    if face.italic:
        fmt.setFontItalic(True)
    if face.underline:
        fmt.setFontUnderline(True)
    if face.strikethrough:
        fmt.setFontStrikeOut(True)
    return fmt


class SpanHighlighter(QSyntaxHighlighter):
    """Draws a session's span store onto its DocumentBuffer

    The session does all the highlighting work. This only resolves the
    overlapping spans of each block into runs and applies their faces.
    """

    def __init__(
        self,
        document: DocumentBuffer,
        session: BufferSession,
        faces: Optional[FaceRegistry] = None,
    ):
        super().__init__(document)
        self.session = session
        self.faces = faces if faces is not None else FACES
        self.formats: dict[str, QTextCharFormat] = {}
        self._index: Optional[TextIndex] = None
        self._revision = -1
        document.bufferChanged.connect(self._on_buffer_changed)

    def _compile_formats(self):
        self.formats = {face.name: face_format(face) for face in self.faces}

    def format_for(self, face_name: str) -> Optional[QTextCharFormat]:
        fmt = self.formats.get(face_name)
        if fmt is None:
            face = self.faces.get(face_name)
            if face is None:
                return None
            fmt = self.formats[face_name] = face_format(face)
        return fmt

    def refresh(self):
        """Rebuild the formats from the face registry and redraw everything"""
        self._compile_formats()
        self.rehighlight()

    @Slot(object)
    def _on_buffer_changed(self, _change):
        # The session re-highlights the whole buffer on every change, so
        # blocks outside the edited one may need redrawing too
        QTimer.singleShot(0, self.rehighlight)

    def _text_index(self) -> TextIndex:
        doc = self.document()
        if self._index is None or self._revision != doc.revision():
            self._index = TextIndex(doc.toPlainText())
            self._revision = doc.revision()
        return self._index

    # ------------------------------------------------------------------
    # QSyntaxHighlighter entry point
    # ------------------------------------------------------------------

    def highlightBlock(self, text: str):
        block = self.currentBlock()
        if not block.isValid() or not text:
            return

        index = self._text_index()
        block_num = block.blockNumber()
        if block_num >= index.line_count:
            return
        block_start = index.line_start(block_num)

        for start, end, face_name in self.session.resolved_runs(block_start, block_start + len(text)):
            fmt = self.format_for(face_name)
            if fmt is None:
                continue
            # Convert to block-local and clamp to boundaries
            local_start = max(0, start - block_start)
            local_end = min(len(text), end - block_start)
            if local_end <= local_start:
                continue
            self.setFormat(len16(text[:local_start]), len16(text[local_start:local_end]), fmt)
