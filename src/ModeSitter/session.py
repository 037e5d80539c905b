from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Optional

from .actions import Action, InsertAction, NoAction
from .buffer import Change, HostBuffer
from .commands import COMMANDS, CommandContext
from .editor_options import EditorOptions, OptionsListener
from .errors import UnknownMode
from .modes import MODES, MajorMode, ModeRegistry
from .spans import OverlapPolicy, SpanStore
from .tree_manager import ParsedText

logger = logging.getLogger(__name__)


class BufferState(Enum):
    UNBOUND = "unbound"
    INITIALIZED = "initialized"
    STALE = "stale"


class BufferSession(OptionsListener):
    """One host buffer bound to its span store and major mode

    The mode is resolved once in open() and only changes through reopen().
    Every change runs a full, synchronous re-highlight.
    """

    def __init__(
        self,
        buffer: HostBuffer,
        options: Optional[EditorOptions] = None,
        registry: Optional[ModeRegistry] = None,
    ):
        self.buffer = buffer
        self.registry = registry if registry is not None else MODES
        self.store = SpanStore()
        self.state = BufferState.UNBOUND
        self.mode: Optional[MajorMode] = None
        self.tree: Optional[ParsedText] = None

        self._overlap_policy = OverlapPolicy.LAST_WINS
        # None falls back to the registry default
        self.default_mode: Optional[str] = None
        self.indent_widths: dict[str, int] = {}

        super().__init__(options if options is not None else EditorOptions())
        self.setListen({"default_mode", "overlap_policy", "indent_widths"})
        self.updateAll()

    @property
    def overlap_policy(self) -> OverlapPolicy:
        return self._overlap_policy

    @overlap_policy.setter
    def overlap_policy(self, value: Any):
        self._overlap_policy = OverlapPolicy(value)

    @property
    def mode_name(self) -> Optional[str]:
        return None if self.mode is None else self.mode.name

    def open(self, path: str, mode_name: Optional[str] = None) -> str:
        """Bind the buffer to a mode and run its activation

        Args:
            path: The file path the mode is resolved from
            mode_name: Use this mode instead of resolving one

        Returns:
            The name of the bound mode
        """
        if self.mode is not None:
            return self.mode.name

        name = mode_name or self.registry.resolve(path, self.default_mode)
        try:
            mode = self.registry.get(name)
        except UnknownMode as e:
            logger.warning("%s, using %s", e, self.registry.default_mode)
            mode = self.registry.get(self.registry.default_mode)

        self.mode = mode
        self.buffer.setMajorModeName(mode.name)
        self.state = BufferState.INITIALIZED
        self.registry.on_buffer_activated(mode.name, self)
        logger.debug("Opened %s in %s", path, mode.name)
        return mode.name

    def reopen(self, path: str, mode_name: Optional[str] = None) -> str:
        self.mode = None
        self.tree = None
        self.store.clear()
        self.state = BufferState.UNBOUND
        self.buffer.setMajorModeName(None)
        return self.open(path, mode_name)

    def notify_changed(self, change: Change):
        """Tell the session the buffer was edited"""
        if self.mode is None:
            return
        self.state = BufferState.STALE
        if change.removed:
            self.store.adjust_for_delete(change.start, change.start + change.removed)
        if change.added:
            self.store.adjust_for_insert(change.start, change.added)
        self.registry.on_buffer_changed(self.mode.name, self, change)
        self.state = BufferState.INITIALIZED

    def rehighlight(self) -> int:
        """Replace every stored span with a fresh pass over the whole text

        Returns:
            The number of spans stored
        """
        self.store.clear()
        self.tree = None
        if self.mode is None or self.mode.adapter is None:
            return 0
        result = self.mode.adapter.highlight(self.buffer.content())
        self.tree = result.tree
        return self.store.add_spans(result.spans)

    def indent_width(self) -> Optional[int]:
        if self.mode is None or self.mode.indenter is None:
            return None
        return self.indent_widths.get(self.mode.name, self.mode.indenter.indent_width)

    def indent_line(self, line: int) -> Action:
        """Get the action that re-indents a 1-based line"""
        if self.mode is None or self.mode.indenter is None:
            return NoAction()
        return self.mode.indenter.indent_line(self.buffer.content(), line, self.indent_width())

    def newline_and_indent(self, cursor: int) -> InsertAction:
        if self.mode is None or self.mode.indenter is None:
            return InsertAction(cursor, "\n")
        return self.mode.indenter.newline_and_indent(
            self.buffer.content(), cursor, self.indent_width()
        )

    def run_command(self, name: str, cursor: int = 0) -> Action:
        line = self.buffer.substring(0, cursor).count("\n") + 1
        return COMMANDS.run(name, CommandContext(self, cursor, line))

    def face_at(self, pos: int) -> Optional[str]:
        return self.store.face_at(pos, self.overlap_policy)

    def resolved_runs(self, start: int, end: int) -> list[tuple[int, int, str]]:
        return self.store.resolved_runs(start, end, self.overlap_policy)
