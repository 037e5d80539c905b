from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Iterable, Optional

from .constants import FUNDAMENTAL_MODE
from .errors import HookFailure, UnknownMode

if TYPE_CHECKING:
    from .buffer import Change
    from .grammars import GrammarAdapter
    from .indentation import Indenter
    from .session import BufferSession

logger = logging.getLogger(__name__)

InitHook = Callable[["BufferSession"], Any]
ChangeHook = Callable[["BufferSession", "Change"], Any]


@dataclass(frozen=True)
class ModeProperties:
    show_gutter: bool = True
    indent_command: Optional[str] = None
    newline_command: Optional[str] = None
    highlight_command: Optional[str] = None


@dataclass(frozen=True)
class MajorMode:
    name: str
    extensions: tuple[str, ...] = ()
    init: Optional[InitHook] = None
    after_change: Optional[ChangeHook] = None
    properties: ModeProperties = field(default_factory=ModeProperties)
    adapter: Optional[GrammarAdapter] = None
    indenter: Optional[Indenter] = None


def normalize_extension(ext: str) -> str:
    ext = ext.strip().lower()
    if not ext.startswith("."):
        ext = "." + ext
    return ext


class ModeRegistry:
    """Process-wide major modes and the extension index that picks them

    Registering a name again replaces the previous definition, and any
    extension only the previous definition claimed is unbound.
    """

    def __init__(self):
        self._modes: dict[str, MajorMode] = {}
        self._extensions: dict[str, str] = {}
        self._default_mode = FUNDAMENTAL_MODE
        self._register_fundamental()

    def _register_fundamental(self):
        self.register(FUNDAMENTAL_MODE)

    def register(
        self,
        name: str,
        extensions: Iterable[str] = (),
        init: Optional[InitHook] = None,
        after_change: Optional[ChangeHook] = None,
        properties: Optional[ModeProperties] = None,
        adapter: Optional[GrammarAdapter] = None,
        indenter: Optional[Indenter] = None,
    ) -> MajorMode:
        exts = tuple(dict.fromkeys(normalize_extension(e) for e in extensions))
        mode = MajorMode(
            name=name,
            extensions=exts,
            init=init,
            after_change=after_change,
            properties=properties or ModeProperties(),
            adapter=adapter,
            indenter=indenter,
        )

        previous = self._modes.get(name)
        if previous is not None:
            for ext in previous.extensions:
                if self._extensions.get(ext) == name:
                    del self._extensions[ext]

        self._modes[name] = mode
        for ext in exts:
            owner = self._extensions.get(ext)
            if owner is not None and owner != name:
                logger.info("Extension %s moves from %s to %s", ext, owner, name)
            self._extensions[ext] = name
        logger.debug("Registered %s for %s", name, ", ".join(exts) or "no extensions")
        return mode

    def resolve(self, path: str, default: Optional[str] = None) -> str:
        """Get the mode name for a file path

        Args:
            path: The file path, only its extension is used
            default: The mode for an unclaimed extension instead of the
                registry default
        """
        ext = os.path.splitext(path)[1].lower()
        return self._extensions.get(ext, default or self._default_mode)

    def get(self, name: str) -> MajorMode:
        """
        Raises:
            UnknownMode: If nothing was registered under this name
        """
        try:
            return self._modes[name]
        except KeyError:
            raise UnknownMode(name) from None

    def has_mode(self, name: str) -> bool:
        return name in self._modes

    def list_modes(self) -> list[str]:
        return sorted(self._modes)

    def mode_extensions(self, name: str) -> tuple[str, ...]:
        return self.get(name).extensions

    @property
    def default_mode(self) -> str:
        return self._default_mode

    def set_default_mode(self, name: str):
        """
        Raises:
            UnknownMode: If nothing was registered under this name
        """
        self.get(name)
        self._default_mode = name

    def on_buffer_activated(self, name: str, session: BufferSession) -> bool:
        """Apply the mode's properties, run its init hook and highlight

        Returns:
            False if the init hook failed
        """
        mode = self.get(name)
        session.buffer.setShowGutter(mode.properties.show_gutter)
        ok = True
        if mode.init is not None:
            ok = self._run_hook(mode, "init", mode.init, session)
        session.rehighlight()
        return ok

    def on_buffer_changed(self, name: str, session: BufferSession, change: Change) -> bool:
        """Run the mode's after-change hook, then always do a full re-highlight

        Returns:
            False if the after-change hook failed
        """
        mode = self.get(name)
        ok = True
        if mode.after_change is not None:
            ok = self._run_hook(mode, "after-change", mode.after_change, session, change)
        session.rehighlight()
        return ok

    def _run_hook(self, mode: MajorMode, hook: str, func: Callable, *args) -> bool:
        try:
            func(*args)
        except Exception as e:
            logger.exception("%s", HookFailure(mode.name, hook, e))
            return False
        return True

    def reset(self):
        """Forget every mode except fundamental-mode. Only meant for tests"""
        self._modes.clear()
        self._extensions.clear()
        self._default_mode = FUNDAMENTAL_MODE
        self._register_fundamental()


MODES = ModeRegistry()


def register_mode(
    name: str,
    extensions: Iterable[str] = (),
    init: Optional[InitHook] = None,
    after_change: Optional[ChangeHook] = None,
    properties: Optional[ModeProperties] = None,
    **kwargs,
) -> MajorMode:
    return MODES.register(name, extensions, init, after_change, properties, **kwargs)
