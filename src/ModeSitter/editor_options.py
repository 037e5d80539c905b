from __future__ import annotations

import copy
from typing import Any, Collection, Optional

from Qt.QtCore import QObject, Signal

from .spans import OverlapPolicy

DEFAULT_OPTIONS: dict[str, Any] = {
    "default_mode": None,  # mode for unclaimed extensions, None uses the registry default
    "overlap_policy": OverlapPolicy.LAST_WINS,
    "indent_widths": {},  # mode name -> spaces per level
}


class EditorOptions(QObject):
    optionsUpdated = Signal(list)  # list of str

    def __init__(self, opts: Optional[dict[str, Any]] = None):
        super().__init__()
        self._options: dict[str, Any] = copy.deepcopy(DEFAULT_OPTIONS)
        if opts is not None:
            self._options.update(opts)

    def __getitem__(self, key: str):
        return self._options[key]

    def __setitem__(self, key: str, value):
        self._options[key] = value
        self.optionsUpdated.emit([key])

    def __contains__(self, key: str) -> bool:
        return key in self._options

    def update(self, opts: dict[str, Any]):
        self._options.update(opts)
        self.optionsUpdated.emit(list(opts.keys()))

    def get(self, key, default=None) -> Any:
        return self._options.get(key, default)

    def keys(self):
        return self._options.keys()


class OptionsListener:
    """Mirrors the options it listens to onto attributes of the same name

    Subclasses declare the keys they care about with setListen, and can turn
    those attributes into properties to react to a change.
    """

    def __init__(self, options: EditorOptions):
        self.options = options
        self.listen: set[str] = set()
        self.options.optionsUpdated.connect(self.updateOptions)

    def setListen(self, listen: set[str]):
        self.listen = listen

    def updateAll(self):
        self.updateOptions(self.listen)

    def updateOptions(self, keys: Collection[str]):
        carekeys = set(keys) & self.listen
        for key in carekeys:
            setattr(self, key, self.options[key])

    def remove(self):
        self.options.optionsUpdated.disconnect(self.updateOptions)
