from __future__ import annotations

import logging

from ..modes import MajorMode
from . import julia, markdown, python, rust

logger = logging.getLogger(__name__)

LANGUAGES = (julia, rust, python, markdown)


def register_builtin_modes() -> list[MajorMode]:
    """Register every language shipped with the package

    Safe to call again, each mode simply replaces its previous definition.
    """
    modes = [lang.register() for lang in LANGUAGES]
    logger.debug("Registered %s", ", ".join(m.name for m in modes))
    return modes
