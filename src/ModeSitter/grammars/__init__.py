from __future__ import annotations

import logging
from typing import TYPE_CHECKING, NamedTuple, Optional

from ..errors import AdapterUnavailable, ParseFailure
from ..spans import Span

if TYPE_CHECKING:
    from ..tree_manager import ParsedText

logger = logging.getLogger(__name__)


class HighlightResult(NamedTuple):
    spans: list[Span]
    tree: Optional[ParsedText] = None


EMPTY_RESULT = HighlightResult([])


class GrammarAdapter:
    """Turns a full buffer text into highlight spans for one language

    Adapters hold no per-buffer state. highlight() never raises: a text the
    backend cannot handle, or a backend that failed to load, produces no
    spans for that pass.
    """

    name: str = "grammar"

    def highlight(self, text: str) -> HighlightResult:
        try:
            return self._highlight(text)
        except AdapterUnavailable as e:
            # Already reported once when the backend failed to load
            logger.debug("%s: %s", self.name, e)
        except ParseFailure as e:
            logger.warning("%s: highlighting skipped: %s", self.name, e)
        return EMPTY_RESULT

    def is_available(self) -> bool:
        return True

    def _highlight(self, text: str) -> HighlightResult:
        raise NotImplementedError("A GrammarAdapter must override ._highlight()")
