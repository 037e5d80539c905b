"""Memoized capability checks for optional grammar backends

Grammar packages are imported lazily the first time a mode needs them. The
outcome is remembered for the lifetime of the process so a missing backend
is only reported once.
"""

from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass
from functools import cache
from typing import Any, Union

from pygments.lexers import get_lexer_by_name
from tree_sitter import Language

from ..errors import AdapterUnavailable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GrammarAvailable:
    name: str
    language: Any
    module: Any = None


@dataclass(frozen=True)
class GrammarUnavailable:
    name: str
    reason: str

    def error(self) -> AdapterUnavailable:
        return AdapterUnavailable(self.name, self.reason)


GrammarSupport = Union[GrammarAvailable, GrammarUnavailable]


@cache
def tree_sitter_language(module_name: str) -> GrammarSupport:
    """Load a tree-sitter grammar distribution, eg "tree_sitter_rust"

    Returns:
        GrammarAvailable holding a tree_sitter.Language and the imported
        module, or GrammarUnavailable
        with the reason the grammar could not be loaded
    """
    try:
        module = importlib.import_module(module_name)
        language = Language(module.language())
    except Exception as e:
        logger.warning("Tree-sitter grammar %s failed to load: %s", module_name, e)
        return GrammarUnavailable(module_name, str(e))
    logger.debug("Loaded tree-sitter grammar %s", module_name)
    return GrammarAvailable(module_name, language, module)


@cache
def pygments_lexer(alias: str) -> GrammarSupport:
    """Look up a Pygments lexer by alias, eg "julia"

    Returns:
        GrammarAvailable holding a lexer instance, or GrammarUnavailable
    """
    try:
        lexer = get_lexer_by_name(alias, stripnl=False, ensurenl=False)
    except Exception as e:
        logger.warning("Pygments lexer %s failed to load: %s", alias, e)
        return GrammarUnavailable(alias, str(e))
    logger.debug("Loaded pygments lexer %s", alias)
    return GrammarAvailable(alias, lexer)


def reset():
    """Forget every remembered capability check. Only meant for tests"""
    tree_sitter_language.cache_clear()
    pygments_lexer.cache_clear()
