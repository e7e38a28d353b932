# weft/grammars/__init__.py
"""Bundled example grammars, by name (used by the `weftc` CLI)."""

from typing import Callable, Dict

from ..rules import Grammar
from . import css

GRAMMARS: Dict[str, Callable[[], Grammar]] = {
    "css": css.build_grammar,
}
