# weft/rules/__init__.py
"""The combinator engine.

This package provides:
- the input state (`Cursor`) and outcome values (`Success`, `Failure`)
- the rule operators (token, any_, each, many, list_, between, pair,
  process, ignore, optional, lazy, end)
- a `Grammar` registry for recursive, named rules
- the top-level `parse` runtime and its `ParseConfig`
"""

from .state import Cursor, Success, Failure, Outcome, SKIP
from .errors import ParseError, NestingError, GrammarFault
from .ops import (
    Rule, token, end, any_, each, many, list_, optional,
    between, pair, process, ignore, lazy,
)
from .grammar import Grammar
from .runtime import ParseConfig, parse
