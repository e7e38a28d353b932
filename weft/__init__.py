# weft/__init__.py
"""weft – parser combinators for hand-built LL(k) grammars.

Rules are plain values built from other rules; a grammar is just a graph
of them, so there is no generator step:

    from weft import token, each, many, list_, between, process, regexp

    number = process(token(regexp(r"[0-9]+")), int)
    numbers = between("[", list_(number), "]")
    numbers("[1,2,3]")   # ([1, 2, 3], "")
"""

from .rules import (
    Cursor, Success, Failure, Outcome, SKIP,
    ParseError, NestingError, GrammarFault,
    Rule, token, end, any_, each, many, list_, optional,
    between, pair, process, ignore, lazy,
    Grammar, ParseConfig, parse,
)
from .lex import regexp, keyword, lexeme

__version__ = "0.1.0"
