# weft/rules/runtime.py
"""Top-level invocation of a rule over a whole string.

- Applies the start rule at offset 0 and turns a `Failure` into a
  `ParseError` carrying position, expected set and a caret snippet.
- `ParseConfig` adds the knobs a caller needs around the pure rule contract:
  whole-input matching, an input length cap and `[DEBUG]` output on stderr.
"""

from __future__ import annotations
import sys
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from .state import Cursor, Failure, SKIP, deepest
from .errors import ParseError, NestingError
from .ops import Rule


@dataclass(frozen=True)
class ParseConfig:
    complete: bool = False              # the whole input must be consumed
    max_length: Optional[int] = None    # reject longer inputs up front
    debug: bool = False                 # [DEBUG] lines on stderr

    def __post_init__(self):
        if self.max_length is not None and self.max_length < 0:
            raise ValueError(f"max_length must be >= 0, got {self.max_length}")


DEFAULT_CONFIG = ParseConfig()


def _eprint(*args, **kw) -> None:
    print(*args, file=sys.stderr, **kw)


def _unskip(value: Any) -> Any:
    """SKIP reads as None, at any depth of nested lists."""
    if value is SKIP:
        return None
    if isinstance(value, list):
        return [_unskip(v) for v in value]
    return value


def parse(rule: Rule, text: str, config: Optional[ParseConfig] = None) -> Tuple[Any, str]:
    """Apply `rule` to `text`.

    Returns
    -------
    (value, remaining)
        The matched value (ignored matches read as `None`, nested ones
        included) and the unconsumed rest of `text`.

    Raises
    ------
    ParseError
        The rule did not match, or input remained with `config.complete`.
    GrammarFault
        A transform crashed or a reference was never bound.
    """
    cfg = config or DEFAULT_CONFIG
    debug = cfg.debug
    if cfg.max_length is not None and len(text) > cfg.max_length:
        raise ParseError(text, cfg.max_length,
                         reason=f"input longer than {cfg.max_length} characters")

    if debug: _eprint(f"[DEBUG] parse | rule={rule.name or '?'} length={len(text)}")
    start = Cursor(text)
    try:
        out = rule.apply(start)
    except RecursionError:
        raise NestingError(text, 0) from None

    if not out.ok:
        report = out.report()
        if debug: _eprint(f"[DEBUG] failed | pos={report.at.pos} expected={list(report.expected)}")
        raise ParseError(text, report.at.pos, report.expected)

    rest = out.rest
    if debug: _eprint(f"[DEBUG] matched | consumed={rest.pos} remaining={len(text) - rest.pos}")
    if cfg.complete and not rest.at_end:
        leftover = deepest(Failure(rest, ("end of input",)), out.furthest)
        raise ParseError(text, leftover.at.pos, leftover.expected)

    return _unskip(out.value), rest.rest
