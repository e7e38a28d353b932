# weft/lex/__init__.py
"""Pattern helpers for building leaf rules.

- `regexp(pattern, flags)` compiles with the `regex` module, so patterns may
  use Unicode properties such as `\\p{L}`; flags are letters (`imsxA`).
- `keyword(word)` matches a literal that must not run into an identifier
  character (`\\p{XID_Continue}`), e.g. `and` does not match in `android`.
- `lexeme(rule, skip)` matches `rule` and then skips trailing whitespace
  (or whatever `skip` matches), keeping only the value of `rule`.
"""

from __future__ import annotations
from typing import Pattern
import regex as re

from ..rules import Rule, Success, Failure, Outcome, Cursor
from ..rules.ops import RuleLike, _as_rule

_FLAG_MAP = {
    'i': re.IGNORECASE,
    'm': re.MULTILINE,
    's': re.DOTALL,
    'x': re.VERBOSE,
    'A': re.ASCII,
}

WHITESPACE = r"\s*"


def _compile_regex(pat: str, flags: str) -> Pattern[str]:
    f = 0
    for ch in flags:
        try:
            f |= _FLAG_MAP[ch]
        except KeyError:
            raise ValueError(f"unknown regex flag {ch!r} in {flags!r}") from None
    return re.compile(pat, f)


def regexp(pattern: str, flags: str = "") -> Pattern[str]:
    """Compile `pattern` for use with `token`."""
    return _compile_regex(pattern, flags)


def keyword(word: str, flags: str = "") -> Rule:
    """Literal `word` not followed by an identifier character."""
    pat = _compile_regex(re.escape(word) + r"(?!\p{XID_Continue})", flags)
    expected = (repr(word),)

    def match_keyword(cur: Cursor) -> Outcome:
        m = pat.match(cur.text, cur.pos)
        if m is None:
            return Failure(cur, expected)
        return Success(m.group(0), cur.advance(m.end() - cur.pos))

    return Rule(match_keyword, repr(word))


def lexeme(rule: RuleLike, skip: str = WHITESPACE) -> Rule:
    """`rule` followed by anything `skip` matches; keeps the value of `rule`."""
    inner = _as_rule(rule)
    trail = _compile_regex(skip, "")

    def trimmed(cur: Cursor) -> Outcome:
        out = inner.apply(cur)
        if not out.ok:
            return out
        rest = out.rest
        m = trail.match(rest.text, rest.pos)
        if m is not None:
            rest = rest.advance(m.end() - rest.pos)
        return Success(out.value, rest, out.furthest)

    return Rule(trimmed, inner.name)
