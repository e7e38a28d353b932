# weft/rules/ops.py
from __future__ import annotations
from typing import Any, Callable, List, Optional, Tuple, Union

from .state import Cursor, Success, Failure, Outcome, SKIP, deepest, _union
from .errors import GrammarFault

# Combinator engine:
# - A rule maps a Cursor to an Outcome (Success | Failure) and never raises
#   for a mismatch. Failures are plain values.
# - A failed rule consumes nothing: callers keep their own cursor and simply
#   retry from it.
# - Alternation, sequencing and repetition are loops, so the Python stack
#   only grows with grammar nesting.


class Rule:
    """A parsing function plus an optional name for diagnostics."""
    __slots__ = ("fn", "name")

    def __init__(self, fn: Callable[[Cursor], Outcome], name: Optional[str] = None):
        self.fn = fn
        self.name = name

    def apply(self, cur: Cursor) -> Outcome:
        return self.fn(cur)

    def __call__(self, text: str, config=None):
        """Top-level invocation: (value, remaining text) or ParseError."""
        from .runtime import parse
        return parse(self, text, config)

    def named(self, name: str) -> "Rule":
        return Rule(self.fn, name)

    def __repr__(self) -> str:
        return f"<Rule {self.name or self.fn.__name__}>"


RuleLike = Union[Rule, str, Any]


def _is_pattern(obj: Any) -> bool:
    # regex.Pattern and re.Pattern both qualify
    return hasattr(obj, "match") and hasattr(obj, "pattern")


def _as_rule(obj: RuleLike) -> Rule:
    if isinstance(obj, Rule):
        return obj
    if isinstance(obj, str) or _is_pattern(obj):
        return token(obj)
    raise TypeError(f"expected a Rule, a literal or a compiled pattern, got {obj!r}")


def _collect(values: List[Any], value: Any) -> None:
    if value is not SKIP:
        values.append(value)


def _stopped(out: Failure, furthest: Optional[Failure]) -> Failure:
    """`out` unchanged, carrying the deepest failure seen before it."""
    return Failure(out.at, out.expected, deepest(furthest, out.report()))


# ---- Leaf ----

def token(pattern: Union[str, Any]) -> Rule:
    """Match a literal string or compiled pattern anchored at the cursor."""
    if isinstance(pattern, str):
        lit = pattern
        expected = (repr(lit),)

        def match_literal(cur: Cursor) -> Outcome:
            if cur.text.startswith(lit, cur.pos):
                return Success(lit, cur.advance(len(lit)))
            return Failure(cur, expected)

        return Rule(match_literal, repr(lit))

    if not _is_pattern(pattern):
        raise TypeError(f"token() takes a str or a compiled pattern, got {pattern!r}")
    desc = f"/{pattern.pattern}/"
    pat_expected = (desc,)

    def match_pattern(cur: Cursor) -> Outcome:
        m = pattern.match(cur.text, cur.pos)
        if m is None:
            return Failure(cur, pat_expected)
        return Success(m.group(0), cur.advance(m.end() - cur.pos))

    return Rule(match_pattern, desc)


def end() -> Rule:
    """Succeed only at end of input."""
    def match_end(cur: Cursor) -> Outcome:
        if cur.at_end:
            return Success(SKIP, cur)
        return Failure(cur, ("end of input",))
    return Rule(match_end, "end")


# ---- Choice / sequence ----

def any_(*rules: RuleLike) -> Rule:
    """Ordered choice: the first alternative that matches wins."""
    if not rules:
        raise GrammarFault("any_() needs at least one alternative")
    alts = [_as_rule(r) for r in rules]

    def choice(cur: Cursor) -> Outcome:
        expected: Tuple[str, ...] = ()
        furthest: Optional[Failure] = None
        for alt in alts:
            out = alt.apply(cur)
            if out.ok:
                if furthest is None:
                    return out
                return Success(out.value, out.rest, deepest(furthest, out.furthest))
            expected = _union(expected, out.expected)
            furthest = deepest(furthest, out.report())
        return Failure(cur, expected, furthest)

    return Rule(choice, "any")


def each(*rules: RuleLike) -> Rule:
    """All rules in order; the value is the list of their values."""
    if not rules:
        raise GrammarFault("each() needs at least one rule")
    items = [_as_rule(r) for r in rules]

    def sequence(cur: Cursor) -> Outcome:
        values: List[Any] = []
        furthest: Optional[Failure] = None
        for item in items:
            out = item.apply(cur)
            if not out.ok:
                return _stopped(out, furthest)
            _collect(values, out.value)
            furthest = deepest(furthest, out.furthest)
            cur = out.rest
        return Success(values, cur, furthest)

    return Rule(sequence, "each")


# ---- Repetition ----

def many(rule: RuleLike) -> Rule:
    """Zero or more, greedy. Never fails."""
    inner = _as_rule(rule)

    def repeat(cur: Cursor) -> Outcome:
        values: List[Any] = []
        furthest: Optional[Failure] = None
        while True:
            out = inner.apply(cur)
            if not out.ok:
                return Success(values, cur, deepest(furthest, out.report()))
            # a round that consumes nothing would repeat forever
            if out.rest.pos == cur.pos:
                return Success(values, cur, furthest)
            _collect(values, out.value)
            furthest = deepest(furthest, out.furthest)
            cur = out.rest

    return Rule(repeat, "many")


def list_(rule: RuleLike, delimiter: RuleLike = ",", trailing: bool = False) -> Rule:
    """`rule (delimiter rule)*`, optionally followed by one more delimiter.

    The value holds only the rule values. A dangling delimiter is consumed
    when `trailing` is set and left in the input otherwise.
    """
    item = _as_rule(rule)
    delim = _as_rule(delimiter)

    def delimited(cur: Cursor) -> Outcome:
        first = item.apply(cur)
        if not first.ok:
            return first
        values: List[Any] = []
        _collect(values, first.value)
        furthest = first.furthest
        cur = first.rest
        while True:
            sep = delim.apply(cur)
            if not sep.ok:
                furthest = deepest(furthest, sep.report())
                break
            out = item.apply(sep.rest)
            if not out.ok:
                furthest = deepest(furthest, out.report())
                if trailing:
                    cur = sep.rest
                break
            if out.rest.pos == cur.pos:
                break
            _collect(values, out.value)
            furthest = deepest(furthest, out.furthest)
            cur = out.rest
        return Success(values, cur, furthest)

    return Rule(delimited, "list")


def optional(rule: RuleLike, default: Any = None) -> Rule:
    """`rule` or nothing; yields `default` without consuming on failure."""
    inner = _as_rule(rule)

    def maybe(cur: Cursor) -> Outcome:
        out = inner.apply(cur)
        if out.ok:
            return out
        return Success(default, cur, out.report())

    return Rule(maybe, "optional")


# ---- Shaping ----

def between(left: RuleLike, rule: RuleLike, right: RuleLike) -> Rule:
    """`left rule right`, keeping only the value of `rule`."""
    lhs, mid, rhs = _as_rule(left), _as_rule(rule), _as_rule(right)

    def enclosed(cur: Cursor) -> Outcome:
        opened = lhs.apply(cur)
        if not opened.ok:
            return opened
        body = mid.apply(opened.rest)
        if not body.ok:
            return _stopped(body, opened.furthest)
        furthest = deepest(opened.furthest, body.furthest)
        closed = rhs.apply(body.rest)
        if not closed.ok:
            return _stopped(closed, furthest)
        return Success(body.value, closed.rest, deepest(furthest, closed.furthest))

    return Rule(enclosed, "between")


def pair(rule1: RuleLike, rule2: RuleLike, delimiter: RuleLike = ",") -> Rule:
    """`rule1 delimiter rule2` as `[value1, value2]`."""
    first, delim, second = _as_rule(rule1), _as_rule(delimiter), _as_rule(rule2)

    def paired(cur: Cursor) -> Outcome:
        a = first.apply(cur)
        if not a.ok:
            return a
        sep = delim.apply(a.rest)
        if not sep.ok:
            return _stopped(sep, a.furthest)
        furthest = deepest(a.furthest, sep.furthest)
        b = second.apply(sep.rest)
        if not b.ok:
            return _stopped(b, furthest)
        return Success([a.value, b.value], b.rest, deepest(furthest, b.furthest))

    return Rule(paired, "pair")


def process(rule: RuleLike, transform: Callable[[Any], Any]) -> Rule:
    """Pass the value of `rule` through `transform`.

    An exception escaping `transform` is a bug in the grammar, not a
    mismatch, so it surfaces as GrammarFault and no alternative is tried.
    """
    inner = _as_rule(rule)
    tname = getattr(transform, "__name__", repr(transform))

    def transformed(cur: Cursor) -> Outcome:
        out = inner.apply(cur)
        if not out.ok:
            return out
        try:
            value = transform(out.value)
        except (GrammarFault, RecursionError):
            raise
        except Exception as e:
            line, col = cur.line_col()
            raise GrammarFault(
                f"transform {tname} failed on {inner!r} at {line}:{col}: "
                f"{type(e).__name__}: {e}"
            ) from e
        return Success(value, out.rest, out.furthest)

    return Rule(transformed, inner.name)


def ignore(rule: RuleLike) -> Rule:
    """Match `rule` for its consumption only; the value is SKIP."""
    inner = _as_rule(rule)

    def skipped(cur: Cursor) -> Outcome:
        out = inner.apply(cur)
        if not out.ok:
            return out
        return Success(SKIP, out.rest, out.furthest)

    return Rule(skipped, "ignore")


# ---- Indirection ----

def lazy(thunk: Callable[[], RuleLike], name: Optional[str] = None) -> Rule:
    """A rule whose body is built by `thunk` on first use.

    Lets a rule refer to itself, or to a partner defined later:

        value = lazy(lambda: any_(number, between("[", list_(value), "]")))
    """
    cell: List[Rule] = []

    def deferred(cur: Cursor) -> Outcome:
        if not cell:
            cell.append(_as_rule(thunk()))
        return cell[0].apply(cur)

    return Rule(deferred, name or "lazy")
