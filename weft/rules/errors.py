# weft/rules/errors.py
"""Exceptions raised by the engine and the helpers that format them.

Failed matches are ordinary `Failure` values; only the two conditions below
are raised:

- `ParseError`   : the top-level rule did not match (or left input behind
                   when the whole input was required).
- `GrammarFault` : a defect in the grammar itself, e.g. a `process` transform
                   that crashed or a reference to a rule that was never bound.
"""

from __future__ import annotations
from typing import Sequence, Tuple


def _line_bounds(src: str, pos: int) -> Tuple[int, int]:
    """[start, end) of the line containing pos."""
    start = src.rfind("\n", 0, pos)
    start = 0 if start < 0 else start + 1
    end = src.find("\n", pos)
    end = len(src) if end < 0 else end
    return start, end


def _caret_snippet(src: str, pos: int) -> str:
    """The line holding pos with a caret (^) under it."""
    start, end = _line_bounds(src, pos)
    line = src[start:end]
    caret = " " * (pos - start) + "^"
    return f"{line}\n{caret}"


class ParseError(SyntaxError):
    """Input did not match the grammar."""

    def __init__(self, source: str, pos: int, expected: Sequence[str] = (), reason: str = ""):
        expected = tuple(expected)
        start, _ = _line_bounds(source, pos)
        line = source.count("\n", 0, pos) + 1
        col = (pos - start) + 1
        where = "at EOF" if pos >= len(source) else f"at {line}:{col}"
        msg = f"Parse error {where}"
        if reason:
            msg += f": {reason}"
        if expected:
            msg += ": expected " + (
                expected[0] if len(expected) == 1
                else "one of {" + ", ".join(expected) + "}"
            )
        super().__init__(msg + "\n" + _caret_snippet(source, pos))
        # `text`/`lineno` are left alone so tracebacks don't echo the whole input
        self.source = source
        self.pos = pos
        self.expected = expected
        self.line = line
        self.col = col
        self.reason = reason


class NestingError(ParseError):
    """Grammar nesting exceeded the interpreter's recursion limit."""

    def __init__(self, source: str, pos: int):
        super().__init__(source, pos, reason="input nests too deeply")


class GrammarFault(RuntimeError):
    """A defect in grammar construction, never a mismatch of the input."""
