# weft/rules/state.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

# ---- Input state and outcomes ----

@dataclass(frozen=True)
class Cursor:
    """Immutable view over the source text plus an offset."""
    text: str
    pos: int = 0

    @property
    def rest(self) -> str:
        return self.text[self.pos:]

    @property
    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def advance(self, n: int) -> "Cursor":
        if n == 0:
            return self
        return Cursor(self.text, self.pos + n)

    def line_col(self) -> Tuple[int, int]:
        """1-based (line, column) of the cursor."""
        line = self.text.count("\n", 0, self.pos) + 1
        start = self.text.rfind("\n", 0, self.pos)
        return line, self.pos - start

    def __repr__(self) -> str:
        return f"Cursor(pos={self.pos}, rest={self.text[self.pos:self.pos + 16]!r})"


class _Skip:
    """Unit value of `ignore`; dropped by collecting operators."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SKIP"

    def __bool__(self) -> bool:
        return False


SKIP = _Skip()


@dataclass(frozen=True)
class Success:
    value: Any
    rest: Cursor
    # deepest failure seen while matching; feeds error reports only
    furthest: Optional["Failure"] = None

    ok = True


@dataclass(frozen=True)
class Failure:
    at: Cursor  # where matching stopped; never implies consumption
    expected: Tuple[str, ...] = ()
    # deepest failure behind this one; feeds error reports only
    furthest: Optional["Failure"] = None

    ok = False

    def merge(self, other: "Failure") -> "Failure":
        """Keep the furthest failure; merge expectations on a tie."""
        if other.at.pos > self.at.pos:
            return other
        if other.at.pos < self.at.pos:
            return self
        return Failure(self.at, _union(self.expected, other.expected))

    def report(self) -> "Failure":
        """The failure an error message should describe."""
        plain = Failure(self.at, self.expected)
        if self.furthest is None:
            return plain
        return plain.merge(self.furthest)


def _union(a: Tuple[str, ...], b: Tuple[str, ...]) -> Tuple[str, ...]:
    seen = list(a)
    for e in b:
        if e not in seen:
            seen.append(e)
    return tuple(seen)


Outcome = Union[Success, Failure]


def deepest(a: Optional[Failure], b: Optional[Failure]) -> Optional[Failure]:
    if a is None:
        return b
    if b is None:
        return a
    return a.merge(b)
