# weft/rules/grammar.py
from __future__ import annotations
from typing import Dict, Iterator, List, Optional

from .state import Cursor, Outcome
from .errors import GrammarFault
from .ops import Rule, RuleLike, _as_rule


class Grammar:
    """Named rules, with late-bound references for recursive definitions.

        g = Grammar()
        g["value"] = any_(number, g.ref("array"))
        g["array"] = between("[", list_(g.ref("value")), "]")
        g.parse("[1,[2]]")
    """

    def __init__(self, start: Optional[str] = None):
        self.rules: Dict[str, Rule] = {}
        self.start = start

    def __setitem__(self, name: str, rule: RuleLike) -> None:
        if name in self.rules:
            raise GrammarFault(f"rule '{name}' is already bound")
        self.rules[name] = _as_rule(rule).named(name)
        if self.start is None:
            self.start = name

    def __getitem__(self, name: str) -> Rule:
        return self.require_rule(name)

    def __contains__(self, name: object) -> bool:
        return name in self.rules

    def __iter__(self) -> Iterator[str]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def require_rule(self, name: str) -> Rule:
        try:
            return self.rules[name]
        except KeyError:
            raise GrammarFault(f"undefined rule '{name}'") from None

    def ref(self, name: str) -> Rule:
        """A rule that looks `name` up when first applied."""
        cell: List[Rule] = []

        def resolve(cur: Cursor) -> Outcome:
            if not cell:
                cell.append(self.require_rule(name))
            return cell[0].apply(cur)

        return Rule(resolve, name)

    def parse(self, text: str, start: Optional[str] = None, config=None):
        from .runtime import parse
        name = start or self.start
        if name is None:
            raise GrammarFault("grammar has no start rule")
        return parse(self.require_rule(name), text, config)

    def __repr__(self) -> str:
        return f"Grammar(start={self.start!r}, rules={list(self.rules)})"
