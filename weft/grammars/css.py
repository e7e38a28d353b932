# weft/grammars/css.py
"""Example grammar: a small CSS subset.

Handles rule sets with grouped selectors, block comments and nested
`@media` blocks, and reshapes the parse tree into nested dicts:

    parse_css("a, b { color: red; }")
    # {"a": {"color": "red"}, "b": {"color": "red"}}

Only the public operators are used; the translator functions below are
ordinary `process` transforms.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional

from ..rules import (
    Grammar, ParseConfig, any_, each, many, list_, between, pair,
    process, ignore, optional, end,
)
from ..lex import regexp, lexeme

Block = Dict[str, Any]

# ---- Translators (parse tree -> dicts) ----

def declarations_to_map(pairs: List[List[str]]) -> Dict[str, str]:
    """[[prop, value], ...] -> {prop: value}; later duplicates win."""
    return {prop: value for prop, value in pairs}


def ruleset_to_map(parts: List[Any]) -> Block:
    selectors, decls = parts
    return {sel: dict(decls) for sel in selectors}


def media_to_map(parts: List[Any]) -> Block:
    query, body = parts
    return {f"@media {query}": body}


def merge_blocks(blocks: List[Block]) -> Block:
    merged: Block = {}
    for block in blocks:
        for key, decls in block.items():
            merged.setdefault(key, {}).update(decls)
    return merged


def _first(parts: List[Any]) -> Any:
    return parts[0]


# ---- Grammar ----

# whitespace and block comments may sit between any two tokens
GAP = r"(?s:\s|/\*.*?\*/)*"


def _lex(rule):
    return lexeme(rule, skip=GAP)


def build_grammar() -> Grammar:
    g = Grammar(start="stylesheet")

    g["gap"] = ignore(regexp(GAP))
    g["selector"] = process(_lex(regexp(r"[^{},;@/\s](?:[^{},;/]|/(?!\*))*")), str.strip)
    g["selectors"] = list_(g["selector"], _lex(","))

    g["property"] = _lex(regexp(r"-?[A-Za-z_][A-Za-z0-9_-]*"))
    g["value"] = process(_lex(regexp(r"(?:[^;{}/]|/(?!\*))+")), str.strip)
    g["declaration"] = pair(g["property"], g["value"], _lex(":"))
    g["block"] = process(
        between(
            _lex("{"),
            optional(list_(g["declaration"], _lex(";"), trailing=True), default=()),
            _lex("}"),
        ),
        declarations_to_map,
    )
    g["ruleset"] = process(each(g["selectors"], g["block"]), ruleset_to_map)

    # @media nests a whole item list, hence the late-bound reference
    g["media"] = process(
        each(
            ignore(_lex(regexp(r"@media\b", "i"))),
            process(_lex(regexp(r"(?:[^{/]|/(?!\*))+")), str.strip),
            between(_lex("{"), g.ref("items"), _lex("}")),
        ),
        media_to_map,
    )
    g["items"] = process(many(any_(g["media"], g["ruleset"])), merge_blocks)
    g["stylesheet"] = process(each(g["gap"], g["items"], end()), _first)
    return g


GRAMMAR = build_grammar()


def parse_css(text: str, config: Optional[ParseConfig] = None) -> Block:
    value, _rest = GRAMMAR.parse(text, config=config)
    return value
