# weft/weftc.py
"""weftc – weft CLI

Examples
    $ python -m weft.weftc parse --grammar css --text "a { color: red; }"
    $ python -m weft.weftc parse --grammar css --input site.css --complete -D
    $ python -m weft.weftc rules --grammar css

Commands
--------
- parse : run a bundled grammar over text and print the value as JSON
- rules : list the named rules of a bundled grammar

With -D/--debug, progress and parse summaries go to stderr.
"""

from __future__ import annotations
import argparse
import json
import sys
from typing import Optional

# ------------------------------
# helpers
# ------------------------------

def _eprint(*args, **kw) -> None:
    print(*args, file=sys.stderr, **kw)


def _load_grammar(name: str, debug: bool):
    from .grammars import GRAMMARS
    g = GRAMMARS[name]()
    if debug: _eprint("[DEBUG] grammar ready | name=%s rules=%d start=%s" %
                      (name, len(g), g.start))
    return g


def _read_text(args) -> str:
    if args.text is not None:
        return args.text
    with open(args.input, "r", encoding="utf-8") as f:
        return f.read()

# ------------------------------
# commands
# ------------------------------

def cmd_parse(args) -> int:
    from .rules import ParseConfig, ParseError, GrammarFault

    try:
        config = ParseConfig(complete=args.complete, max_length=args.max_length, debug=args.debug)
        g = _load_grammar(args.grammar, args.debug)
        text = _read_text(args)
        value, rest = g.parse(text, start=args.start, config=config)
    except ParseError as e:
        _eprint("[PARSE ERROR]")
        _eprint(str(e))
        return 2
    except GrammarFault as e:
        _eprint("[GRAMMAR FAULT]", str(e))
        return 3
    except (OSError, ValueError) as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2

    if args.debug and rest:
        _eprint(f"[DEBUG] unconsumed tail | {rest[:40]!r}")
    print(json.dumps(value, indent=2, ensure_ascii=False))
    return 0


def cmd_rules(args) -> int:
    g = _load_grammar(args.grammar, args.debug)
    for name in g:
        marker = "*" if name == g.start else " "
        print(f"{marker} {name}")
    return 0

# ------------------------------
# entry point
# ------------------------------

def main(argv: Optional[list[str]] = None) -> int:
    from .grammars import GRAMMARS

    ap = argparse.ArgumentParser(prog="weftc", description="weft parser-combinator CLI")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p_parse = sub.add_parser("parse", help="parse text with a bundled grammar and print JSON")
    p_parse.add_argument("--grammar", choices=sorted(GRAMMARS), default="css", help="bundled grammar")
    p_parse.add_argument("--start", help="start rule (defaults to the grammar's own)")
    src_group = p_parse.add_mutually_exclusive_group(required=True)
    src_group.add_argument("--text", help="input text")
    src_group.add_argument("--input", help="path of an input file")
    p_parse.add_argument("--complete", action="store_true", help="require the whole input to match")
    p_parse.add_argument("--max-length", type=int, help="reject inputs longer than this")
    p_parse.add_argument("-D", "--debug", action="store_true", help="print debug information on stderr")
    p_parse.set_defaults(func=cmd_parse)

    p_rules = sub.add_parser("rules", help="list the rules of a bundled grammar")
    p_rules.add_argument("--grammar", choices=sorted(GRAMMARS), default="css", help="bundled grammar")
    p_rules.add_argument("-D", "--debug", action="store_true", help="print debug information on stderr")
    p_rules.set_defaults(func=cmd_rules)

    args = ap.parse_args(argv)
    return int(args.func(args))

if __name__ == "__main__":
    sys.exit(main())
