from __future__ import annotations

import sys
import traceback
from pathlib import Path
from typing import List, Optional, Tuple

from .evaluator import evaluate
from .lexer import tokenize
from .parser import ParseError, parse
from .runtime import Environment, MkValue, init_stdlib
from .tree import Program, to_lark
from .utils import debug_py_trace_enabled


def parse_program(src: str) -> Tuple[Program, List[str]]:
    """Parse `src` into a program plus its diagnostics (never raises)."""
    return parse(src)


def run(src: str, env: Optional[Environment]=None) -> Optional[MkValue]:
    """Parse and evaluate `src`; raises ParseError if the parser complained."""
    init_stdlib()

    program, errors = parse_program(src)
    if errors:
        raise ParseError(errors)

    return evaluate(env if env is not None else Environment(), program)


def repl_eval(src: str, env: Environment) -> Tuple[Optional[MkValue], List[str]]:
    """Evaluate one REPL entry against a persistent environment.

    Diagnostics are returned as a batch and nothing is evaluated when any
    were recorded.
    """
    program, errors = parse_program(src)
    if errors:
        return None, errors

    return evaluate(env, program), []


def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Existing path => read file contents.
    - Otherwise treat the argument as literal source.
    """

    if arg is None or arg == "-":
        data = sys.stdin.read()
        if not data:
            raise SystemExit("No input provided on stdin")
        return data

    candidate = Path(arg)
    if candidate.exists():
        return candidate.read_text(encoding="utf-8")

    return arg


def main() -> None:
    mode = "run"
    arg = None

    for token in sys.argv[1:]:
        if token in ("--tokens", "--ast"):
            mode = token[2:]
            continue

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}")

    source = _load_source(arg)

    if mode == "tokens":
        for tok in tokenize(source):
            print(tok)
        return

    program, errors = parse_program(source)
    if errors:
        for msg in errors:
            print(f"parse error: {msg}", file=sys.stderr)
        raise SystemExit(1)

    if mode == "ast":
        print(to_lark(program).pretty(), end="")
        return

    try:
        result = evaluate(Environment(), program)
    except RecursionError as exc:
        if debug_py_trace_enabled():
            traceback.print_exception(exc)
        raise SystemExit("Error: maximum recursion depth exceeded") from None

    if result is not None:
        print(result.inspect())


if __name__ == "__main__":
    main()
