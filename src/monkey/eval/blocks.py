from __future__ import annotations

from typing import Iterable, Optional

from ..runtime import Environment, MkError, MkValue, ReturnSignal, is_signal
from ..tree import Statement
from .helpers import EvalFunc


def eval_program(statements: Iterable[Statement], env: Environment, eval_func: EvalFunc) -> Optional[MkValue]:
    """Run top-level statements; a return ends the program and is unwrapped."""
    result: Optional[MkValue] = None

    for stmt in statements:
        result = eval_func(stmt, env)

        match result:
            case ReturnSignal(value=value):
                return value
            case MkError():
                return result

    return result


def eval_block(statements: Iterable[Statement], env: Environment, eval_func: EvalFunc) -> Optional[MkValue]:
    """Run a block; return and error signals pass through still wrapped."""
    result: Optional[MkValue] = None

    for stmt in statements:
        result = eval_func(stmt, env)

        if is_signal(result):
            return result

    return result
