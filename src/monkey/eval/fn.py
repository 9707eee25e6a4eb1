from __future__ import annotations

from typing import List

from ..runtime import Environment, MkBuiltin, MkFn, MkValue, new_error
from ..tree import FunctionLiteral
from .helpers import EvalFunc, ensure_value, unwrap_return


def eval_function_literal(node: FunctionLiteral, env: Environment) -> MkFn:
    # Capture by reference: later bindings in env stay visible to the closure.
    return MkFn(params=node.parameters, body=node.body, env=env)


def apply_function(fn: MkValue, args: List[MkValue], eval_func: EvalFunc) -> MkValue:
    match fn:
        case MkFn():
            if len(args) != len(fn.params):
                return new_error(f"wrong number of arguments: want={len(fn.params)}, got={len(args)}")

            callee_env = extend_function_env(fn, args)
            evaluated = eval_func(fn.body, callee_env)
            return ensure_value(unwrap_return(evaluated))
        case MkBuiltin():
            return fn.fn(*args)
        case _:
            return new_error(f"not a function: {fn.type_name}")


def extend_function_env(fn: MkFn, args: List[MkValue]) -> Environment:
    env = fn.env.enclosed()

    for param, arg in zip(fn.params, args):
        env.set(param.value, arg)

    return env
