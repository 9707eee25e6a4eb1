from __future__ import annotations

from typing import Iterable, List, Union

from ..runtime import NULL, Environment, MkArray, MkError, MkHash, MkInteger, MkValue, is_error, is_hashable, new_error
from ..tree import CallExpression, Expression, IndexExpression
from .fn import apply_function
from .helpers import EvalFunc


def eval_expressions(nodes: Iterable[Expression], env: Environment, eval_func: EvalFunc) -> Union[List[MkValue], MkError]:
    """Evaluate left to right, stopping at (and returning) the first error."""
    values: List[MkValue] = []

    for node in nodes:
        val = eval_func(node, env)

        if is_error(val):
            return val
        values.append(val)

    return values


def eval_call(node: CallExpression, env: Environment, eval_func: EvalFunc) -> MkValue:
    fn = eval_func(node.function, env)
    if is_error(fn):
        return fn

    args = eval_expressions(node.arguments, env, eval_func)
    if isinstance(args, MkError):
        return args

    return apply_function(fn, args, eval_func)


def eval_index_expression(node: IndexExpression, env: Environment, eval_func: EvalFunc) -> MkValue:
    left = eval_func(node.left, env)
    if is_error(left):
        return left

    index = eval_func(node.index, env)
    if is_error(index):
        return index

    return index_value(left, index)


def index_value(left: MkValue, index: MkValue) -> MkValue:
    match (left, index):
        case (MkArray(elements=elements), MkInteger(value=idx)):
            if idx < 0 or idx >= len(elements):
                return NULL
            return elements[idx]
        case (MkHash(), _):
            return hash_lookup(left, index)
        case _:
            return new_error(f"index operator not supported: {left.type_name}")


def hash_lookup(target: MkHash, key: MkValue) -> MkValue:
    if not is_hashable(key):
        return new_error(f"unusable as hash key: {key.type_name}")

    pair = target.pairs.get(key.hash_key())
    return NULL if pair is None else pair.value
