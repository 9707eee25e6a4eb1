from __future__ import annotations

from ..runtime import Environment, HashPair, MkArray, MkError, MkHash, MkValue, is_error, is_hashable, new_error
from ..tree import ArrayLiteral, HashLiteral
from .chains import eval_expressions
from .helpers import EvalFunc


def eval_array_literal(node: ArrayLiteral, env: Environment, eval_func: EvalFunc) -> MkValue:
    elements = eval_expressions(node.elements, env, eval_func)
    if isinstance(elements, MkError):
        return elements

    return MkArray(elements)


def eval_hash_literal(node: HashLiteral, env: Environment, eval_func: EvalFunc) -> MkValue:
    """Build a hash; later duplicate keys overwrite earlier ones."""
    result = MkHash()

    for key_node, value_node in node.pairs:
        key = eval_func(key_node, env)
        if is_error(key):
            return key

        if not is_hashable(key):
            return new_error(f"unusable as hash key: {key.type_name}")

        value = eval_func(value_node, env)
        if is_error(value):
            return value

        result.pairs[key.hash_key()] = HashPair(key=key, value=value)

    return result
