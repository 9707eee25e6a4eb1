from __future__ import annotations

from typing import Callable, Optional

from .runtime import (
    Environment,
    MkInteger,
    MkString,
    MkValue,
    MonkeyRuntimeError,
    ReturnSignal,
    init_stdlib,
    is_error,
    lookup_builtin,
    native_bool,
    new_error,
)
from .tree import (
    ArrayLiteral,
    BlockStatement,
    Boolean,
    CallExpression,
    ExpressionStatement,
    FunctionLiteral,
    HashLiteral,
    Identifier,
    IfExpression,
    IndexExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    Node,
    PrefixExpression,
    Program,
    ReturnStatement,
    StringLiteral,
)

from .eval.blocks import eval_block, eval_program
from .eval.chains import eval_call, eval_index_expression
from .eval.expr import eval_infix, eval_prefix
from .eval.fn import eval_function_literal
from .eval.helpers import ensure_value, is_truthy
from .eval.objects import eval_array_literal, eval_hash_literal

# ---------------- Public API ----------------

def evaluate(env: Environment, node: Node) -> Optional[MkValue]:
    """Evaluate `node` in `env`; None means the construct has no value."""
    init_stdlib()
    return eval_node(node, env)

# ---------------- Core evaluator ----------------

def eval_node(n: Node, env: Environment) -> Optional[MkValue]:
    handler = _NODE_DISPATCH.get(type(n))
    if handler is None:
        raise MonkeyRuntimeError(f"Unknown node: {type(n).__name__}")

    return handler(n, env)

# ---------------- Statements ----------------

def _eval_let(n: LetStatement, env: Environment) -> Optional[MkValue]:
    val = eval_node(n.value, env)
    if is_error(val):
        return val

    env.set(n.name.value, ensure_value(val))
    return None


def _eval_return(n: ReturnStatement, env: Environment) -> MkValue:
    if n.value is None:
        return ReturnSignal(ensure_value(None))

    val = eval_node(n.value, env)
    if is_error(val):
        return val

    return ReturnSignal(ensure_value(val))

# ---------------- Expressions ----------------

def _eval_identifier(n: Identifier, env: Environment) -> MkValue:
    val = env.get(n.value)
    if val is not None:
        return val

    builtin = lookup_builtin(n.value)
    if builtin is not None:
        return builtin

    return new_error(f"identifier not found: {n.value}")


def _eval_prefix(n: PrefixExpression, env: Environment) -> MkValue:
    right = eval_node(n.right, env)
    if is_error(right):
        return right

    return eval_prefix(n.operator, ensure_value(right))


def _eval_infix(n: InfixExpression, env: Environment) -> MkValue:
    left = eval_node(n.left, env)
    if is_error(left):
        return left

    right = eval_node(n.right, env)
    if is_error(right):
        return right

    return eval_infix(n.operator, ensure_value(left), ensure_value(right))


def _eval_if(n: IfExpression, env: Environment) -> MkValue:
    condition = eval_node(n.condition, env)
    if is_error(condition):
        return condition

    if is_truthy(ensure_value(condition)):
        return ensure_value(eval_node(n.consequence, env))

    if n.alternative is not None:
        return ensure_value(eval_node(n.alternative, env))

    return ensure_value(None)

# ---------------- Dispatch ----------------

_NODE_DISPATCH: dict[type, Callable[..., Optional[MkValue]]] = {
    Program: lambda n, env: eval_program(n.statements, env, eval_node),
    BlockStatement: lambda n, env: eval_block(n.statements, env, eval_node),
    ExpressionStatement: lambda n, env: eval_node(n.expression, env),
    LetStatement: _eval_let,
    ReturnStatement: _eval_return,
    Identifier: _eval_identifier,
    IntegerLiteral: lambda n, _: MkInteger(n.value),
    StringLiteral: lambda n, _: MkString(n.value),
    Boolean: lambda n, _: native_bool(n.value),
    PrefixExpression: _eval_prefix,
    InfixExpression: _eval_infix,
    IfExpression: _eval_if,
    FunctionLiteral: lambda n, env: eval_function_literal(n, env),
    CallExpression: lambda n, env: eval_call(n, env, eval_node),
    ArrayLiteral: lambda n, env: eval_array_literal(n, env, eval_node),
    IndexExpression: lambda n, env: eval_index_expression(n, env, eval_node),
    HashLiteral: lambda n, env: eval_hash_literal(n, env, eval_node),
}
