from __future__ import annotations

from ..runtime import FALSE, NULL, TRUE, MkInteger, MkString, MkValue, new_error, native_bool
from ..types import wrap_int64


def eval_prefix(op: str, right: MkValue) -> MkValue:
    match op:
        case '!':
            return eval_bang(right)
        case '-':
            return eval_minus_prefix(right)
        case _:
            return new_error(f"unknown operator: {op}{right.type_name}")


def eval_bang(right: MkValue) -> MkValue:
    if right is TRUE:
        return FALSE
    if right is FALSE or right is NULL:
        return TRUE
    return FALSE


def eval_minus_prefix(right: MkValue) -> MkValue:
    if not isinstance(right, MkInteger):
        return new_error(f"unknown operator: -{right.type_name}")

    return MkInteger(wrap_int64(-right.value))


def eval_infix(op: str, left: MkValue, right: MkValue) -> MkValue:
    if isinstance(left, MkInteger) and isinstance(right, MkInteger):
        return eval_integer_infix(op, left, right)

    # Identity, not structure: only the bool/null singletons compare equal by value.
    if op == '==':
        return native_bool(left is right)
    if op == '!=':
        return native_bool(left is not right)

    if left.type_name != right.type_name:
        return new_error(f"type mismatch: {left.type_name} {op} {right.type_name}")

    if isinstance(left, MkString) and isinstance(right, MkString):
        return eval_string_infix(op, left, right)

    return new_error(f"unknown operator: {left.type_name} {op} {right.type_name}")


def eval_integer_infix(op: str, left: MkInteger, right: MkInteger) -> MkValue:
    a, b = left.value, right.value

    match op:
        case '+':
            return MkInteger(wrap_int64(a + b))
        case '-':
            return MkInteger(wrap_int64(a - b))
        case '*':
            return MkInteger(wrap_int64(a * b))
        case '/':
            if b == 0:
                return new_error("division by zero")
            return MkInteger(wrap_int64(truncating_div(a, b)))
        case '<':
            return native_bool(a < b)
        case '>':
            return native_bool(a > b)
        case '==':
            return native_bool(a == b)
        case '!=':
            return native_bool(a != b)
        case _:
            return new_error(f"unknown operator: {left.type_name} {op} {right.type_name}")


def truncating_div(a: int, b: int) -> int:
    """Integer division rounding toward zero (Python's // floors)."""
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def eval_string_infix(op: str, left: MkString, right: MkString) -> MkValue:
    if op != '+':
        return new_error(f"unknown operator: {left.type_name} {op} {right.type_name}")

    return MkString(left.value + right.value)
