"""Built-in functions (len, puts, ...) registered via monkey.runtime."""

from __future__ import annotations

from .runtime import (
    NULL,
    MkArray,
    MkInteger,
    MkString,
    MkValue,
    new_error,
    register_builtin,
    wrong_arg_count,
)


def _expect_array(name: str, arg: MkValue):
    if isinstance(arg, MkArray):
        return None
    return new_error(f'argument to "{name}" must be ARRAY, got {arg.type_name}')


@register_builtin("len")
def std_len(*args: MkValue) -> MkValue:
    if len(args) != 1:
        return wrong_arg_count(len(args), 1)

    match args[0]:
        case MkArray(elements=elements):
            return MkInteger(len(elements))
        case MkString(value=s):
            return MkInteger(len(s))
        case other:
            return new_error(f'argument to "len" not supported, got {other.type_name}')


@register_builtin("first")
def std_first(*args: MkValue) -> MkValue:
    if len(args) != 1:
        return wrong_arg_count(len(args), 1)

    err = _expect_array("first", args[0])
    if err is not None:
        return err

    elements = args[0].elements
    return elements[0] if elements else NULL


@register_builtin("last")
def std_last(*args: MkValue) -> MkValue:
    if len(args) != 1:
        return wrong_arg_count(len(args), 1)

    err = _expect_array("last", args[0])
    if err is not None:
        return err

    elements = args[0].elements
    return elements[-1] if elements else NULL


@register_builtin("rest")
def std_rest(*args: MkValue) -> MkValue:
    if len(args) != 1:
        return wrong_arg_count(len(args), 1)

    err = _expect_array("rest", args[0])
    if err is not None:
        return err

    elements = args[0].elements
    if not elements:
        return NULL
    return MkArray(list(elements[1:]))


@register_builtin("push")
def std_push(*args: MkValue) -> MkValue:
    if len(args) != 2:
        return wrong_arg_count(len(args), 2)

    err = _expect_array("push", args[0])
    if err is not None:
        return err

    # Fresh list: the argument array is never mutated.
    return MkArray([*args[0].elements, args[1]])


@register_builtin("puts")
def std_puts(*args: MkValue) -> MkValue:
    for arg in args:
        print(arg.inspect())
    return NULL
