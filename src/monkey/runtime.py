from __future__ import annotations

import importlib
from typing import Dict, Optional

from .types import (
    MkArray, MkBoolean, MkBuiltin, MkError, MkFn, MkHash, MkInteger, MkNull, MkString,
    MkValue, BuiltinFn, Environment, HashKey, HashPair, ReturnSignal,
    MonkeyRuntimeError, TRUE, FALSE, NULL, native_bool, is_error, is_hashable, is_signal,
)

_STDLIB_INITIALIZED = False


class Builtins:
    functions: Dict[str, MkBuiltin] = {}


def init_stdlib() -> None:
    """Load stdlib modules (idempotent) so register_builtin hooks run."""
    global _STDLIB_INITIALIZED

    if _STDLIB_INITIALIZED:
        return

    importlib.import_module(".stdlib", __package__)
    _STDLIB_INITIALIZED = True


def register_builtin(name: str):
    def dec(fn: BuiltinFn):
        Builtins.functions[name] = MkBuiltin(name=name, fn=fn)
        return fn

    return dec


def lookup_builtin(name: str) -> Optional[MkBuiltin]:
    init_stdlib()
    return Builtins.functions.get(name)


def new_error(message: str) -> MkError:
    return MkError(message)


def wrong_arg_count(got: int, want: int) -> MkError:
    return new_error(f"wrong number of arguments. got={got}, want={want}")


__all__ = [
    "Builtins", "init_stdlib", "register_builtin", "lookup_builtin", "new_error", "wrong_arg_count",
    "MkArray", "MkBoolean", "MkBuiltin", "MkError", "MkFn", "MkHash", "MkInteger", "MkNull", "MkString",
    "MkValue", "Environment", "HashKey", "HashPair", "ReturnSignal", "MonkeyRuntimeError",
    "TRUE", "FALSE", "NULL", "native_bool", "is_error", "is_hashable", "is_signal",
]
