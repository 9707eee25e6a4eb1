from __future__ import annotations

from typing import Callable, Optional

from ..runtime import FALSE, NULL, Environment, MkValue, ReturnSignal
from ..tree import Node

EvalFunc = Callable[[Node, Environment], Optional[MkValue]]


def is_truthy(val: MkValue) -> bool:
    # Only null and false are falsy; 0, "" and [] are all truthy.
    return val is not NULL and val is not FALSE


def unwrap_return(val: Optional[MkValue]) -> Optional[MkValue]:
    if isinstance(val, ReturnSignal):
        return val.value
    return val


def ensure_value(val: Optional[MkValue]) -> MkValue:
    """Expressions always yield a value: a block that produced nothing is null."""
    return NULL if val is None else val
