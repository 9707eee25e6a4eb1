from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple, Union
from typing_extensions import TypeAlias, TypeGuard

from .tree import BlockStatement, Identifier

# ---------- Value Model ----------

INTEGER = "INTEGER"
BOOLEAN = "BOOLEAN"
STRING = "STRING"
NULL_TYPE = "NULL"
ARRAY = "ARRAY"
HASH = "HASH"
FUNCTION = "FUNCTION"
BUILTIN = "BUILTIN"
RETURN_VALUE = "RETURN_VALUE"
ERROR = "ERROR"

_INT64_MASK = (1 << 64) - 1
_INT64_SIGN = 1 << 63


def wrap_int64(value: int) -> int:
    """Fold an arbitrary Python int into signed 64-bit two's complement."""
    value &= _INT64_MASK
    return value - (1 << 64) if value & _INT64_SIGN else value


@dataclass(frozen=True)
class HashKey:
    """Dictionary key for hash entries: the type tag plus the exact value."""
    type_name: str
    value: Union[int, bool, str]


@dataclass
class MkInteger:
    value: int
    type_name = INTEGER

    def inspect(self) -> str:
        return str(self.value)

    def hash_key(self) -> HashKey:
        return HashKey(INTEGER, self.value)


@dataclass
class MkBoolean:
    value: bool
    type_name = BOOLEAN

    def inspect(self) -> str:
        return "true" if self.value else "false"

    def hash_key(self) -> HashKey:
        return HashKey(BOOLEAN, self.value)


@dataclass
class MkString:
    value: str
    type_name = STRING

    def inspect(self) -> str:
        return self.value

    def hash_key(self) -> HashKey:
        return HashKey(STRING, self.value)


@dataclass
class MkNull:
    type_name = NULL_TYPE

    def inspect(self) -> str:
        return "null"


@dataclass
class MkArray:
    elements: List['MkValue']
    type_name = ARRAY

    def inspect(self) -> str:
        return "[" + ", ".join(e.inspect() for e in self.elements) + "]"


@dataclass
class HashPair:
    key: 'MkValue'
    value: 'MkValue'


@dataclass
class MkHash:
    pairs: Dict[HashKey, HashPair] = field(default_factory=dict)
    type_name = HASH

    def inspect(self) -> str:
        items = [f"{p.key.inspect()}: {p.value.inspect()}" for p in self.pairs.values()]
        return "{" + ", ".join(items) + "}"


@dataclass(eq=False)
class MkFn:
    params: Tuple[Identifier, ...]
    body: BlockStatement
    env: 'Environment'  # Closure scope, shared with every other fn defined in it
    type_name = FUNCTION

    def inspect(self) -> str:
        params = ", ".join(p.value for p in self.params)
        return f"fn({params}) {{\n{self.body.render_body()}\n}}"

    def __repr__(self) -> str:
        params = ", ".join(p.value for p in self.params) or "nullary"
        return f"<fn params={params}>"


BuiltinFn = Callable[..., 'MkValue']


@dataclass(eq=False)
class MkBuiltin:
    name: str
    fn: BuiltinFn
    type_name = BUILTIN

    def inspect(self) -> str:
        return "builtin function"

    def __repr__(self) -> str:
        return f"<builtin {self.name}>"


@dataclass
class ReturnSignal:
    """Carries a `return` value up to the enclosing call boundary."""
    value: 'MkValue'
    type_name = RETURN_VALUE

    def inspect(self) -> str:
        return self.value.inspect()


@dataclass
class MkError:
    """Runtime error value; short-circuits evaluation like a return."""
    message: str
    type_name = ERROR

    def inspect(self) -> str:
        return f"ERROR: {self.message}"


MkValue: TypeAlias = (
    MkInteger
    | MkBoolean
    | MkString
    | MkNull
    | MkArray
    | MkHash
    | MkFn
    | MkBuiltin
    | ReturnSignal
    | MkError
)

Hashable: TypeAlias = MkInteger | MkBoolean | MkString

# Process-wide singletons; `==` on booleans and null compares these by identity.
TRUE = MkBoolean(True)
FALSE = MkBoolean(False)
NULL = MkNull()


def native_bool(value: bool) -> MkBoolean:
    return TRUE if value else FALSE


def is_hashable(value: MkValue) -> TypeGuard[Hashable]:
    return isinstance(value, (MkInteger, MkBoolean, MkString))


def is_error(value: Optional[MkValue]) -> TypeGuard[MkError]:
    return isinstance(value, MkError)


def is_signal(value: Optional[MkValue]) -> bool:
    return isinstance(value, (ReturnSignal, MkError))


# ---------- Scope ----------

class Environment:
    """Name bindings for one scope, chained to the scope it was created in."""

    def __init__(self, outer: Optional['Environment']=None):
        self.outer = outer
        self.vars: Dict[str, MkValue] = {}

    def get(self, name: str) -> Optional[MkValue]:
        env: Optional[Environment] = self

        while env is not None:
            if name in env.vars:
                return env.vars[name]
            env = env.outer

        return None

    def set(self, name: str, val: MkValue) -> MkValue:
        # Always the innermost frame; outer bindings are shadowed, never written.
        self.vars[name] = val
        return val

    def enclosed(self) -> 'Environment':
        return Environment(outer=self)

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def __repr__(self) -> str:
        depth = 0
        env = self.outer

        while env is not None:
            depth += 1
            env = env.outer

        return f"<Environment names={sorted(self.vars)} depth={depth}>"


# ---------- Exceptions ----------

class MonkeyRuntimeError(Exception):
    """Interpreter fault (not a language-level error, which is an MkError value)."""
