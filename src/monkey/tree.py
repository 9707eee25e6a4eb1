"""AST node classes produced by the parser and consumed by the evaluator.

Every node is a frozen dataclass that owns its children (child sequences are
tuples).  ``str(node)`` gives the canonical, fully parenthesised rendering
that the parser tests compare against; ``to_lark`` converts a node into a
Lark tree for ``pretty()`` debug dumps.
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Optional, Tuple, Union

from lark import Token, Tree
from typing_extensions import TypeAlias, TypeGuard

from .token_types import Tok

_RE_ESCAPES = {
    '\\': '\\\\',
    '"': '\\"',
    '\n': '\\n',
    '\t': '\\t',
    '\r': '\\r',
}


class Node:
    """Shared behaviour for all AST variants."""
    __slots__ = ()

    token: Tok

    def token_literal(self) -> str:
        return self.token.literal


# ---------------- Statements ----------------

@dataclass(frozen=True)
class Program(Node):
    statements: Tuple['Statement', ...] = ()

    def token_literal(self) -> str:
        if self.statements:
            return self.statements[0].token_literal()
        return ""

    def __str__(self) -> str:
        return "; ".join(str(s) for s in self.statements)


@dataclass(frozen=True)
class LetStatement(Node):
    token: Tok
    name: 'Identifier'
    value: 'Expression'

    def __str__(self) -> str:
        return f"{self.token_literal()} {self.name} = {self.value}"


@dataclass(frozen=True)
class ReturnStatement(Node):
    token: Tok
    value: Optional['Expression'] = None

    def __str__(self) -> str:
        if self.value is None:
            return self.token_literal()
        return f"{self.token_literal()} {self.value}"


@dataclass(frozen=True)
class ExpressionStatement(Node):
    token: Tok
    expression: 'Expression'

    def __str__(self) -> str:
        return str(self.expression)


@dataclass(frozen=True)
class BlockStatement(Node):
    token: Tok
    statements: Tuple['Statement', ...] = ()

    def render_body(self) -> str:
        return "; ".join(str(s) for s in self.statements)

    def __str__(self) -> str:
        if not self.statements:
            return "{ }"
        return "{ " + self.render_body() + " }"


# ---------------- Expressions ----------------

@dataclass(frozen=True)
class Identifier(Node):
    token: Tok
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class IntegerLiteral(Node):
    token: Tok
    value: int

    def __str__(self) -> str:
        return self.token_literal()


@dataclass(frozen=True)
class StringLiteral(Node):
    token: Tok
    value: str

    def __str__(self) -> str:
        body = "".join(_RE_ESCAPES.get(ch, ch) for ch in self.value)
        return f'"{body}"'


@dataclass(frozen=True)
class Boolean(Node):
    token: Tok
    value: bool

    def __str__(self) -> str:
        return self.token_literal()


@dataclass(frozen=True)
class PrefixExpression(Node):
    token: Tok
    operator: str
    right: 'Expression'

    def __str__(self) -> str:
        return f"({self.operator}{self.right})"


@dataclass(frozen=True)
class InfixExpression(Node):
    token: Tok
    left: 'Expression'
    operator: str
    right: 'Expression'

    def __str__(self) -> str:
        return f"({self.left} {self.operator} {self.right})"


@dataclass(frozen=True)
class IfExpression(Node):
    token: Tok
    condition: 'Expression'
    consequence: BlockStatement
    alternative: Optional[BlockStatement] = None

    def __str__(self) -> str:
        cond = str(self.condition)
        # Prefix/infix/index already print their own parentheses.
        if not isinstance(self.condition, (PrefixExpression, InfixExpression, IndexExpression)):
            cond = f"({cond})"

        out = f"if{cond} {self.consequence}"
        if self.alternative is not None:
            out += f"else {self.alternative}"
        return out


@dataclass(frozen=True)
class FunctionLiteral(Node):
    token: Tok
    parameters: Tuple[Identifier, ...]
    body: BlockStatement

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"{self.token_literal()}({params}) {self.body}"


@dataclass(frozen=True)
class CallExpression(Node):
    token: Tok
    function: 'Expression'
    arguments: Tuple['Expression', ...] = ()

    def __str__(self) -> str:
        args = ", ".join(str(a) for a in self.arguments)
        return f"{self.function}({args})"


@dataclass(frozen=True)
class ArrayLiteral(Node):
    token: Tok
    elements: Tuple['Expression', ...] = ()

    def __str__(self) -> str:
        return "[" + ", ".join(str(e) for e in self.elements) + "]"


@dataclass(frozen=True)
class IndexExpression(Node):
    token: Tok
    left: 'Expression'
    index: 'Expression'

    def __str__(self) -> str:
        return f"({self.left}[{self.index}])"


@dataclass(frozen=True)
class HashLiteral(Node):
    token: Tok
    pairs: Tuple[Tuple['Expression', 'Expression'], ...] = ()

    def __str__(self) -> str:
        return "{" + ", ".join(f"{k}:{v}" for k, v in self.pairs) + "}"


Statement: TypeAlias = Union[LetStatement, ReturnStatement, ExpressionStatement, BlockStatement]

Expression: TypeAlias = Union[
    Identifier,
    IntegerLiteral,
    StringLiteral,
    Boolean,
    PrefixExpression,
    InfixExpression,
    IfExpression,
    FunctionLiteral,
    CallExpression,
    ArrayLiteral,
    IndexExpression,
    HashLiteral,
]


def is_node(value: object) -> TypeGuard[Node]:
    return isinstance(value, Node)


# ---------------- Lark export ----------------

def _label(node: Node) -> str:
    name = type(node).__name__
    return "".join("_" + ch.lower() if ch.isupper() and i else ch.lower() for i, ch in enumerate(name))


def to_lark(node: Node) -> Tree:
    """Convert an AST node into a Lark tree (leaves become Lark tokens)."""
    children = []

    for f in fields(node):  # type: ignore[arg-type]
        if f.name == 'token':
            continue

        value = getattr(node, f.name)

        if value is None:
            continue
        if is_node(value):
            children.append(to_lark(value))
        elif isinstance(value, tuple):
            for item in value:
                if isinstance(item, tuple):
                    children.append(Tree('pair', [to_lark(part) for part in item]))
                else:
                    children.append(to_lark(item))
        else:
            children.append(Token(f.name.upper(), str(value)))

    return Tree(_label(node), children)
