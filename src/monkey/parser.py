"""
Pratt Parser for monkey

Structure:
- Lexer: lazy token stream, pulled one token at a time
- Parser: statements by recursive descent, expressions by precedence climbing
- AST: frozen node classes from tree.py

The parser never raises on malformed input.  Every problem is appended to
`Parser.errors` and only the smallest enclosing sub-parse is abandoned, so the
rest of the program still parses.
"""

from __future__ import annotations

import sys
from enum import IntEnum
from typing import Callable, Dict, List, Optional, Tuple

from .lexer import Lexer
from .token_types import TT, Tok
from .tree import (
    ArrayLiteral,
    BlockStatement,
    Boolean,
    CallExpression,
    Expression,
    ExpressionStatement,
    FunctionLiteral,
    HashLiteral,
    Identifier,
    IfExpression,
    IndexExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    PrefixExpression,
    Program,
    ReturnStatement,
    Statement,
    StringLiteral,
    to_lark,
)

INT64_MAX = 2**63 - 1

# ============================================================================
# Parser
# ============================================================================

class ParseError(Exception):
    """Raised by parse_source when the parser recorded diagnostics"""
    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) if self.errors else "parse failed")


class Precedence(IntEnum):
    """Binding power, lowest to highest"""
    LOWEST = 1
    EQUALS = 2       # ==
    LESSGREATER = 3  # > or <
    SUM = 4          # +
    PRODUCT = 5      # *
    PREFIX = 6       # -X or !X
    CALL = 7         # myFunction(X)
    INDEX = 8        # array[index]


PRECEDENCES: Dict[TT, Precedence] = {
    TT.EQ: Precedence.EQUALS,
    TT.NOT_EQ: Precedence.EQUALS,
    TT.LT: Precedence.LESSGREATER,
    TT.GT: Precedence.LESSGREATER,
    TT.PLUS: Precedence.SUM,
    TT.MINUS: Precedence.SUM,
    TT.SLASH: Precedence.PRODUCT,
    TT.ASTERISK: Precedence.PRODUCT,
    TT.LPAREN: Precedence.CALL,
    TT.LBRACKET: Precedence.INDEX,
}

PrefixParseFn = Callable[[], Optional[Expression]]
InfixParseFn = Callable[[Expression], Optional[Expression]]


class Parser:
    """
    Pratt parser for monkey.

    `cur` is the token being looked at and `peek` the one after it.  Prefix
    handlers start an expression at `cur`; infix handlers are entered with
    `cur` on the operator and fold the expression parsed so far into a larger
    one.
    """

    def __init__(self, lexer: Lexer):
        self.lexer = lexer
        self.errors: List[str] = []

        self.prefix_fns: Dict[TT, PrefixParseFn] = {
            TT.IDENT: self.parse_identifier,
            TT.INT: self.parse_integer_literal,
            TT.STRING: self.parse_string_literal,
            TT.FUNCTION: self.parse_function_literal,
            TT.BANG: self.parse_prefix_expression,
            TT.MINUS: self.parse_prefix_expression,
            TT.LPAREN: self.parse_grouped_expression,
            TT.IF: self.parse_if_expression,
            TT.TRUE: self.parse_boolean,
            TT.FALSE: self.parse_boolean,
            TT.LBRACKET: self.parse_array_literal,
            TT.LBRACE: self.parse_hash_literal,
        }
        self.infix_fns: Dict[TT, InfixParseFn] = {
            TT.PLUS: self.parse_infix_expression,
            TT.MINUS: self.parse_infix_expression,
            TT.SLASH: self.parse_infix_expression,
            TT.ASTERISK: self.parse_infix_expression,
            TT.EQ: self.parse_infix_expression,
            TT.NOT_EQ: self.parse_infix_expression,
            TT.LT: self.parse_infix_expression,
            TT.GT: self.parse_infix_expression,
            TT.LPAREN: self.parse_call_expression,
            TT.LBRACKET: self.parse_index_expression,
        }

        # Fill cur and peek
        self.cur = self.lexer.next_token()
        self.peek = self.lexer.next_token()

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def advance(self) -> None:
        self.cur = self.peek
        self.peek = self.lexer.next_token()

    def cur_is(self, token_type: TT) -> bool:
        return self.cur.type is token_type

    def peek_is(self, token_type: TT) -> bool:
        return self.peek.type is token_type

    def expect_peek(self, token_type: TT) -> bool:
        """Advance if peek matches, else record a diagnostic"""
        if self.peek_is(token_type):
            self.advance()
            return True
        self.peek_error(token_type)
        return False

    def peek_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.peek.type, Precedence.LOWEST)

    def cur_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.cur.type, Precedence.LOWEST)

    # ========================================================================
    # Diagnostics
    # ========================================================================

    def peek_error(self, token_type: TT) -> None:
        self.errors.append(f"expected next token to be {token_type}, got {self.peek.type} instead")

    def no_prefix_parse_fn_error(self, token_type: TT) -> None:
        self.errors.append(f"no prefix parse function for {token_type} found")

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse_program(self) -> Program:
        """Parse statements until EOF; failed statements are left out"""
        statements: List[Statement] = []

        while not self.cur_is(TT.EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self.advance()

        return Program(tuple(statements))

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_statement(self) -> Optional[Statement]:
        match self.cur.type:
            case TT.LET:
                return self.parse_let_statement()
            case TT.RETURN:
                return self.parse_return_statement()
            case _:
                return self.parse_expression_statement()

    def parse_let_statement(self) -> Optional[LetStatement]:
        """let IDENT = EXPR [;]"""
        let_tok = self.cur

        if not self.expect_peek(TT.IDENT):
            return None

        name = Identifier(self.cur, self.cur.literal)

        if not self.expect_peek(TT.ASSIGN):
            return None

        self.advance()
        value = self.parse_expression(Precedence.LOWEST)

        if self.peek_is(TT.SEMICOLON):
            self.advance()

        if value is None:
            return None

        return LetStatement(let_tok, name, value)

    def parse_return_statement(self) -> Optional[ReturnStatement]:
        """return [EXPR] [;]"""
        return_tok = self.cur

        # Bare return: nothing left to parse before the statement ends.
        if self.peek.type in (TT.SEMICOLON, TT.RBRACE, TT.EOF):
            if self.peek_is(TT.SEMICOLON):
                self.advance()
            return ReturnStatement(return_tok)

        self.advance()
        value = self.parse_expression(Precedence.LOWEST)

        if self.peek_is(TT.SEMICOLON):
            self.advance()

        if value is None:
            return None

        return ReturnStatement(return_tok, value)

    def parse_expression_statement(self) -> Optional[ExpressionStatement]:
        first = self.cur
        expression = self.parse_expression(Precedence.LOWEST)

        if self.peek_is(TT.SEMICOLON):
            self.advance()

        if expression is None:
            return None

        return ExpressionStatement(first, expression)

    def parse_block_statement(self) -> BlockStatement:
        """Statements up to the closing } (or EOF); cur starts on {"""
        brace = self.cur
        statements: List[Statement] = []

        self.advance()

        while not self.cur_is(TT.RBRACE) and not self.cur_is(TT.EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self.advance()

        return BlockStatement(brace, tuple(statements))

    # ========================================================================
    # Expressions
    # ========================================================================

    def parse_expression(self, precedence: Precedence) -> Optional[Expression]:
        prefix = self.prefix_fns.get(self.cur.type)
        if prefix is None:
            self.no_prefix_parse_fn_error(self.cur.type)
            return None

        left = prefix()

        while not self.peek_is(TT.SEMICOLON) and precedence < self.peek_precedence():
            infix = self.infix_fns.get(self.peek.type)
            if infix is None:
                return left

            if left is None:
                return None

            self.advance()
            left = infix(left)

        return left

    # ------------------------------------------------------------------------
    # Prefix handlers
    # ------------------------------------------------------------------------

    def parse_identifier(self) -> Expression:
        return Identifier(self.cur, self.cur.literal)

    def parse_integer_literal(self) -> Optional[Expression]:
        value = int(self.cur.literal)

        if value > INT64_MAX:
            self.errors.append(f"could not parse {self.cur.literal} as integer")
            return None

        return IntegerLiteral(self.cur, value)

    def parse_string_literal(self) -> Expression:
        return StringLiteral(self.cur, self.cur.literal)

    def parse_boolean(self) -> Expression:
        return Boolean(self.cur, self.cur_is(TT.TRUE))

    def parse_prefix_expression(self) -> Optional[Expression]:
        op_tok = self.cur
        self.advance()

        right = self.parse_expression(Precedence.PREFIX)
        if right is None:
            return None

        return PrefixExpression(op_tok, op_tok.literal, right)

    def parse_grouped_expression(self) -> Optional[Expression]:
        self.advance()
        expression = self.parse_expression(Precedence.LOWEST)

        if not self.expect_peek(TT.RPAREN):
            return None

        return expression

    def parse_if_expression(self) -> Optional[Expression]:
        """if ( COND ) { ... } [else { ... }]"""
        if_tok = self.cur

        if not self.expect_peek(TT.LPAREN):
            return None

        self.advance()
        condition = self.parse_expression(Precedence.LOWEST)

        if not self.expect_peek(TT.RPAREN):
            return None

        if not self.expect_peek(TT.LBRACE):
            return None

        consequence = self.parse_block_statement()
        alternative = None

        if self.peek_is(TT.ELSE):
            self.advance()

            if not self.expect_peek(TT.LBRACE):
                return None

            alternative = self.parse_block_statement()

        if condition is None:
            return None

        return IfExpression(if_tok, condition, consequence, alternative)

    def parse_function_literal(self) -> Optional[Expression]:
        """fn ( PARAMS ) { BODY }"""
        fn_tok = self.cur

        if not self.expect_peek(TT.LPAREN):
            return None

        params = self.parse_function_parameters()
        if params is None:
            return None

        if not self.expect_peek(TT.LBRACE):
            return None

        body = self.parse_block_statement()

        return FunctionLiteral(fn_tok, params, body)

    def parse_function_parameters(self) -> Optional[Tuple[Identifier, ...]]:
        params: List[Identifier] = []

        if self.peek_is(TT.RPAREN):
            self.advance()
            return ()

        if not self.expect_peek(TT.IDENT):
            return None
        params.append(Identifier(self.cur, self.cur.literal))

        while self.peek_is(TT.COMMA):
            self.advance()
            if not self.expect_peek(TT.IDENT):
                return None
            params.append(Identifier(self.cur, self.cur.literal))

        if not self.expect_peek(TT.RPAREN):
            return None

        return tuple(params)

    def parse_array_literal(self) -> Optional[Expression]:
        bracket = self.cur
        elements = self.parse_expression_list(TT.RBRACKET)
        if elements is None:
            return None

        return ArrayLiteral(bracket, elements)

    def parse_hash_literal(self) -> Optional[Expression]:
        """{ KEY : VALUE, ... }"""
        brace = self.cur
        pairs: List[Tuple[Expression, Expression]] = []

        while not self.peek_is(TT.RBRACE):
            self.advance()
            key = self.parse_expression(Precedence.LOWEST)

            if not self.expect_peek(TT.COLON):
                return None

            self.advance()
            value = self.parse_expression(Precedence.LOWEST)

            if key is None or value is None:
                return None

            pairs.append((key, value))

            if not self.peek_is(TT.RBRACE) and not self.expect_peek(TT.COMMA):
                return None

        if not self.expect_peek(TT.RBRACE):
            return None

        return HashLiteral(brace, tuple(pairs))

    # ------------------------------------------------------------------------
    # Infix handlers
    # ------------------------------------------------------------------------

    def parse_infix_expression(self, left: Expression) -> Optional[Expression]:
        op_tok = self.cur
        precedence = self.cur_precedence()
        self.advance()

        right = self.parse_expression(precedence)
        if right is None:
            return None

        return InfixExpression(op_tok, left, op_tok.literal, right)

    def parse_call_expression(self, function: Expression) -> Optional[Expression]:
        paren = self.cur
        arguments = self.parse_expression_list(TT.RPAREN)
        if arguments is None:
            return None

        return CallExpression(paren, function, arguments)

    def parse_index_expression(self, left: Expression) -> Optional[Expression]:
        bracket = self.cur
        self.advance()
        index = self.parse_expression(Precedence.LOWEST)

        if not self.expect_peek(TT.RBRACKET):
            return None

        if index is None:
            return None

        return IndexExpression(bracket, left, index)

    def parse_expression_list(self, end: TT) -> Optional[Tuple[Expression, ...]]:
        """Comma separated expressions up to `end`; cur starts on the opener"""
        items: List[Optional[Expression]] = []

        if self.peek_is(end):
            self.advance()
            return ()

        self.advance()
        items.append(self.parse_expression(Precedence.LOWEST))

        while self.peek_is(TT.COMMA):
            self.advance()
            self.advance()
            items.append(self.parse_expression(Precedence.LOWEST))

        if not self.expect_peek(end):
            return None

        parsed = [item for item in items if item is not None]
        if len(parsed) != len(items):
            return None

        return tuple(parsed)


# ============================================================================
# Convenience
# ============================================================================

def parse(source: str) -> Tuple[Program, List[str]]:
    """Parse source, returning the program and the diagnostics list"""
    parser = Parser(Lexer(source))
    program = parser.parse_program()
    return program, parser.errors


def parse_source(source: str) -> Program:
    """Parse source, raising ParseError if any diagnostic was recorded"""
    program, errors = parse(source)
    if errors:
        raise ParseError(errors)
    return program


if __name__ == '__main__':
    args = [arg for arg in sys.argv[1:] if not arg.startswith('--')]
    path = args[0] if args else '-'

    if path == '-':
        src = sys.stdin.read()
    else:
        with open(path, encoding='utf-8') as fh:
            src = fh.read()

    try:
        tree = parse_source(src)
    except ParseError as exc:
        for msg in exc.errors:
            print(msg, file=sys.stderr)
        sys.exit(1)

    print(to_lark(tree).pretty())
