from __future__ import annotations

from dataclasses import dataclass
from textwrap import dedent
from typing import List, Optional, Tuple

import pytest

from monkey.lexer import Lexer, token_spans, tokenize
from monkey.token_types import TT, Tok, lookup_ident


@dataclass(frozen=True)
class Case:
    """Unified lexer case payload."""

    name: str
    source: str
    expected: Optional[Tuple[Tuple[TT, str], ...]] = None
    expected_types: Optional[Tuple[TT, ...]] = None


def _non_eof_tokens(source: str) -> List[Tok]:
    return [token for token in tokenize(source) if token.type != TT.EOF]


BASIC_TOKEN_CASES: List[Case] = [
    Case("int", "123", expected=((TT.INT, "123"),)),
    Case("ident-single", "x", expected=((TT.IDENT, "x"),)),
    Case("ident-snake", "foo_bar", expected=((TT.IDENT, "foo_bar"),)),
    Case("ident-underscore-lead", "_tmp", expected=((TT.IDENT, "_tmp"),)),
    Case("string", '"hello"', expected=((TT.STRING, "hello"),)),
    Case("string-spaces", '"foo bar"', expected=((TT.STRING, "foo bar"),)),
    Case("string-empty", '""', expected=((TT.STRING, ""),)),
    Case("bool-true", "true", expected=((TT.TRUE, "true"),)),
    Case("bool-false", "false", expected=((TT.FALSE, "false"),)),
    Case("digits-split-ident", "12ab", expected=((TT.INT, "12"), (TT.IDENT, "ab"))),
    Case("ident-stops-at-digit", "x1", expected=((TT.IDENT, "x"), (TT.INT, "1"))),
]

OPERATOR_CASES: List[Case] = [
    Case("assign", "=", expected_types=(TT.ASSIGN,)),
    Case("plus", "+", expected_types=(TT.PLUS,)),
    Case("minus", "-", expected_types=(TT.MINUS,)),
    Case("bang", "!", expected_types=(TT.BANG,)),
    Case("asterisk", "*", expected_types=(TT.ASTERISK,)),
    Case("slash", "/", expected_types=(TT.SLASH,)),
    Case("lt", "<", expected_types=(TT.LT,)),
    Case("gt", ">", expected_types=(TT.GT,)),
    Case("eq", "==", expected_types=(TT.EQ,)),
    Case("not-eq", "!=", expected_types=(TT.NOT_EQ,)),
    Case("eq-then-assign", "===", expected_types=(TT.EQ, TT.ASSIGN)),
    Case("bang-bang", "!!", expected_types=(TT.BANG, TT.BANG)),
    Case("spaced-eq", "= =", expected_types=(TT.ASSIGN, TT.ASSIGN)),
    Case("colon", ":", expected_types=(TT.COLON,)),
    Case(
        "delimiters",
        ",;(){}[]",
        expected_types=(
            TT.COMMA,
            TT.SEMICOLON,
            TT.LPAREN,
            TT.RPAREN,
            TT.LBRACE,
            TT.RBRACE,
            TT.LBRACKET,
            TT.RBRACKET,
        ),
    ),
]

KEYWORD_CASES: List[Case] = [
    Case("fn", "fn", expected_types=(TT.FUNCTION,)),
    Case("let", "let", expected_types=(TT.LET,)),
    Case("if-else", "if else", expected_types=(TT.IF, TT.ELSE)),
    Case("return", "return", expected_types=(TT.RETURN,)),
    Case("keyword-prefix-is-ident", "lets", expected_types=(TT.IDENT,)),
    Case("keyword-case-sensitive", "Let", expected_types=(TT.IDENT,)),
]

ILLEGAL_CASES: List[Case] = [
    Case("at-sign", "@", expected=((TT.ILLEGAL, "@"),)),
    Case("question", "a ? b", expected=((TT.IDENT, "a"), (TT.ILLEGAL, "?"), (TT.IDENT, "b"))),
    Case("non-ascii-letter", "é", expected=((TT.ILLEGAL, "é"),)),
    Case("dot", "a.b", expected=((TT.IDENT, "a"), (TT.ILLEGAL, "."), (TT.IDENT, "b"))),
]

STRING_ESCAPE_CASES: List[Case] = [
    Case("escape-quote", r'"say \"hi\""', expected=((TT.STRING, 'say "hi"'),)),
    Case("escape-backslash", r'"a\\b"', expected=((TT.STRING, "a\\b"),)),
    Case("escape-newline", r'"a\nb"', expected=((TT.STRING, "a\nb"),)),
    Case("escape-tab", r'"a\tb"', expected=((TT.STRING, "a\tb"),)),
    Case("escape-cr", r'"a\rb"', expected=((TT.STRING, "a\rb"),)),
    Case("escape-unknown-kept", r'"a\qb"', expected=((TT.STRING, "a\\qb"),)),
    Case("unterminated", '"abc', expected=((TT.STRING, "abc"),)),
    Case("unterminated-trailing-backslash", '"abc\\', expected=((TT.STRING, "abc\\"),)),
]


@pytest.mark.parametrize("case", BASIC_TOKEN_CASES, ids=lambda case: case.name)
def test_basic_tokens(case: Case) -> None:
    tokens = _non_eof_tokens(case.source)

    assert case.expected is not None
    assert [(token.type, token.literal) for token in tokens] == list(case.expected)


@pytest.mark.parametrize("case", OPERATOR_CASES, ids=lambda case: case.name)
def test_operators(case: Case) -> None:
    tokens = _non_eof_tokens(case.source)
    assert case.expected_types is not None
    assert [token.type for token in tokens] == list(case.expected_types)


@pytest.mark.parametrize("case", KEYWORD_CASES, ids=lambda case: case.name)
def test_keywords(case: Case) -> None:
    tokens = _non_eof_tokens(case.source)
    assert case.expected_types is not None
    assert [token.type for token in tokens] == list(case.expected_types)


@pytest.mark.parametrize("case", ILLEGAL_CASES, ids=lambda case: case.name)
def test_illegal_characters(case: Case) -> None:
    tokens = _non_eof_tokens(case.source)
    assert case.expected is not None
    assert [(token.type, token.literal) for token in tokens] == list(case.expected)


@pytest.mark.parametrize("case", STRING_ESCAPE_CASES, ids=lambda case: case.name)
def test_string_escapes(case: Case) -> None:
    tokens = _non_eof_tokens(case.source)
    assert case.expected is not None
    assert len(tokens) == 1
    assert (tokens[0].type, tokens[0].literal) == case.expected[0]


def test_let_statement_tokens() -> None:
    tokens = tokenize("let five = 5;")

    assert [(token.type, token.literal) for token in tokens] == [
        (TT.LET, "let"),
        (TT.IDENT, "five"),
        (TT.ASSIGN, "="),
        (TT.INT, "5"),
        (TT.SEMICOLON, ";"),
        (TT.EOF, ""),
    ]


def test_full_program_tokens() -> None:
    source = dedent(
        """\
        let add = fn(x, y) {
          x + y;
        };
        let result = add(five, ten);
        if (5 < 10) { return true; } else { return false; }
        10 != 9;
        {"foo": "bar"}
        """
    )
    types = [token.type for token in tokenize(source)]

    assert types[:9] == [
        TT.LET,
        TT.IDENT,
        TT.ASSIGN,
        TT.FUNCTION,
        TT.LPAREN,
        TT.IDENT,
        TT.COMMA,
        TT.IDENT,
        TT.RPAREN,
    ]
    assert TT.ILLEGAL not in types
    assert types[-6:] == [
        TT.LBRACE,
        TT.STRING,
        TT.COLON,
        TT.STRING,
        TT.RBRACE,
        TT.EOF,
    ]


def test_whitespace_is_skipped() -> None:
    tokens = _non_eof_tokens(" \t\r\n x \n\t ")
    assert [(token.type, token.literal) for token in tokens] == [(TT.IDENT, "x")]


def test_empty_source_is_eof() -> None:
    assert tokenize("") == [Tok(TT.EOF, "")]


def test_eof_is_sticky() -> None:
    lexer = Lexer("x")

    assert lexer.next_token() == Tok(TT.IDENT, "x")
    for _ in range(3):
        assert lexer.next_token().type == TT.EOF


def test_iteration_stops_after_first_eof() -> None:
    tokens = list(Lexer("1 + 2"))
    assert [token.type for token in tokens] == [TT.INT, TT.PLUS, TT.INT, TT.EOF]


def test_lookup_ident() -> None:
    assert lookup_ident("fn") == TT.FUNCTION
    assert lookup_ident("return") == TT.RETURN
    assert lookup_ident("fnord") == TT.IDENT


def test_token_kind_display_names() -> None:
    assert str(TT.ASSIGN) == "="
    assert str(TT.INT) == "INT"
    assert str(TT.FUNCTION) == "FUNCTION"


def test_token_spans_cover_source_offsets() -> None:
    source = 'let s = "a\\"b";'
    spans = token_spans(source)

    assert [source[start:end] for _, start, end in spans] == [
        "let",
        "s",
        "=",
        '"a\\"b"',
        ";",
    ]
    assert spans[3][0] == Tok(TT.STRING, 'a"b')
