from __future__ import annotations

import pytest
from lark import Token, Tree

from monkey.token_types import TT, Tok
from monkey.tree import (
    BlockStatement,
    Boolean,
    ExpressionStatement,
    FunctionLiteral,
    HashLiteral,
    Identifier,
    IfExpression,
    IndexExpression,
    IntegerLiteral,
    LetStatement,
    Program,
    ReturnStatement,
    StringLiteral,
    is_node,
    to_lark,
)
from tests.support.harness import parse_source


def _ident(name: str) -> Identifier:
    return Identifier(Tok(TT.IDENT, name), name)


def _int(value: int) -> IntegerLiteral:
    return IntegerLiteral(Tok(TT.INT, str(value)), value)


def test_hand_built_let_renders() -> None:
    program = Program(
        (
            LetStatement(
                Tok(TT.LET, "let"),
                _ident("myVar"),
                _ident("anotherVar"),
            ),
        )
    )

    assert str(program) == "let myVar = anotherVar"


@pytest.mark.parametrize(
    "node, expected",
    [
        pytest.param(ReturnStatement(Tok(TT.RETURN, "return")), "return", id="bare-return"),
        pytest.param(
            ReturnStatement(Tok(TT.RETURN, "return"), _int(7)),
            "return 7",
            id="return-value",
        ),
        pytest.param(BlockStatement(Tok(TT.LBRACE, "{")), "{ }", id="empty-block"),
        pytest.param(
            BlockStatement(
                Tok(TT.LBRACE, "{"),
                (
                    ExpressionStatement(Tok(TT.INT, "1"), _int(1)),
                    ExpressionStatement(Tok(TT.INT, "2"), _int(2)),
                ),
            ),
            "{ 1; 2 }",
            id="block-two-statements",
        ),
        pytest.param(
            StringLiteral(Tok(TT.STRING, 'a"b'), 'a"b'),
            '"a\\"b"',
            id="string-escaped-quote",
        ),
        pytest.param(
            StringLiteral(Tok(TT.STRING, "tab\there"), "tab\there"),
            '"tab\\there"',
            id="string-escaped-tab",
        ),
        pytest.param(Boolean(Tok(TT.FALSE, "false"), False), "false", id="boolean"),
        pytest.param(
            IndexExpression(Tok(TT.LBRACKET, "["), _ident("xs"), _int(0)),
            "(xs[0])",
            id="index",
        ),
        pytest.param(
            HashLiteral(Tok(TT.LBRACE, "{"), ((_int(1), _ident("a")), (_int(2), _ident("b")))),
            "{1:a, 2:b}",
            id="hash",
        ),
        pytest.param(
            IfExpression(
                Tok(TT.IF, "if"),
                _ident("ok"),
                BlockStatement(Tok(TT.LBRACE, "{"), (ExpressionStatement(Tok(TT.INT, "1"), _int(1)),)),
            ),
            "if(ok) { 1 }",
            id="if-bare-condition-wrapped",
        ),
        pytest.param(
            FunctionLiteral(
                Tok(TT.FUNCTION, "fn"),
                (_ident("a"), _ident("b")),
                BlockStatement(Tok(TT.LBRACE, "{")),
            ),
            "fn(a, b) { }",
            id="fn-empty-body",
        ),
    ],
)
def test_node_rendering(node, expected: str) -> None:
    assert str(node) == expected


def test_token_literal_comes_from_token() -> None:
    node = IntegerLiteral(Tok(TT.INT, "0042"), 42)

    assert node.token_literal() == "0042"
    assert str(node) == "0042"


def test_block_render_body_has_no_braces() -> None:
    program = parse_source("fn(x) { let y = x; y * 2 }")
    fn = program.statements[0].expression

    assert fn.body.render_body() == "let y = x; (y * 2)"


def test_is_node() -> None:
    assert is_node(_int(1))
    assert not is_node(Tok(TT.INT, "1"))
    assert not is_node("1")


def test_to_lark_labels_and_leaves() -> None:
    tree = to_lark(parse_source("let x = 1 + 2;"))

    assert isinstance(tree, Tree)
    assert tree.data == "program"

    let_stmt = tree.children[0]
    assert let_stmt.data == "let_statement"

    name, value = let_stmt.children
    assert name.data == "identifier"
    assert name.children == [Token("VALUE", "x")]
    assert value.data == "infix_expression"
    assert [c.data if isinstance(c, Tree) else str(c) for c in value.children] == [
        "integer_literal",
        "+",
        "integer_literal",
    ]


def test_to_lark_hash_pairs_and_optional_children() -> None:
    tree = to_lark(parse_source('{"a": 1}; if (x) { 1 }; return'))

    hash_node = tree.children[0].children[0]
    assert hash_node.data == "hash_literal"
    assert hash_node.children[0].data == "pair"
    assert [c.data for c in hash_node.children[0].children] == ["string_literal", "integer_literal"]

    if_node = tree.children[1].children[0]
    # Missing else branch is omitted rather than rendered as a placeholder.
    assert [c.data for c in if_node.children] == ["identifier", "block_statement"]

    ret = tree.children[2]
    assert ret.data == "return_statement"
    assert ret.children == []


def test_to_lark_pretty_dump() -> None:
    dump = to_lark(parse_source("-5")).pretty()

    assert dump.splitlines()[0] == "program"
    assert "prefix_expression" in dump
    assert "integer_literal" in dump
