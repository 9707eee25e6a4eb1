"""prompt_toolkit lexer for live monkey syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer import token_spans
from .token_types import TT

# Style string for each highlight group.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "boolean": "ansicyan",
    "number": "ansimagenta",
    "string": "ansigreen",
    "identifier": "",
    "builtin": "bold ansiyellow",
    "operator": "",
    "punctuation": "",
    "error": "bold ansired",
}

_TT_GROUP = {
    TT.LET: "keyword",
    TT.FUNCTION: "keyword",
    TT.IF: "keyword",
    TT.ELSE: "keyword",
    TT.RETURN: "keyword",
    TT.TRUE: "boolean",
    TT.FALSE: "boolean",
    TT.INT: "number",
    TT.STRING: "string",
    TT.IDENT: "identifier",
    TT.ASSIGN: "operator",
    TT.PLUS: "operator",
    TT.MINUS: "operator",
    TT.BANG: "operator",
    TT.ASTERISK: "operator",
    TT.SLASH: "operator",
    TT.LT: "operator",
    TT.GT: "operator",
    TT.EQ: "operator",
    TT.NOT_EQ: "operator",
    TT.COMMA: "punctuation",
    TT.SEMICOLON: "punctuation",
    TT.COLON: "punctuation",
    TT.LPAREN: "punctuation",
    TT.RPAREN: "punctuation",
    TT.LBRACE: "punctuation",
    TT.RBRACE: "punctuation",
    TT.LBRACKET: "punctuation",
    TT.RBRACKET: "punctuation",
    TT.ILLEGAL: "error",
}

# Names resolved by the builtin registry when nothing shadows them.
_BUILTIN_NAMES = frozenset({"len", "first", "last", "rest", "push", "puts"})


def _highlight_line(text: str) -> StyleAndTextTuples:
    """Split one line into (style, text) fragments covering every character."""
    if not text:
        return [("", "")]

    fragments: StyleAndTextTuples = []
    cursor = 0

    for tok, start, end in token_spans(text):
        if start > cursor:
            fragments.append(("", text[cursor:start]))

        group = _TT_GROUP.get(tok.type, "")
        if tok.type is TT.IDENT and tok.literal in _BUILTIN_NAMES:
            group = "builtin"
        fragments.append((GROUP_STYLE.get(group, ""), text[start:end]))
        cursor = end

    # Whitespace after the last token.
    if cursor < len(text):
        fragments.append(("", text[cursor:]))

    return fragments or [("", text)]


class MonkeyLexer(Lexer):
    """prompt_toolkit Lexer that highlights monkey source line by line."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        source_lines = document.lines
        styled: dict[int, StyleAndTextTuples] = {}

        def line_fragments(lineno: int) -> StyleAndTextTuples:
            hit = styled.get(lineno)
            if hit is None:
                text = source_lines[lineno] if 0 <= lineno < len(source_lines) else ""
                hit = styled[lineno] = _highlight_line(text)
            return hit

        return line_fragments
