"""
Lexer for monkey

Turns source text into tokens one at a time, on demand.

Features:
- Single-pass, no backtracking (one character of lookahead)
- Never raises: unknown characters become ILLEGAL tokens
- EOF is sticky: once reached, every further call returns it again
"""

from typing import Iterator, List, Tuple

from .token_types import TT, Tok, lookup_ident

# ============================================================================
# Lexer Implementation
# ============================================================================

_WHITESPACE = (' ', '\t', '\n', '\r')

# Single characters that map straight to a token kind
SINGLE_CHAR = {
    '+': TT.PLUS,
    '-': TT.MINUS,
    '*': TT.ASTERISK,
    '/': TT.SLASH,
    '<': TT.LT,
    '>': TT.GT,
    ',': TT.COMMA,
    ';': TT.SEMICOLON,
    ':': TT.COLON,
    '(': TT.LPAREN,
    ')': TT.RPAREN,
    '{': TT.LBRACE,
    '}': TT.RBRACE,
    '[': TT.LBRACKET,
    ']': TT.RBRACKET,
}

# Escapes understood inside string literals; anything else is kept verbatim
ESCAPES = {
    '"': '"',
    '\\': '\\',
    'n': '\n',
    't': '\t',
    'r': '\r',
}


def is_letter(ch: str) -> bool:
    return ('a' <= ch <= 'z') or ('A' <= ch <= 'Z') or ch == '_'


def is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


class Lexer:
    """
    monkey lexer.

    `ch` is the character under the cursor, or '' once the input is exhausted.
    `pos` indexes `ch`; `read_pos` is the next character to be read.
    """

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.read_pos = 0
        self.ch = ''
        self.read_char()

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def next_token(self) -> Tok:
        """Pop the next token from the current scan position"""
        self.skip_whitespace()
        ch = self.ch

        if ch == '':
            return Tok(TT.EOF, '')

        if ch == '=':
            return self.scan_two_char('=', TT.EQ, TT.ASSIGN)

        if ch == '!':
            return self.scan_two_char('=', TT.NOT_EQ, TT.BANG)

        if ch == '"':
            return Tok(TT.STRING, self.scan_string())

        if is_letter(ch):
            word = self.scan_identifier()
            return Tok(lookup_ident(word), word)

        if is_digit(ch):
            return Tok(TT.INT, self.scan_number())

        kind = SINGLE_CHAR.get(ch, TT.ILLEGAL)
        self.read_char()
        return Tok(kind, ch)

    def __iter__(self) -> Iterator[Tok]:
        """Yield tokens up to and including the first EOF"""
        while True:
            tok = self.next_token()
            yield tok
            if tok.type is TT.EOF:
                return

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_two_char(self, second: str, matched: TT, fallback: TT) -> Tok:
        first = self.ch
        if self.peek_char() == second:
            self.read_char()
            literal = first + self.ch
            self.read_char()
            return Tok(matched, literal)

        self.read_char()
        return Tok(fallback, first)

    def scan_identifier(self) -> str:
        start = self.pos
        while is_letter(self.ch):
            self.read_char()
        return self.source[start:self.pos]

    def scan_number(self) -> str:
        start = self.pos
        while is_digit(self.ch):
            self.read_char()
        return self.source[start:self.pos]

    def scan_string(self) -> str:
        """Scan a "..." literal and return its decoded contents"""
        self.read_char()  # opening quote
        chars: List[str] = []

        while self.ch not in ('"', ''):
            if self.ch == '\\' and self.peek_char() != '':
                self.read_char()
                decoded = ESCAPES.get(self.ch)
                chars.append(decoded if decoded is not None else '\\' + self.ch)
            else:
                chars.append(self.ch)
            self.read_char()

        # Unterminated strings run to end of input
        if self.ch == '"':
            self.read_char()

        return ''.join(chars)

    # ========================================================================
    # Utilities
    # ========================================================================

    def read_char(self) -> None:
        if self.read_pos >= len(self.source):
            self.ch = ''
        else:
            self.ch = self.source[self.read_pos]
        self.pos = self.read_pos
        self.read_pos += 1

    def peek_char(self) -> str:
        if self.read_pos >= len(self.source):
            return ''
        return self.source[self.read_pos]

    def skip_whitespace(self) -> None:
        while self.ch in _WHITESPACE:
            self.read_char()


def tokenize(source: str) -> List[Tok]:
    """Convenience function to tokenize source, EOF included"""
    return list(Lexer(source))


def token_spans(source: str) -> List[Tuple[Tok, int, int]]:
    """Tokens with their [start, end) offsets in source, EOF excluded"""
    lexer = Lexer(source)
    spans: List[Tuple[Tok, int, int]] = []

    while True:
        lexer.skip_whitespace()
        start = min(lexer.pos, len(source))
        tok = lexer.next_token()
        if tok.type is TT.EOF:
            return spans
        spans.append((tok, start, min(lexer.pos, len(source))))


if __name__ == '__main__':
    import sys

    for tok in tokenize(sys.stdin.read()):
        print(tok)
