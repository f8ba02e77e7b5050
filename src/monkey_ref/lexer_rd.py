"""
Lexer for Monkey

Tokenizes Monkey source code into a stream of tokens.

Features:
- Single forward pass, no backtracking
- Pull-based: next_token() hands out one token at a time
- Position tracking (line, column)
"""

from typing import List

from .token_types import TT, Tok

# ============================================================================
# Lexer Implementation
# ============================================================================

class Lexer:
    """
    Monkey lexer.

    Once the input is exhausted every further call to next_token() returns
    an EOF token, so the parser can keep pulling without bounds checks.
    """

    # Keyword mapping
    KEYWORDS = {
        'fn': TT.FUNCTION,
        'let': TT.LET,
        'true': TT.TRUE,
        'false': TT.FALSE,
        'if': TT.IF,
        'else': TT.ELSE,
        'return': TT.RETURN,
    }

    # Two-character operators are tried before the single-character table
    TWO_CHAR_OPERATORS = {
        '==': TT.EQ,
        '!=': TT.NOT_EQ,
    }

    OPERATORS = {
        '=': TT.ASSIGN,
        '+': TT.PLUS,
        '-': TT.MINUS,
        '!': TT.BANG,
        '*': TT.ASTERISK,
        '/': TT.SLASH,
        '<': TT.LT,
        '>': TT.GT,
        ',': TT.COMMA,
        ';': TT.SEMICOLON,
        '(': TT.LPAREN,
        ')': TT.RPAREN,
        '{': TT.LBRACE,
        '}': TT.RBRACE,
    }

    WHITESPACE = (' ', '\t', '\n', '\r')

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1

    # ========================================================================
    # Character Navigation
    # ========================================================================

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character, '' past the end"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return ''

    def advance(self) -> str:
        """Consume current character"""
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def skip_whitespace(self) -> None:
        while self.peek() in self.WHITESPACE:
            self.advance()

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def next_token(self) -> Tok:
        """Scan and return the next token"""
        self.skip_whitespace()

        line, column = self.line, self.column
        ch = self.peek()

        if ch == '':
            return Tok(TT.EOF, '', line, column)

        two = ch + self.peek(1)
        if two in self.TWO_CHAR_OPERATORS:
            self.advance()
            self.advance()
            return Tok(self.TWO_CHAR_OPERATORS[two], two, line, column)

        if ch in self.OPERATORS:
            self.advance()
            return Tok(self.OPERATORS[ch], ch, line, column)

        if ch == '"':
            return Tok(TT.STRING, self.scan_string(), line, column)

        if is_letter(ch):
            ident = self.scan_identifier()
            return Tok(self.KEYWORDS.get(ident, TT.IDENT), ident, line, column)

        if is_digit(ch):
            return Tok(TT.INT, self.scan_number(), line, column)

        self.advance()
        return Tok(TT.ILLEGAL, ch, line, column)

    def tokenize(self) -> List[Tok]:
        """Tokenize entire source, return token list ending with EOF"""
        tokens: List[Tok] = []
        while True:
            tok = self.next_token()
            tokens.append(tok)
            if tok.type == TT.EOF:
                return tokens

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_identifier(self) -> str:
        start = self.pos
        while is_letter(self.peek()):
            self.advance()
        return self.source[start:self.pos]

    def scan_number(self) -> str:
        start = self.pos
        while is_digit(self.peek()):
            self.advance()
        return self.source[start:self.pos]

    def scan_string(self) -> str:
        """Scan "..." and return the text between the quotes (no escapes)."""
        self.advance()  # opening quote
        start = self.pos
        while self.peek() not in ('"', ''):
            self.advance()
        value = self.source[start:self.pos]
        if self.peek() == '"':
            self.advance()
        return value


def is_letter(ch: str) -> bool:
    return ch == '_' or ('a' <= ch <= 'z') or ('A' <= ch <= 'Z')


def is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


def tokenize(source: str) -> List[Tok]:
    """Convenience wrapper: tokenize source and return token list"""
    return Lexer(source).tokenize()
