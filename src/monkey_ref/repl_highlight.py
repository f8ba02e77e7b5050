"""Live syntax colouring for the Monkey REPL prompt."""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer_rd import Lexer as MonkeyTokenizer
from .token_types import TT, Tok

STYLES: Dict[str, str] = {
    "keyword": "bold ansiblue",
    "literal": "ansimagenta",
    "string": "ansigreen",
    "call": "bold ansicyan",
    "illegal": "bg:ansired ansiwhite",
}

_KEYWORD_TYPES = {TT.FUNCTION, TT.LET, TT.IF, TT.ELSE, TT.RETURN}
_LITERAL_TYPES = {TT.INT, TT.TRUE, TT.FALSE}


def classify(tok: Tok, following: Optional[Tok]) -> str:
    """Style group of a token; '' leaves it uncoloured."""
    if tok.type in _KEYWORD_TYPES:
        return "keyword"
    if tok.type in _LITERAL_TYPES:
        return "literal"
    if tok.type == TT.STRING:
        return "string"
    if tok.type == TT.ILLEGAL:
        return "illegal"
    if tok.type == TT.IDENT and following is not None and following.type == TT.LPAREN:
        return "call"
    return ""


def _source_span(line: str, tok: Tok) -> tuple[int, int]:
    """[start, end) of a token in its line. String tokens drop their quotes, so put them back."""
    start = tok.column - 1
    if tok.type != TT.STRING:
        return start, start + len(tok.value)

    end = start + 1 + len(tok.value)
    if line[end:end + 1] == '"':
        end += 1
    return start, end


def _highlight_line(line: str) -> StyleAndTextTuples:
    fragments: StyleAndTextTuples = []
    tokens: List[Tok] = [t for t in MonkeyTokenizer(line).tokenize() if t.type != TT.EOF]
    cursor = 0

    for idx, tok in enumerate(tokens):
        start, end = _source_span(line, tok)
        if start > cursor:
            fragments.append(("", line[cursor:start]))

        following = tokens[idx + 1] if idx + 1 < len(tokens) else None
        fragments.append((STYLES.get(classify(tok, following), ""), line[start:end]))
        cursor = end

    if cursor < len(line):
        fragments.append(("", line[cursor:]))

    return fragments or [("", "")]


class MonkeyLexer(Lexer):
    """Colours every line of the prompt buffer from the Monkey token stream."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        styled = [_highlight_line(line) for line in document.lines]

        def get_line(lineno: int) -> StyleAndTextTuples:
            if 0 <= lineno < len(styled):
                return styled[lineno]
            return [("", "")]

        return get_line
