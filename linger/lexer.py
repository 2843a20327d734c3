"""Lexer for the Linger language.

Tokenization is delegated to a Lark lexer: the grammar below declares only
terminals (keywords, identifiers, literals, operators and punctuation) and
is never used to parse. ``Lark.lex`` walks the source once and yields
positioned tokens which are then converted into the parser's own
:class:`Token` objects.

Keywords are declared as plain string terminals. Because every keyword is
also matched by ``IDENT``, Lark turns them into a post-match check on
identifiers, so ``while`` becomes a keyword while ``whilst`` stays an
identifier.

String literals are unescaped here rather than in the parser. Only
``\\n \\t \\r \\0 \\\\ \\"`` are valid escapes; anything else is reported
with the offending character.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List

from lark import Lark
from lark.exceptions import UnexpectedCharacters

from .errors import (
    InvalidEscapeSequence, InvalidNumberLiteral, UnknownToken,
    UnterminatedStringLiteral,
)
from .types import in_int64_range


class TokenKind(Enum):
    KEYWORD = 'keyword'
    IDENT = 'identifier'
    NUMBER = 'number'
    STRING = 'string'
    OPERATOR = 'operator'
    PUNCT = 'punctuation'


@dataclass(frozen=True)
class Token:
    """A lexical token. Equality ignores the source position."""
    kind: TokenKind
    value: Any
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)

    def __str__(self) -> str:
        if self.kind == TokenKind.STRING:
            return f'"{self.value}"'
        return str(self.value)


KEYWORDS = frozenset({
    'proc', 'let', 'const', 'if', 'else', 'while', 'for',
    'return', 'break', 'continue', 'true', 'false',
})


LINGER_GRAMMAR = r"""
    start: _token*
    _token: _keyword | IDENT | NUMBER | STRING | _operator | _punct

    _keyword: PROC | LET | CONST | IF | ELSE | WHILE | FOR
            | RETURN | BREAK | CONTINUE | TRUE | FALSE
    _operator: INC | DEC | ARROW
             | ADD_ASSIGN | SUB_ASSIGN | MUL_ASSIGN | DIV_ASSIGN | MOD_ASSIGN
             | EQ | NE | LE | GE | AND | OR | LT | GT
             | PLUS | MINUS | STAR | SLASH | PERCENT | BANG | ASSIGN
    _punct: LPAREN | RPAREN | LBRACE | RBRACE | COMMA | SEMICOLON

    PROC: "proc"
    LET: "let"
    CONST: "const"
    IF: "if"
    ELSE: "else"
    WHILE: "while"
    FOR: "for"
    RETURN: "return"
    BREAK: "break"
    CONTINUE: "continue"
    TRUE: "true"
    FALSE: "false"

    INC: "++"
    DEC: "--"
    ARROW: "->"
    ADD_ASSIGN: "+="
    SUB_ASSIGN: "-="
    MUL_ASSIGN: "*="
    DIV_ASSIGN: "/="
    MOD_ASSIGN: "%="
    EQ: "=="
    NE: "!="
    LE: "<="
    GE: ">="
    AND: "&&"
    OR: "||"
    LT: "<"
    GT: ">"
    PLUS: "+"
    MINUS: "-"
    STAR: "*"
    SLASH: "/"
    PERCENT: "%"
    BANG: "!"
    ASSIGN: "="

    LPAREN: "("
    RPAREN: ")"
    LBRACE: "{"
    RBRACE: "}"
    COMMA: ","
    SEMICOLON: ";"

    IDENT: /[A-Za-z_][A-Za-z0-9_]*/
    NUMBER: /[0-9]+/
    STRING: /"(?:\\.|[^"\\])*"/s

    LINE_COMMENT: /\/\/[^\n]*/
    %import common.WS
    %ignore WS
    %ignore LINE_COMMENT
"""


LINGER_LEXER = Lark(
    LINGER_GRAMMAR,
    parser='lalr',
    lexer='basic',
)


_KEYWORD_TERMINALS = frozenset(word.upper() for word in KEYWORDS)
_OPERATOR_TERMINALS = frozenset({
    'INC', 'DEC', 'ARROW',
    'ADD_ASSIGN', 'SUB_ASSIGN', 'MUL_ASSIGN', 'DIV_ASSIGN', 'MOD_ASSIGN',
    'EQ', 'NE', 'LE', 'GE', 'AND', 'OR', 'LT', 'GT',
    'PLUS', 'MINUS', 'STAR', 'SLASH', 'PERCENT', 'BANG', 'ASSIGN',
})
_PUNCT_TERMINALS = frozenset({'LPAREN', 'RPAREN', 'LBRACE', 'RBRACE', 'COMMA', 'SEMICOLON'})

_ESCAPES = {
    'n': '\n',
    't': '\t',
    'r': '\r',
    '0': '\0',
    '\\': '\\',
    '"': '"',
}


def unescape(raw: str, line: int = 0, column: int = 0) -> str:
    """Decode the body of a string literal (without its quotes)."""
    chars: List[str] = []
    i = 0
    while i < len(raw):
        c = raw[i]
        if c == '\\':
            escaped = raw[i + 1]
            if escaped not in _ESCAPES:
                raise InvalidEscapeSequence(escaped, line, column)
            chars.append(_ESCAPES[escaped])
            i += 2
            continue
        chars.append(c)
        i += 1
    return ''.join(chars)


def _convert(tok) -> Token:
    kind = tok.type
    if kind in _KEYWORD_TERMINALS:
        return Token(TokenKind.KEYWORD, str(tok), tok.line, tok.column)
    if kind == 'IDENT':
        return Token(TokenKind.IDENT, str(tok), tok.line, tok.column)
    if kind == 'NUMBER':
        value = int(tok)
        if not in_int64_range(value):
            raise InvalidNumberLiteral(str(tok), tok.line, tok.column)
        return Token(TokenKind.NUMBER, value, tok.line, tok.column)
    if kind == 'STRING':
        value = unescape(str(tok)[1:-1], tok.line, tok.column)
        return Token(TokenKind.STRING, value, tok.line, tok.column)
    if kind in _OPERATOR_TERMINALS:
        return Token(TokenKind.OPERATOR, str(tok), tok.line, tok.column)
    if kind in _PUNCT_TERMINALS:
        return Token(TokenKind.PUNCT, str(tok), tok.line, tok.column)
    raise UnknownToken(str(tok), tok.line, tok.column)


def tokenize(source: str) -> List[Token]:
    """Convert Linger source text into a list of tokens.

    Raises a :class:`~linger.errors.TokenizerError` on text that does not
    form a token, on an unterminated string and on an invalid escape.
    """
    tokens: List[Token] = []
    try:
        for tok in LINGER_LEXER.lex(source):
            tokens.append(_convert(tok))
    except UnexpectedCharacters as exc:
        # an opening quote only fails to match when its closing quote is missing
        if exc.char == '"':
            raise UnterminatedStringLiteral(exc.line, exc.column) from None
        raise UnknownToken(exc.char, exc.line, exc.column) from None
    return tokens
