"""Tokenizer for the Stacc language.

Lexing is delegated to a Lark `basic` lexer built from the terminal
grammar below. Lark tokens are converted into our own `Token` records so
the parser only ever deals with `TokenKind` values and `Span` ranges.

Two adjustments are made on top of the raw Lark stream:

* consecutive NEWLINE tokens (for instance lines separated only by a
  comment) are collapsed into one, so blank lines never reach the parser;
* an unrecognized character becomes a single ERROR token, after which the
  stream is terminated with EOF.

The stream always ends with exactly one EOF token.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Tuple

from lark import Lark
from lark.exceptions import UnexpectedCharacters


class TokenKind(Enum):
    """Token kinds; the value is the human readable name used in errors."""
    POP = 'pop'
    PRINT = 'print'
    PUSH = 'push'
    SET = 'set'
    CALL = 'call'
    IDENT = 'identifier'
    INT = 'integer literal'
    FLOAT = 'float literal'
    STRING = 'string literal'
    BEGIN = 'begin'
    END = "'end'"
    TRUE = 'true'
    FALSE = 'false'
    AND = 'and'
    NOT = 'not'
    OR = 'or'
    NEWLINE = 'newline'
    COLON = 'colon'
    LSQB = '['
    RSQB = ']'
    LPAR = '('
    RPAR = ')'
    PLUS = '+'
    MINUS = '-'
    STAR = '*'
    SLASH = '/'
    LESSTHAN = '<'
    MORETHAN = '>'
    LESSEQUAL = '<='
    MOREEQUAL = '>='
    NOTEQUAL = '!='
    EQUAL = '=='
    ERROR = 'error'
    EOF = 'EOF'

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Span:
    """Half-open character range ``[start, end)`` into the source text."""
    start: int
    end: int

    def line_and_column(self, source: str) -> Tuple[int, int]:
        """Return the 0-based (line, column) of the start of the span."""
        line = 0
        column = 0
        for ch in source[:self.start]:
            if ch == '\n':
                line += 1
                column = 0
            else:
                column += 1
        return line, column

    def __len__(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    span: Span

    def __str__(self) -> str:
        return str(self.kind)


STACC_TOKENS = r"""
    start: _token*
    _token: POP | PRINT | PUSH | SET | CALL | BEGIN | END
          | TRUE | FALSE | AND | NOT | OR
          | IDENT | INT | FLOAT | STRING | NEWLINE
          | COLON | LSQB | RSQB | LPAR | RPAR
          | PLUS | MINUS | STAR | SLASH
          | LESSTHAN | MORETHAN | LESSEQUAL | MOREEQUAL | NOTEQUAL | EQUAL

    // Keywords
    POP: "pop"
    PRINT: "print"
    PUSH: "push"
    SET: "set"
    CALL: "call"
    BEGIN: "begin"
    END: "end"
    TRUE: "true"
    FALSE: "false"
    AND: "and"
    NOT: "not"
    OR: "or"

    %import common.CNAME -> IDENT
    %import common.ESCAPED_STRING -> STRING

    // A float needs a fraction or an exponent so plain digits stay INT
    FLOAT.3: /((\d+\.\d+)|(\.\d+))([Ee][+-]?\d+)?/ | /\d+[Ee][+-]?\d+/
    INT.2: /\d+/

    NEWLINE: /(\r?\n)+/

    COLON: ":"
    LSQB: "["
    RSQB: "]"
    LPAR: "("
    RPAR: ")"
    PLUS: "+"
    MINUS: "-"
    STAR: "*"
    SLASH: "/"
    LESSEQUAL: "<="
    MOREEQUAL: ">="
    NOTEQUAL: "!="
    EQUAL: "=="
    LESSTHAN: "<"
    MORETHAN: ">"

    %import common.WS_INLINE

    COMMENT: /\{[^}]*\}/
    %ignore COMMENT
    %ignore WS_INLINE
"""


STACC_LEXER = Lark(
    STACC_TOKENS,
    parser='lalr',
    lexer='basic',
)


def tokenize(source: str) -> Iterator[Token]:
    """Lazily yield the tokens of `source`, terminated by one EOF token."""
    last_kind = None
    try:
        for lark_token in STACC_LEXER.lex(source):
            kind = TokenKind[lark_token.type]
            # Lines separated only by comments or whitespace produce
            # adjacent NEWLINE tokens; the parser expects them merged.
            if kind is TokenKind.NEWLINE and last_kind is TokenKind.NEWLINE:
                continue
            last_kind = kind
            start = lark_token.start_pos
            yield Token(kind, str(lark_token), Span(start, start + len(lark_token)))
    except UnexpectedCharacters as e:
        pos = e.pos_in_stream
        yield Token(TokenKind.ERROR, source[pos], Span(pos, pos + 1))
    end = len(source)
    yield Token(TokenKind.EOF, '', Span(end, end))
