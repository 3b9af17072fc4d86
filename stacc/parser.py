"""Parser for the Stacc language.

The parser pulls tokens lazily from any iterable of `Token` (normally
`stacc.lexer.tokenize`) and produces a list of statement nodes.

Statements are line oriented: every form except a function definition is
terminated by a NEWLINE token. Statement dispatch is a direct mapping from
the lookahead keyword to a parse routine.

Expressions are parsed by precedence climbing. Each infix operator has a
(left, right) binding power pair where right = left + 1, which makes all
binary operators left-associative; prefix operators bind tighter than any
infix operator.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional, Tuple

from .ast import (
    Node, Ident, Literal, BinaryOp, UnaryOp, Pop,
    FunctionDef, Assign, Push, Print, Call, PopStatement,
)
from .errors import UnexpectedToken, InvalidLiteral, UnexpectedEof
from .lexer import Span, Token, TokenKind, tokenize


INFIX_BINDING_POWER: Dict[TokenKind, Tuple[int, int]] = {
    TokenKind.OR: (1, 2),
    TokenKind.AND: (3, 4),
    TokenKind.EQUAL: (5, 6),
    TokenKind.NOTEQUAL: (5, 6),
    TokenKind.LESSTHAN: (7, 8),
    TokenKind.MORETHAN: (7, 8),
    TokenKind.LESSEQUAL: (7, 8),
    TokenKind.MOREEQUAL: (7, 8),
    TokenKind.PLUS: (9, 10),
    TokenKind.MINUS: (9, 10),
    TokenKind.STAR: (11, 12),
    TokenKind.SLASH: (11, 12),
}

PREFIX_BINDING_POWER: Dict[TokenKind, int] = {
    TokenKind.MINUS: 51,
    TokenKind.NOT: 101,
}

# Tokens that may follow a complete expression without being an operator
EXPRESSION_TERMINATORS = (TokenKind.EOF, TokenKind.RPAR, TokenKind.NEWLINE)

# Operators the infix loop will look at; `not` is listed so that a stray
# prefix operator stops the expression instead of being reported here.
INFIX_CANDIDATES = set(INFIX_BINDING_POWER) | {TokenKind.NOT}

LITERAL_KINDS = (
    TokenKind.INT, TokenKind.FLOAT, TokenKind.STRING, TokenKind.TRUE, TokenKind.FALSE,
)

INT64_MIN = -2 ** 63
INT64_MAX = 2 ** 63 - 1


class Parser:
    def __init__(self, tokens: Iterable[Token]):
        self.tokens = iter(tokens)
        self.lookahead: Optional[Token] = None
        self.last: Optional[Token] = None
        self.nesting = 0
        self.statement_parsers: Dict[TokenKind, Callable[[], Node]] = {
            TokenKind.SET: self.parse_set,
            TokenKind.PUSH: self.parse_push,
            TokenKind.POP: self.parse_pop_statement,
            TokenKind.PRINT: self.parse_print,
            TokenKind.CALL: self.parse_call,
            TokenKind.BEGIN: self.parse_function_def,
        }

    # Token handling

    def peek_token(self) -> Token:
        if self.lookahead is None:
            token = next(self.tokens, None)
            if token is None:
                end = self.last.span.end if self.last is not None else 0
                token = Token(TokenKind.EOF, '', Span(end, end))
            self.lookahead = token
        return self.lookahead

    def peek(self) -> TokenKind:
        return self.peek_token().kind

    def at(self, kind: TokenKind) -> bool:
        return self.peek() is kind

    def next_token(self) -> Token:
        token = self.peek_token()
        # EOF stays in the lookahead slot; the source is never read past it
        if token.kind is not TokenKind.EOF:
            self.lookahead = None
        self.last = token
        return token

    def consume(self, expected: TokenKind) -> Token:
        token = self.next_token()
        if token.kind is not expected:
            raise UnexpectedToken(str(expected), token.kind, token.span)
        return token

    def ident(self, expected: str = 'identifier') -> str:
        token = self.next_token()
        if token.kind is not TokenKind.IDENT:
            raise UnexpectedToken(expected, token.kind, token.span)
        return token.text

    # Statements

    def parse(self) -> List[Node]:
        """Parse statements until the end of input."""
        statements: List[Node] = []
        while True:
            try:
                statements.append(self.parse_statement())
            except UnexpectedEof:
                # Only the end of input between top level statements is a
                # normal stop; inside a function body it is an error.
                if self.nesting:
                    raise
                break
        return statements

    def parse_statement(self) -> Node:
        kind = self.peek()
        if kind is TokenKind.NEWLINE:
            self.skip_newlines()
            return self.parse_statement()
        if kind is TokenKind.EOF:
            raise UnexpectedEof(self.peek_token().span)
        parse = self.statement_parsers.get(kind)
        if parse is None:
            token = self.next_token()
            raise UnexpectedToken('statement', token.kind, token.span)
        return parse()

    def skip_newlines(self):
        while self.at(TokenKind.NEWLINE):
            self.next_token()

    def is_statement(self) -> bool:
        return self.peek() in self.statement_parsers

    def parse_set(self) -> Assign:
        self.consume(TokenKind.SET)
        name = self.ident()
        expr = self.parse_expression()
        self.consume(TokenKind.NEWLINE)
        return Assign(name, expr)

    def parse_push(self) -> Push:
        self.consume(TokenKind.PUSH)
        expr = self.parse_expression()
        self.consume(TokenKind.NEWLINE)
        return Push(expr)

    def parse_pop_statement(self) -> PopStatement:
        self.consume(TokenKind.POP)
        self.consume(TokenKind.NEWLINE)
        return PopStatement()

    def parse_print(self) -> Print:
        self.consume(TokenKind.PRINT)
        expr = self.parse_expression()
        self.consume(TokenKind.NEWLINE)
        return Print(expr)

    def parse_call(self) -> Call:
        self.consume(TokenKind.CALL)
        name = self.ident('function identifier')
        self.consume(TokenKind.NEWLINE)
        return Call(name)

    def parse_function_def(self) -> FunctionDef:
        # begin <ident> : <param>* NEWLINE <statement>+ end
        self.consume(TokenKind.BEGIN)
        name = self.ident()
        self.consume(TokenKind.COLON)
        params: List[str] = []
        while self.at(TokenKind.IDENT):
            params.append(self.next_token().text)
        self.consume(TokenKind.NEWLINE)

        body: List[Node] = []
        self.nesting += 1
        while True:
            body.append(self.parse_statement())
            self.skip_newlines()
            if self.at(TokenKind.END):
                break
            if not self.is_statement():
                token = self.next_token()
                raise UnexpectedToken("statement or 'end'", token.kind, token.span)
        self.nesting -= 1
        self.consume(TokenKind.END)
        return FunctionDef(name, params, body)

    # Expressions (precedence climbing)

    def parse_expression(self, min_bp: int = 0) -> Node:
        left = self.parse_prefix()

        while True:
            token = self.peek_token()
            if token.kind in EXPRESSION_TERMINATORS:
                break
            if token.kind not in INFIX_CANDIDATES:
                self.next_token()
                raise UnexpectedToken('operator or terminator', token.kind, token.span)
            binding = INFIX_BINDING_POWER.get(token.kind)
            if binding is None:
                break
            left_bp, right_bp = binding
            if left_bp < min_bp:
                break
            self.next_token()
            right = self.parse_expression(right_bp)
            left = BinaryOp(token.text, left, right)
        return left

    def parse_prefix(self) -> Node:
        token = self.peek_token()
        kind = token.kind
        if kind is TokenKind.IDENT:
            self.next_token()
            return Ident(token.text)
        if kind is TokenKind.POP:
            self.next_token()
            return Pop()
        if kind in LITERAL_KINDS:
            return self.parse_literal()
        if kind is TokenKind.LPAR:
            self.next_token()
            expr = self.parse_expression()
            self.consume(TokenKind.RPAR)
            return expr
        if kind in PREFIX_BINDING_POWER:
            self.next_token()
            operand = self.parse_expression(PREFIX_BINDING_POWER[kind])
            return UnaryOp(token.text, operand)
        if kind is TokenKind.EOF:
            raise UnexpectedEof(token.span)
        self.next_token()
        raise UnexpectedToken('expression', kind, token.span)

    def parse_literal(self) -> Literal:
        token = self.next_token()
        kind, text = token.kind, token.text
        if kind is TokenKind.INT:
            try:
                value = int(text)
            except ValueError:
                raise InvalidLiteral(kind, text, token.span)
            if not INT64_MIN <= value <= INT64_MAX:
                raise InvalidLiteral(kind, text, token.span)
            return Literal(value)
        if kind is TokenKind.FLOAT:
            try:
                return Literal(float(text))
            except ValueError:
                raise InvalidLiteral(kind, text, token.span)
        if kind is TokenKind.STRING:
            return Literal(text[1:-1])
        return Literal(kind is TokenKind.TRUE)


def parse_program(source: str) -> List[Node]:
    """Tokenize and parse a whole Stacc source text."""
    if not source.endswith('\n'):
        source += '\n'
    return Parser(tokenize(source)).parse()


def parse_statement(source: str) -> Node:
    """Parse exactly one statement, as the REPL does for each input line."""
    if not source.endswith('\n'):
        source += '\n'
    return Parser(tokenize(source)).parse_statement()
