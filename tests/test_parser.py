import pytest

from stacc.ast import (
    Assign, BinaryOp, Call, FunctionDef, Ident, Literal, Pop, PopStatement, Print, Push, UnaryOp,
)
from stacc.errors import InvalidLiteral, UnexpectedEof, UnexpectedToken
from stacc.lexer import Span, Token, TokenKind, tokenize
from stacc.parser import Parser, parse_program


def expr(source):
    return str(Parser(tokenize(source)).parse_expression())


def test_multiplication_binds_tighter_than_addition():
    assert expr('1 + 2 * 3') == '(+ 1 (* 2 3))'
    assert expr('2 * 3 + 1') == '(+ (* 2 3) 1)'


def test_binary_operators_are_left_associative():
    assert expr('1 - 2 - 3') == '(- (- 1 2) 3)'
    assert expr('8 / 4 / 2') == '(/ (/ 8 4) 2)'
    assert expr('a or b or c') == '(or (or a b) c)'


def test_precedence_ladder():
    assert expr('a or b and c') == '(or a (and b c))'
    assert expr('a and b == c') == '(and a (== b c))'
    assert expr('a == b < c') == '(== a (< b c))'
    assert expr('a < b + c') == '(< a (+ b c))'
    assert expr('1 < 2 == true') == '(== (< 1 2) true)'


def test_prefix_operators():
    assert expr('-1 + 2') == '(+ (- 1) 2)'
    assert expr('-2 * 3') == '(* (- 2) 3)'
    assert expr('not a and b') == '(and (not a) b)'
    assert expr('not not a') == '(not (not a))'
    assert expr('- - 1') == '(- (- 1))'


def test_grouping():
    assert expr('(1 + 2) * 3') == '(* (+ 1 2) 3)'
    assert expr('((x))') == 'x'


def test_pop_expression():
    assert expr('pop + 1') == '(+ pop 1)'
    node = Parser(tokenize('pop')).parse_expression()
    assert isinstance(node, Pop)


def test_literals():
    assert Parser(tokenize('42')).parse_expression() == Literal(42)
    assert Parser(tokenize('2.5')).parse_expression() == Literal(2.5)
    assert Parser(tokenize('"hi there"')).parse_expression() == Literal('hi there')
    assert Parser(tokenize('true')).parse_expression() == Literal(True)
    assert Parser(tokenize('false')).parse_expression() == Literal(False)


def test_expression_threshold_stops_at_weaker_operator():
    parser = Parser(tokenize('1 * 2 + 3'))
    assert str(parser.parse_expression(11)) == '(* 1 2)'
    assert parser.peek() is TokenKind.PLUS


def test_simple_statements():
    statements = parse_program('set x 1\npush x\npop\nprint x\ncall f\n')
    assert statements == [
        Assign('x', Literal(1)),
        Push(Ident('x')),
        PopStatement(),
        Print(Ident('x')),
        Call('f'),
    ]
    assert [str(s) for s in statements] == ['(set x 1)', '(push x)', 'pop', '(print x)', '(call f)']


def test_function_definition():
    (func,) = parse_program('begin add: a b\n    push a + b\nend\n')
    assert isinstance(func, FunctionDef)
    assert func.name == 'add'
    assert func.params == ['a', 'b']
    assert func.body == [Push(BinaryOp('+', Ident('a'), Ident('b')))]
    assert str(func) == '(define add (a b) (push (+ a b)))'


def test_function_without_parameters():
    (func,) = parse_program('begin hello:\nprint "hi"\nprint "there"\nend')
    assert func.params == []
    assert len(func.body) == 2


def test_nested_function_definition():
    source = 'begin outer: x\n  begin inner: y\n    push y\n  end\n  call inner\nend\nprint 1\n'
    outer, stmt = parse_program(source)
    assert isinstance(outer.body[0], FunctionDef)
    assert outer.body[1] == Call('inner')
    assert stmt == Print(Literal(1))


def test_blank_lines_and_comments_are_transparent():
    source = '\n\n{ header }\nprint 1\n\n\n{ between }\n\nprint 2\n\n'
    assert parse_program(source) == [Print(Literal(1)), Print(Literal(2))]


def test_missing_trailing_newline_is_tolerated():
    assert parse_program('print 1') == [Print(Literal(1))]


def test_empty_program():
    assert parse_program('') == []
    assert parse_program('{ nothing here }\n') == []


def test_parser_accepts_any_token_iterable():
    tokens = [
        Token(TokenKind.PUSH, 'push', Span(0, 4)),
        Token(TokenKind.MINUS, '-', Span(5, 6)),
        Token(TokenKind.FLOAT, '1.5', Span(6, 9)),
        Token(TokenKind.NEWLINE, '\n', Span(9, 10)),
        Token(TokenKind.EOF, '', Span(10, 10)),
    ]
    assert Parser(tokens).parse() == [Push(UnaryOp('-', Literal(1.5)))]


def test_unexpected_statement_start():
    with pytest.raises(UnexpectedToken) as exc:
        parse_program('end\n')
    assert exc.value.expected == 'statement'
    assert exc.value.found is TokenKind.END


def test_set_requires_identifier():
    source = 'set x 1\nset 1 2\n'
    with pytest.raises(UnexpectedToken) as exc:
        parse_program(source)
    assert exc.value.expected == 'identifier'
    assert exc.value.found is TokenKind.INT
    assert exc.value.span == Span(12, 13)
    assert exc.value.describe(source) == 'Parse error at 2:5 - Expected identifier, got integer literal'


def test_trailing_garbage_in_expression():
    with pytest.raises(UnexpectedToken) as exc:
        parse_program('print 1 2\n')
    assert exc.value.expected == 'operator or terminator'
    assert exc.value.found is TokenKind.INT


def test_unclosed_grouping():
    with pytest.raises(UnexpectedToken) as exc:
        parse_program('print (1 + 2\n')
    assert str(exc.value) == 'Parse error - Expected ), got newline'


def test_missing_expression():
    with pytest.raises(UnexpectedToken) as exc:
        parse_program('push\n')
    assert exc.value.expected == 'expression'
    assert exc.value.found is TokenKind.NEWLINE


def test_call_requires_function_identifier():
    with pytest.raises(UnexpectedToken) as exc:
        parse_program('call 3\n')
    assert exc.value.expected == 'function identifier'


def test_function_body_cannot_be_empty():
    with pytest.raises(UnexpectedToken) as exc:
        parse_program('begin f:\nend\n')
    assert exc.value.found is TokenKind.END


def test_function_body_rejects_non_statement():
    with pytest.raises(UnexpectedToken) as exc:
        parse_program('begin f:\nprint 1\n"oops"\nend\n')
    assert exc.value.expected == "statement or 'end'"
    assert exc.value.found is TokenKind.STRING


def test_unterminated_function_is_an_error():
    with pytest.raises(UnexpectedToken) as exc:
        parse_program('begin f: a\npush a\n')
    assert exc.value.expected == "statement or 'end'"
    assert exc.value.found is TokenKind.EOF


def test_end_of_input_inside_function_header_is_an_error():
    # at top level the same error would just end the program
    with pytest.raises(UnexpectedEof):
        parse_program('begin f: a\n')


def test_unexpected_character():
    with pytest.raises(UnexpectedToken) as exc:
        parse_program('set x 1 $ 2\n')
    assert exc.value.found is TokenKind.ERROR


def test_integer_literal_out_of_range():
    with pytest.raises(InvalidLiteral) as exc:
        parse_program('push 99999999999999999999\n')
    assert exc.value.text == '99999999999999999999'
    assert exc.value.span == Span(5, 25)
    assert exc.value.message == "'99999999999999999999' is not a valid integer literal"


def test_parse_stops_cleanly_at_end_of_input():
    parser = Parser(tokenize('print 1\n\n'))
    assert parser.parse() == [Print(Literal(1))]
    with pytest.raises(UnexpectedEof):
        parser.parse_statement()
