import pytest

from linger.ast import (
    Assign, BinaryOp, Block, Call, ConstStmt, ExprStmt, ForStmt, Ident,
    IfStmt, LambdaExpr, LetStmt, Literal, Operator, OperatorAssign,
    PrimitiveCall, ReturnStmt, UnaryOp, WhileStmt,
)
from linger.builtin_function import Builtin
from linger.errors import (
    Expected, ExpectedAssignment, ExpectedAssignmentOrInitialization,
    ExpectedBlock, ExpectedStatement, KeywordAsParam, KeywordAsProc,
    KeywordAsVar, MultipleSameNamedProcs, NoMain, UnexpectedEOF,
    UnexpectedToken,
)
from linger.interpreter import parse_program


def num(value):
    return Literal(value, 'Num')


def main_body(body):
    program = parse_program('proc main() {\n' + body + '\n}')
    return program.procedure('main').body.statements


def expr_of(source):
    [stmt] = main_body(source + ';')
    assert isinstance(stmt, ExprStmt)
    return stmt.expr


def test_multiplication_binds_tighter_than_addition():
    assert expr_of('1 + 2 * 3') == BinaryOp(
        Operator.PLUS, num(1), BinaryOp(Operator.TIMES, num(2), num(3)))


def test_binary_operators_are_left_associative():
    assert expr_of('1 - 2 - 3') == BinaryOp(
        Operator.MINUS, BinaryOp(Operator.MINUS, num(1), num(2)), num(3))


def test_and_binds_tighter_than_or():
    assert expr_of('a || b && c') == BinaryOp(
        Operator.LOGIC_OR, Ident('a'), BinaryOp(Operator.LOGIC_AND, Ident('b'), Ident('c')))


def test_comparison_levels():
    assert expr_of('a < b == c >= d') == BinaryOp(
        Operator.EQ,
        BinaryOp(Operator.LT, Ident('a'), Ident('b')),
        BinaryOp(Operator.GTE, Ident('c'), Ident('d')))


def test_unary_binds_tighter_than_binary():
    assert expr_of('-x * y') == BinaryOp(
        Operator.TIMES, UnaryOp(Operator.MINUS, Ident('x')), Ident('y'))
    assert expr_of('!a == b') == BinaryOp(
        Operator.EQ, UnaryOp(Operator.LOGIC_NOT, Ident('a')), Ident('b'))


def test_increment_forms():
    assert expr_of('i++') == UnaryOp(Operator.POST_INCREMENT, Ident('i'))
    assert expr_of('--i') == UnaryOp(Operator.PRE_DECREMENT, Ident('i'))


def test_chained_calls():
    assert expr_of('f(1)(2, 3)') == Call(Call(Ident('f'), [num(1)]), [num(2), num(3)])


def test_print_is_a_primitive_call():
    assert expr_of('print(1, "a", true)') == PrimitiveCall(
        Builtin.PRINT, [num(1), Literal('a', 'Str'), Literal(True, 'Bool')])


def test_lambda_with_expression_body():
    [stmt] = main_body('let add = (a, b) -> a + b;')
    assert stmt == LetStmt('add', LambdaExpr(
        ['a', 'b'], [ExprStmt(BinaryOp(Operator.PLUS, Ident('a'), Ident('b')))]))


def test_lambda_with_block_body():
    [stmt] = main_body('let f = () -> { let x = 1; return x; };')
    assert stmt.expr == LambdaExpr([], [LetStmt('x', num(1)), ReturnStmt(Ident('x'))])


def test_lambda_with_bare_return():
    [stmt] = main_body('let f = () -> return;')
    assert stmt.expr == LambdaExpr([], [ReturnStmt(None)])


def test_parenthesised_identifier_is_not_a_lambda():
    assert expr_of('(a) + 1') == BinaryOp(Operator.PLUS, Ident('a'), num(1))
    assert expr_of('(1 + 2) * 3') == BinaryOp(
        Operator.TIMES, BinaryOp(Operator.PLUS, num(1), num(2)), num(3))


def test_immediately_invoked_lambda():
    assert expr_of('((x) -> x)(1)') == Call(
        LambdaExpr(['x'], [ExprStmt(Ident('x'))]), [num(1)])


def test_statement_forms():
    stmts = main_body('const c = 1; x = 2; x *= 3; { x; } while (true) { break; }')
    assert stmts[0] == ConstStmt('c', num(1))
    assert stmts[1] == Assign('x', num(2))
    assert stmts[2] == OperatorAssign(Operator.TIMES, 'x', num(3))
    assert stmts[3] == Block([ExprStmt(Ident('x'))])
    assert isinstance(stmts[4], WhileStmt)


def test_if_else_if_chain():
    [stmt] = main_body('if (a) { 1; } else if (b) { 2; } else if (c) { 3; } else { 4; }')
    assert isinstance(stmt, IfStmt)
    assert [cond for cond, _ in stmt.else_ifs] == [Ident('b'), Ident('c')]
    assert stmt.else_block == Block([ExprStmt(num(4))])


def test_for_statement():
    [stmt] = main_body('for (let i = 0; i < 3; i += 1) { print(i); }')
    assert stmt == ForStmt(
        LetStmt('i', num(0)),
        BinaryOp(Operator.LT, Ident('i'), num(3)),
        OperatorAssign(Operator.PLUS, 'i', num(1)),
        [ExprStmt(PrimitiveCall(Builtin.PRINT, [Ident('i')]))])


def test_for_init_must_initialize_or_assign():
    with pytest.raises(ExpectedAssignmentOrInitialization):
        main_body('for (print(1); i < 3; i++) { }')


def test_for_step_must_assign():
    with pytest.raises(ExpectedAssignment):
        main_body('for (let i = 0; i < 3; print(i)) { }')


def test_bodies_must_be_blocks():
    with pytest.raises(ExpectedBlock):
        main_body('for (let i = 0; i < 3; i++) print(i);')
    with pytest.raises(ExpectedBlock):
        main_body('if (true) print(1);')
    with pytest.raises(ExpectedBlock):
        main_body('while (true) break;')


def test_keyword_as_variable():
    with pytest.raises(KeywordAsVar) as exc:
        main_body('let if = 1;')
    assert exc.value.keyword == 'if'
    with pytest.raises(KeywordAsVar):
        main_body('while = 3;')
    with pytest.raises(KeywordAsVar):
        main_body('return 1 + for;')


def test_keyword_as_procedure_name():
    with pytest.raises(KeywordAsProc):
        parse_program('proc while() { } proc main() { }')


def test_keyword_as_parameter():
    with pytest.raises(KeywordAsParam):
        parse_program('proc f(a, let) { } proc main() { }')
    with pytest.raises(KeywordAsParam):
        main_body('let f = (if) -> 1;')


def test_parenthesised_keyword_is_a_variable_error():
    with pytest.raises(KeywordAsVar):
        main_body('(if);')


def test_trailing_comma_in_arguments():
    with pytest.raises(UnexpectedToken) as exc:
        main_body('f(1, 2,);')
    assert exc.value.token.value == ','


def test_trailing_comma_in_parameters():
    with pytest.raises(UnexpectedToken):
        parse_program('proc f(a,) { } proc main() { }')


def test_missing_semicolon():
    with pytest.raises(Expected) as exc:
        main_body('let x = 1')
    assert exc.value.target == ';'


def test_empty_lambda_body():
    with pytest.raises(ExpectedStatement):
        main_body('let f = () -> ')


def test_unexpected_end_of_input():
    with pytest.raises(UnexpectedEOF):
        parse_program('proc main() { let x = 1;')


def test_duplicate_procedure():
    with pytest.raises(MultipleSameNamedProcs) as exc:
        parse_program('proc f() { } proc main() { } proc f() { }')
    assert exc.value.name == 'f'


def test_missing_main():
    with pytest.raises(NoMain):
        parse_program('proc helper() { }')


def test_leftover_tokens():
    with pytest.raises(UnexpectedToken):
        parse_program('proc main() { } 42')


def test_string_contents_are_never_syntax():
    assert expr_of('print("proc {")') == PrimitiveCall(Builtin.PRINT, [Literal('proc {', 'Str')])


def test_parsing_is_deterministic():
    source = 'proc f(x) { return x * 2; } proc main() { for (let i = 0; i < 2; i++) { f(i); } }'
    assert parse_program(source) == parse_program(source)
