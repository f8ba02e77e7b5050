from __future__ import annotations

from textwrap import dedent

import pytest

from monkey_ref.ast_nodes import (
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    ExpressionStatement,
    FunctionLiteral,
    Identifier,
    IfExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    PrefixExpression,
    ReturnStatement,
    StringLiteral,
)
from tests.support.harness import parse_clean


def _only_expression(code: str):
    program = parse_clean(code)
    assert len(program.statements) == 1
    stmt = program.statements[0]
    assert isinstance(stmt, ExpressionStatement)
    return stmt.expression


LET_CASES = [
    pytest.param("let x = 5;", "x", IntegerLiteral(5), id="let-int"),
    pytest.param("let y = true;", "y", BooleanLiteral(True), id="let-bool"),
    pytest.param("let foobar = y;", "foobar", Identifier("y"), id="let-ident"),
    pytest.param('let s = "hi";', "s", StringLiteral("hi"), id="let-string"),
    pytest.param(
        "let z = 1 + 2;",
        "z",
        InfixExpression(IntegerLiteral(1), "+", IntegerLiteral(2)),
        id="let-infix",
    ),
]


@pytest.mark.parametrize("source, name, value", LET_CASES)
def test_let_statements(source: str, name: str, value) -> None:
    program = parse_clean(source)
    assert program.statements == [LetStatement(Identifier(name), value)]
    assert program.statements[0].token_literal() == "let"


def test_let_skips_tokens_before_semicolon() -> None:
    program = parse_clean("let x = 5 6;")
    assert program.statements == [LetStatement(Identifier("x"), IntegerLiteral(5))]


def test_let_function_literal_needs_no_semicolon() -> None:
    program = parse_clean(
        dedent(
            """\
            let f = fn(x) { x }
            f(1)
            """
        )
    )
    assert len(program.statements) == 2
    assert isinstance(program.statements[0], LetStatement)
    assert isinstance(program.statements[0].value, FunctionLiteral)
    assert isinstance(program.statements[1].expression, CallExpression)


RETURN_CASES = [
    pytest.param("return 5;", IntegerLiteral(5), id="return-int"),
    pytest.param("return x;", Identifier("x"), id="return-ident"),
    pytest.param("return 5", IntegerLiteral(5), id="return-no-semicolon"),
    pytest.param("return;", None, id="return-bare"),
    pytest.param("return", None, id="return-bare-eof"),
]


@pytest.mark.parametrize("source, value", RETURN_CASES)
def test_return_statements(source: str, value) -> None:
    program = parse_clean(source)
    assert program.statements == [ReturnStatement(value)]
    assert program.statements[0].token_literal() == "return"


def test_bare_return_inside_block() -> None:
    fn = _only_expression("fn() { return }")
    assert fn.body.statements == [ReturnStatement(None)]


def test_multiple_statements_in_order() -> None:
    program = parse_clean("let a = 1; a; return a;")
    kinds = [type(s) for s in program.statements]
    assert kinds == [LetStatement, ExpressionStatement, ReturnStatement]


LITERAL_CASES = [
    pytest.param("foobar;", Identifier("foobar"), id="identifier"),
    pytest.param("5;", IntegerLiteral(5), id="integer"),
    pytest.param("true;", BooleanLiteral(True), id="true"),
    pytest.param("false;", BooleanLiteral(False), id="false"),
    pytest.param('"hello world";', StringLiteral("hello world"), id="string"),
    pytest.param("9223372036854775807", IntegerLiteral(9223372036854775807), id="int64-max"),
]


@pytest.mark.parametrize("source, expected", LITERAL_CASES)
def test_literal_expressions(source: str, expected) -> None:
    assert _only_expression(source) == expected


PREFIX_CASES = [
    pytest.param("!5;", "!", IntegerLiteral(5), id="bang-int"),
    pytest.param("-15;", "-", IntegerLiteral(15), id="minus-int"),
    pytest.param("!true;", "!", BooleanLiteral(True), id="bang-true"),
    pytest.param("!false;", "!", BooleanLiteral(False), id="bang-false"),
    pytest.param("-a", "-", Identifier("a"), id="minus-ident"),
]


@pytest.mark.parametrize("source, operator, right", PREFIX_CASES)
def test_prefix_expressions(source: str, operator: str, right) -> None:
    assert _only_expression(source) == PrefixExpression(operator, right)


INFIX_CASES = [
    pytest.param(f"5 {op} 5;", op, id=f"infix-{name}")
    for op, name in (
        ("+", "plus"),
        ("-", "minus"),
        ("*", "mul"),
        ("/", "div"),
        (">", "gt"),
        ("<", "lt"),
        ("==", "eq"),
        ("!=", "neq"),
    )
]


@pytest.mark.parametrize("source, operator", INFIX_CASES)
def test_infix_expressions(source: str, operator: str) -> None:
    assert _only_expression(source) == InfixExpression(
        IntegerLiteral(5), operator, IntegerLiteral(5)
    )


def test_boolean_infix() -> None:
    assert _only_expression("true != false") == InfixExpression(
        BooleanLiteral(True), "!=", BooleanLiteral(False)
    )


def test_if_expression() -> None:
    expr = _only_expression("if (x < y) { x }")
    assert expr == IfExpression(
        InfixExpression(Identifier("x"), "<", Identifier("y")),
        BlockStatement([ExpressionStatement(Identifier("x"))]),
        None,
    )


def test_if_else_expression() -> None:
    expr = _only_expression("if (x < y) { x } else { y }")
    assert isinstance(expr, IfExpression)
    assert expr.alternative == BlockStatement([ExpressionStatement(Identifier("y"))])


def test_if_with_empty_blocks() -> None:
    expr = _only_expression("if (true) { } else { }")
    assert expr.consequence.statements == []
    assert expr.alternative.statements == []


def test_function_literal() -> None:
    expr = _only_expression("fn(x, y) { x + y; }")
    assert expr == FunctionLiteral(
        [Identifier("x"), Identifier("y")],
        BlockStatement(
            [ExpressionStatement(InfixExpression(Identifier("x"), "+", Identifier("y")))]
        ),
    )


PARAM_CASES = [
    pytest.param("fn() {};", [], id="params-none"),
    pytest.param("fn(x) {};", ["x"], id="params-one"),
    pytest.param("fn(x, y, z) {};", ["x", "y", "z"], id="params-three"),
]


@pytest.mark.parametrize("source, names", PARAM_CASES)
def test_function_parameters(source: str, names) -> None:
    expr = _only_expression(source)
    assert [p.value for p in expr.parameters] == names


def test_call_expression() -> None:
    expr = _only_expression("add(1, 2 * 3, 4 + 5);")
    assert expr == CallExpression(
        Identifier("add"),
        [
            IntegerLiteral(1),
            InfixExpression(IntegerLiteral(2), "*", IntegerLiteral(3)),
            InfixExpression(IntegerLiteral(4), "+", IntegerLiteral(5)),
        ],
    )


def test_call_without_arguments() -> None:
    assert _only_expression("f()") == CallExpression(Identifier("f"), [])


def test_immediate_call_of_function_literal() -> None:
    expr = _only_expression("fn(x) { x }(5)")
    assert isinstance(expr, CallExpression)
    assert isinstance(expr.function, FunctionLiteral)
    assert expr.arguments == [IntegerLiteral(5)]


def test_chained_calls() -> None:
    expr = _only_expression("f(1)(2)")
    assert expr == CallExpression(CallExpression(Identifier("f"), [IntegerLiteral(1)]), [IntegerLiteral(2)])


def test_empty_program() -> None:
    assert parse_clean("").statements == []
    assert parse_clean("  \n\t").statements == []
