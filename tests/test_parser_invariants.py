from __future__ import annotations

from textwrap import dedent

import pytest

from monkey_ref.ast_nodes import EXPRESSION_TYPES, STATEMENT_TYPES, Program
from monkey_ref.evaluator import _NODE_DISPATCH
from tests.support.harness import parse_clean

ROUND_TRIP_SOURCES = [
    pytest.param("let a = 1 + 2 * 3;", id="let-arith"),
    pytest.param("a + b * c + d / e - f", id="arith-chain"),
    pytest.param("!-a == -!b", id="prefix-mix"),
    pytest.param(
        "let f = fn(x, y) { let z = x * y; return z - 1; };",
        id="fn-with-body",
    ),
    pytest.param("let g = if (a > b) { a } else { b };", id="if-else-value"),
    pytest.param("if (x) { }", id="if-empty"),
    pytest.param("let h = add(1, -2, !true);", id="call-args"),
    pytest.param('let s = "hi" + "there";', id="strings"),
    pytest.param("fn() { return; }", id="bare-return"),
    pytest.param("f(1)(2)(g(3))", id="chained-calls"),
    pytest.param(
        dedent(
            """\
            let fib = fn(n) {
              if (n < 2) { return n; }
              return fib(n - 1) + fib(n - 2);
            };
            fib(10);
            """
        ),
        id="multi-statement",
    ),
]


@pytest.mark.parametrize("source", ROUND_TRIP_SOURCES)
def test_rendering_reparses_to_same_tree(source: str) -> None:
    first = parse_clean(source)
    rendered = first.to_source_text()
    second = parse_clean(rendered)

    assert second == first
    assert second.to_source_text() == rendered


def test_str_matches_source_text() -> None:
    program = parse_clean("let x = 1 + 2;")
    assert str(program) == program.to_source_text() == "let x = (1 + 2);"


def test_token_excluded_from_equality() -> None:
    assert parse_clean("let   x=5;") == parse_clean("let x = 5;")
    assert parse_clean("1 + 2") != parse_clean("2 + 1")


def test_every_node_kind_has_an_evaluation_rule() -> None:
    for node_type in (Program,) + STATEMENT_TYPES + EXPRESSION_TYPES:
        assert node_type in _NODE_DISPATCH, node_type.__name__
