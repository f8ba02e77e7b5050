from __future__ import annotations

import sys
import threading
from typing import Any, Callable, Dict, Optional

from .ast_nodes import (
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
    Node,
    PrefixExpression,
    Program,
    ReturnStatement,
    StringLiteral,
)
from .types import Environment, MkInteger, MkObject, MkString, MkValue, native_bool

from .eval.blocks import eval_block, eval_if, eval_let, eval_program, eval_return
from .eval.expr import eval_infix, eval_prefix
from .eval.fn import eval_call, eval_function_literal
from .eval.helpers import new_error

EvalFunc = Callable[[Optional[Node], Environment], Optional[MkValue]]
EvalHandler = Callable[[Any, Environment, EvalFunc], Optional[MkValue]]

# Evaluation runs on its own thread with this stack size and at least this
# recursion limit. One Monkey call level is about fifteen Python frames.
EVAL_RECURSION_LIMIT = 50_000
EVAL_STACK_SIZE = 256 * 1024 * 1024

# ---------------- Public API ----------------

def evaluate(node: Optional[Node], env: Optional[Environment] = None) -> Optional[MkObject]:
    """Evaluate a Program or any statement/expression subtree.

    Returns None ("no value") for let statements and for node kinds that have
    no evaluation rule; evaluation errors come back as MkError values.
    Unbounded recursion still ends in RecursionError, raised to the caller.
    """
    if env is None:
        env = Environment()

    return _run_on_eval_stack(node, env)

def _run_on_eval_stack(node: Optional[Node], env: Environment) -> Optional[MkObject]:
    if sys.getrecursionlimit() < EVAL_RECURSION_LIMIT:
        sys.setrecursionlimit(EVAL_RECURSION_LIMIT)

    outcome: Dict[str, Any] = {}

    def target() -> None:
        try:
            outcome["value"] = eval_node(node, env)
        except BaseException as exc:
            outcome["error"] = exc

    previous = threading.stack_size(EVAL_STACK_SIZE)
    try:
        worker = threading.Thread(target=target, name="monkey-eval", daemon=True)
        worker.start()
    finally:
        threading.stack_size(previous)
    worker.join()

    if "error" in outcome:
        raise outcome["error"]
    return outcome.get("value")

# ---------------- Core evaluator ----------------

def eval_node(n: Optional[Node], env: Environment) -> Optional[MkValue]:
    if n is None:
        return None

    handler = _NODE_DISPATCH.get(type(n))
    if handler is None:
        return None

    return handler(n, env, eval_node)

def _eval_expression_statement(n: ExpressionStatement, env: Environment, eval_func: EvalFunc) -> Optional[MkValue]:
    return eval_func(n.expression, env)

def _eval_identifier(n: Identifier, env: Environment, eval_func: EvalFunc) -> MkValue:
    val = env.get(n.value)
    if val is None:
        return new_error(f"identifier not found: {n.value}")

    return val

def _eval_integer(n: IntegerLiteral, env: Environment, eval_func: EvalFunc) -> MkInteger:
    return MkInteger(n.value)

def _eval_string(n: StringLiteral, env: Environment, eval_func: EvalFunc) -> MkString:
    return MkString(n.value)

def _eval_boolean(n: BooleanLiteral, env: Environment, eval_func: EvalFunc) -> MkValue:
    return native_bool(n.value)

# Every handler takes (node, env, eval_func).
_NODE_DISPATCH: Dict[type, EvalHandler] = {
    # Statements
    Program: eval_program,
    ExpressionStatement: _eval_expression_statement,
    BlockStatement: eval_block,
    LetStatement: eval_let,
    ReturnStatement: eval_return,
    # Expressions
    Identifier: _eval_identifier,
    IntegerLiteral: _eval_integer,
    StringLiteral: _eval_string,
    BooleanLiteral: _eval_boolean,
    PrefixExpression: eval_prefix,
    InfixExpression: eval_infix,
    IfExpression: eval_if,
    FunctionLiteral: eval_function_literal,
    CallExpression: eval_call,
}
