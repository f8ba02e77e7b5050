from __future__ import annotations

from typing import Callable, Optional

from ..ast_nodes import BlockStatement, IfExpression, LetStatement, Node, Program, ReturnStatement
from ..types import NULL, Environment, MkError, MkObject, MkReturnValue, MkValue, is_error
from .helpers import is_truthy

EvalFunc = Callable[[Optional[Node], Environment], Optional[MkValue]]

def eval_program(program: Program, env: Environment, eval_func: EvalFunc) -> Optional[MkObject]:
    """Run top-level statements; unwrap the first return, stop at the first error."""
    result: Optional[MkObject] = None

    for stmt in program.statements:
        result = eval_func(stmt, env)

        match result:
            case MkReturnValue(value=inner):
                return inner
            case MkError():
                return result

    return result

def eval_block(block: BlockStatement, env: Environment, eval_func: EvalFunc) -> Optional[MkObject]:
    """Like eval_program, but a return signal is passed up still wrapped."""
    result: Optional[MkObject] = None

    for stmt in block.statements:
        result = eval_func(stmt, env)

        if isinstance(result, (MkReturnValue, MkError)):
            return result

    return result

def eval_let(n: LetStatement, env: Environment, eval_func: EvalFunc) -> Optional[MkObject]:
    val = eval_func(n.value, env)
    if is_error(val):
        return val

    # A value-less right-hand side still binds, as NULL
    env.set(n.name.value, val if val is not None else NULL)
    return None

def eval_return(n: ReturnStatement, env: Environment, eval_func: EvalFunc) -> MkObject:
    if n.value is None:
        return MkReturnValue(NULL)

    val = eval_func(n.value, env)
    if is_error(val):
        return val

    return MkReturnValue(val if val is not None else NULL)

def eval_if(n: IfExpression, env: Environment, eval_func: EvalFunc) -> Optional[MkObject]:
    condition = eval_func(n.condition, env)
    if is_error(condition):
        return condition

    if is_truthy(condition):
        return eval_func(n.consequence, env)
    if n.alternative is not None:
        return eval_func(n.alternative, env)
    return NULL
