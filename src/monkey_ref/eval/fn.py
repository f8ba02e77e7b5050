from __future__ import annotations

from typing import Callable, List, Optional

from ..ast_nodes import CallExpression, FunctionLiteral, Node
from ..types import NULL, Environment, MkFunction, MkObject, MkReturnValue, MkValue, is_error
from .helpers import new_error, type_name

EvalFunc = Callable[[Optional[Node], Environment], Optional[MkValue]]

def eval_function_literal(n: FunctionLiteral, env: Environment, eval_func: Optional[EvalFunc] = None) -> MkFunction:
    # Capture the defining environment itself; the body runs only on call.
    return MkFunction(parameters=n.parameters, body=n.body, env=env)

def eval_call(n: CallExpression, env: Environment, eval_func: EvalFunc) -> Optional[MkObject]:
    function = eval_func(n.function, env)
    if is_error(function):
        return function

    args = eval_arguments(n.arguments, env, eval_func)
    if len(args) == 1 and is_error(args[0]):
        return args[0]

    return apply_function(function, args, eval_func)

def eval_arguments(arg_nodes: List[Optional[Node]], env: Environment, eval_func: EvalFunc) -> List[MkObject]:
    """Left to right; the first error is returned alone and later args are skipped."""
    values: List[MkObject] = []

    for node in arg_nodes:
        val = eval_func(node, env)
        if is_error(val):
            return [val]
        values.append(val if val is not None else NULL)

    return values

def apply_function(fn: Optional[MkObject], args: List[MkObject], eval_func: EvalFunc) -> Optional[MkObject]:
    """
    Call semantics:
    - callee env is enclosed by the closure env, not the caller's
    - params bind positionally; surplus args are ignored and missing
      params stay unbound (arity is not checked)
    - a return signal is unwrapped here; an exhausted body yields its
      last value, or NULL when there is none
    """
    if not isinstance(fn, MkFunction):
        return new_error(f"not a function: {type_name(fn)}")

    call_env = extend_function_env(fn, args)
    result = eval_func(fn.body, call_env)

    if isinstance(result, MkReturnValue):
        return result.value
    if result is None:
        return NULL
    return result

def extend_function_env(fn: MkFunction, args: List[MkObject]) -> Environment:
    env = Environment.new_enclosed(fn.env)

    for param, arg in zip(fn.parameters, args):
        env.set(param.value, arg)

    return env
