from __future__ import annotations

from typing import Callable, Optional

from ..ast_nodes import InfixExpression, Node, PrefixExpression
from ..types import (
    FALSE,
    NULL,
    TRUE,
    Environment,
    MkBoolean,
    MkInteger,
    MkObject,
    MkString,
    MkValue,
    is_error,
    native_bool,
)
from .helpers import new_error, trunc_div, type_name, wrap_int64

EvalFunc = Callable[[Optional[Node], Environment], Optional[MkValue]]

# ---------------- Prefix ----------------

def eval_prefix(n: PrefixExpression, env: Environment, eval_func: EvalFunc) -> Optional[MkObject]:
    right = eval_func(n.right, env)
    if is_error(right):
        return right

    match n.operator:
        case '!':
            return eval_bang(right)
        case '-':
            return eval_minus(right)
        case op:
            return new_error(f"unknown operator: {op}{type_name(right)}")

def eval_bang(right: Optional[MkObject]) -> MkBoolean:
    if right is TRUE:
        return FALSE
    if right is FALSE or right is NULL:
        return TRUE

    match right:
        case MkInteger(value=num):
            return native_bool(num == 0)
        case _:
            return FALSE

def eval_minus(right: Optional[MkObject]) -> MkObject:
    if not isinstance(right, MkInteger):
        return new_error(f"unknown operator: -{type_name(right)}")

    return MkInteger(wrap_int64(-right.value))

# ---------------- Infix ----------------

def eval_infix(n: InfixExpression, env: Environment, eval_func: EvalFunc) -> Optional[MkObject]:
    # Right operand first, then left.
    right = eval_func(n.right, env)
    if is_error(right):
        return right

    left = eval_func(n.left, env)
    if is_error(left):
        return left

    return apply_infix(n.operator, left, right)

def apply_infix(op: str, left: Optional[MkObject], right: Optional[MkObject]) -> MkObject:
    match (left, right):
        case (MkInteger(value=lv), MkInteger(value=rv)):
            return eval_integer_infix(op, lv, rv)
        case (MkString(value=lv), MkString(value=rv)):
            return eval_string_infix(op, lv, rv)

    if op == '==':
        return native_bool(left is right)
    if op == '!=':
        return native_bool(left is not right)

    lt, rt = type_name(left), type_name(right)
    if lt != rt:
        return new_error(f"type mismatch: {lt} {op} {rt}")

    return new_error(f"unknown operator: {lt} {op} {rt}")

def eval_integer_infix(op: str, lv: int, rv: int) -> MkObject:
    match op:
        case '+':
            return MkInteger(wrap_int64(lv + rv))
        case '-':
            return MkInteger(wrap_int64(lv - rv))
        case '*':
            return MkInteger(wrap_int64(lv * rv))
        case '/':
            if rv == 0:
                return new_error("division by zero")
            return MkInteger(wrap_int64(trunc_div(lv, rv)))
        case '<':
            return native_bool(lv < rv)
        case '>':
            return native_bool(lv > rv)
        case '==':
            return native_bool(lv == rv)
        case '!=':
            return native_bool(lv != rv)
        case _:
            return new_error(f"unknown operator: INTEGER {op} INTEGER")

def eval_string_infix(op: str, lv: str, rv: str) -> MkObject:
    match op:
        case '+':
            return MkString(lv + rv)
        case '==':
            return native_bool(lv == rv)
        case '!=':
            return native_bool(lv != rv)
        case _:
            return new_error(f"unknown operator: STRING {op} STRING")
