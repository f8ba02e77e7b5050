from __future__ import annotations

from typing import Optional

from ..types import FALSE, NULL, TRUE, MkError, MkInteger, MkObject

_INT64_MASK = (1 << 64) - 1
_INT64_SIGN = 1 << 63


def is_truthy(val: Optional[MkObject]) -> bool:
    """NULL/FALSE falsy, TRUE truthy, integers by nonzero, anything else falsy."""
    if val is NULL or val is FALSE:
        return False
    if val is TRUE:
        return True

    match val:
        case MkInteger(value=num):
            return num != 0
        case _:
            return False

def new_error(message: str) -> MkError:
    return MkError(message)

def type_name(val: Optional[MkObject]) -> str:
    # "no value" operands only arise from node kinds without a rule
    if val is None:
        return "NONE"
    return val.type()

def wrap_int64(value: int) -> int:
    """Two's-complement wraparound into the signed 64-bit range."""
    value &= _INT64_MASK
    if value & _INT64_SIGN:
        value -= 1 << 64
    return value

def trunc_div(left: int, right: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(left) // abs(right)
    if (left < 0) != (right < 0):
        quotient = -quotient
    return quotient
