from __future__ import annotations

import os as _os
from typing import Iterable, List, Optional

from .types import MkObject

DEBUG_PY_TRACE_ENV = "MONKEY_DEBUG_PY_TRACE"

_TRUTHY_ENV = {"1", "true", "yes", "on"}


def debug_py_trace_enabled() -> bool:
    """True when MONKEY_DEBUG_PY_TRACE asks for Python tracebacks on internal failures."""
    raw = _os.environ.get(DEBUG_PY_TRACE_ENV)
    if raw is None:
        return False
    return raw.strip().lower() in _TRUTHY_ENV


def set_debug_py_trace(enabled: bool) -> None:
    if enabled:
        _os.environ[DEBUG_PY_TRACE_ENV] = "1"
    else:
        _os.environ.pop(DEBUG_PY_TRACE_ENV, None)


def format_parse_errors(errors: Iterable[str]) -> List[str]:
    """One line per parse error, tab-indented under a header."""
    lines = ["parser errors:"]
    lines.extend(f"\t{msg}" for msg in errors)
    return lines


def render_value(value: Optional[MkObject]) -> Optional[str]:
    """Display text of an evaluation result, None when there is no value."""
    if value is None:
        return None
    return value.inspect()
