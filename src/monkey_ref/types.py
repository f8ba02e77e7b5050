from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from typing_extensions import TypeAlias, TypeGuard

from .ast_nodes import BlockStatement, Identifier

# ---------- Value Model ----------

INTEGER_OBJ = "INTEGER"
BOOLEAN_OBJ = "BOOLEAN"
NULL_OBJ = "NULL"
STRING_OBJ = "STRING"
RETURN_VALUE_OBJ = "RETURN_VALUE"
ERROR_OBJ = "ERROR"
FUNCTION_OBJ = "FUNCTION"


class MkObject:
    """Base of every runtime value. inspect() is the display text."""

    def type(self) -> str:
        raise NotImplementedError

    def inspect(self) -> str:
        return repr(self)


@dataclass
class MkInteger(MkObject):
    value: int
    def type(self) -> str:
        return INTEGER_OBJ
    def __repr__(self) -> str:
        return str(self.value)


@dataclass(eq=False)
class MkBoolean(MkObject):
    value: bool
    def type(self) -> str:
        return BOOLEAN_OBJ
    def __repr__(self) -> str:
        return "true" if self.value else "false"


@dataclass(eq=False)
class MkNull(MkObject):
    def type(self) -> str:
        return NULL_OBJ
    def __repr__(self) -> str:
        return "null"


@dataclass
class MkString(MkObject):
    value: str
    def type(self) -> str:
        return STRING_OBJ
    def __repr__(self) -> str:
        return self.value


@dataclass
class MkReturnValue(MkObject):
    """Internal control signal for `return`; unwrapped at call boundaries."""
    value: MkValue
    def type(self) -> str:
        return RETURN_VALUE_OBJ
    def __repr__(self) -> str:
        return self.value.inspect()


@dataclass
class MkError(MkObject):
    message: str
    def type(self) -> str:
        return ERROR_OBJ
    def __repr__(self) -> str:
        return f"ERROR: {self.message}"


@dataclass(eq=False)
class MkFunction(MkObject):
    parameters: List[Identifier]
    body: BlockStatement
    env: Environment            # Closure environment, shared not copied
    def type(self) -> str:
        return FUNCTION_OBJ
    def __repr__(self) -> str:
        params = ", ".join(p.value for p in self.parameters)
        return f"fn({params}) {self.body.to_source_text()}"


# Built once; ==/!= on non-integers compares these by identity.
TRUE = MkBoolean(True)
FALSE = MkBoolean(False)
NULL = MkNull()


def native_bool(value: bool) -> MkBoolean:
    return TRUE if value else FALSE


MkValue: TypeAlias = (
    MkInteger
    | MkBoolean
    | MkNull
    | MkString
    | MkReturnValue
    | MkError
    | MkFunction
)


def is_error(value: Optional[MkObject]) -> TypeGuard[MkError]:
    return isinstance(value, MkError)


# ---------- Environment ----------

@dataclass(eq=False)
class Environment:
    """Chained identifier → value mapping. Lookups fall back to `outer`."""
    store: Dict[str, MkValue] = field(default_factory=dict)
    outer: Optional[Environment] = None

    @classmethod
    def new_enclosed(cls, outer: Environment) -> Environment:
        return cls(outer=outer)

    def get(self, name: str) -> Optional[MkValue]:
        if name in self.store:
            return self.store[name]

        if self.outer is not None:
            return self.outer.get(name)

        return None

    def set(self, name: str, val: MkValue) -> MkValue:
        self.store[name] = val
        return val

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def __repr__(self) -> str:
        names = ", ".join(sorted(self.store))
        depth = 0
        cur = self.outer
        while cur is not None:
            depth += 1
            cur = cur.outer
        return f"<Environment names=[{names}] depth={depth}>"
