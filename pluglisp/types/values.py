"""Runtime values produced by evaluation.

Collections are immutable: operations on List, Vector and HashMap values
always build new instances. Atom (see pluglisp.types.concurrency) is the one
explicit escape hatch for mutable state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Iterator

from pluglisp.types.expr import SymbolExpr, format_number
from pluglisp.types.nil import NIL, NilType


@dataclass(frozen=True)
class Number:
    value: float
    type_name: ClassVar[str] = "number"

    def __str__(self) -> str:
        return format_number(float(self.value))


@dataclass(frozen=True)
class BigNumber:
    value: int
    type_name: ClassVar[str] = "big-number"

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class String:
    value: str
    type_name: ClassVar[str] = "string"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Boolean:
    value: bool
    type_name: ClassVar[str] = "boolean"

    def __str__(self) -> str:
        return "true" if self.value else "false"


TRUE = Boolean(True)
FALSE = Boolean(False)


def boolean(flag: bool) -> Boolean:
    return TRUE if flag else FALSE


@dataclass(frozen=True)
class Keyword:
    name: str
    type_name: ClassVar[str] = "keyword"

    def __str__(self) -> str:
        return f":{self.name}"


@dataclass(frozen=True)
class ListValue:
    elements: tuple = ()
    type_name: ClassVar[str] = "list"

    def __iter__(self) -> Iterator[Any]:
        return iter(self.elements)

    def __len__(self) -> int:
        return len(self.elements)

    def __str__(self) -> str:
        return "(" + " ".join(str(e) for e in self.elements) + ")"


@dataclass(frozen=True)
class Vector:
    elements: tuple = ()
    type_name: ClassVar[str] = "vector"

    def __iter__(self) -> Iterator[Any]:
        return iter(self.elements)

    def __len__(self) -> int:
        return len(self.elements)

    def __str__(self) -> str:
        return "[" + " ".join(str(e) for e in self.elements) + "]"


@dataclass(frozen=True)
class HashMap:
    # Never mutated after construction; copy to derive a new map
    elements: dict = field(default_factory=dict)
    type_name: ClassVar[str] = "hash-map"

    def __len__(self) -> int:
        return len(self.elements)

    def __str__(self) -> str:
        if not self.elements:
            return "{}"
        parts = [f'"{k}" {v}' for k, v in self.elements.items()]
        return "{" + " ".join(parts) + "}"


@dataclass(frozen=True)
class BuiltinFunctionRef:
    name: str
    type_name: ClassVar[str] = "built-in"

    def __str__(self) -> str:
        return f"#<built-in:{self.name}>"


@dataclass(frozen=True)
class ArithmeticFunctionRef:
    operation: str
    type_name: ClassVar[str] = "built-in"

    def __str__(self) -> str:
        return f"#<built-in:{self.operation}>"


@dataclass(frozen=True, eq=False)
class PartialFunction:
    original: Any
    bound_args: tuple = ()
    type_name: ClassVar[str] = "partial"

    def __str__(self) -> str:
        return f"#<partial:{self.original}>"


@dataclass(frozen=True, eq=False)
class ComplementFunction:
    predicate: Any
    type_name: ClassVar[str] = "complement"

    def __str__(self) -> str:
        return f"#<complement:{self.predicate}>"


@dataclass(frozen=True, eq=False)
class JuxtFunction:
    functions: tuple = ()
    type_name: ClassVar[str] = "juxt"

    def __str__(self) -> str:
        return "#<juxt>"


@dataclass(frozen=True, eq=False)
class CompFunction:
    functions: tuple = ()
    type_name: ClassVar[str] = "comp"

    def __str__(self) -> str:
        return "#<comp>"


@dataclass(frozen=True)
class Quoted:
    """Code as data: a quoted expression that is never evaluated."""

    expr: Any
    type_name: ClassVar[str] = "quoted"

    def __str__(self) -> str:
        if isinstance(self.expr, SymbolExpr):
            return self.expr.name
        return str(self.expr)


@dataclass(eq=False)
class Module:
    name: str
    exports: dict = field(default_factory=dict)
    env: Any = None
    type_name: ClassVar[str] = "module"

    def __str__(self) -> str:
        return f"#<module:{self.name}>"


CALLABLE_TYPES: tuple = (
    BuiltinFunctionRef,
    ArithmeticFunctionRef,
    PartialFunction,
    ComplementFunction,
    JuxtFunction,
    CompFunction,
)


def type_name(value: Any) -> str:
    return getattr(value, "type_name", type(value).__name__)


def is_truthy(value: Any) -> bool:
    """false, nil, 0, the empty string and empty lists/vectors are falsy."""
    match value:
        case Boolean(value=flag):
            return flag
        case NilType():
            return False
        case Number(value=n) | BigNumber(value=n):
            return n != 0
        case String(value=s):
            return s != ""
        case ListValue() | Vector():
            return len(value) > 0
    return value is not None


def values_equal(left: Any, right: Any) -> bool:
    """Structural equality; numbers compare across Number and BigNumber."""
    if isinstance(left, (Number, BigNumber)) and isinstance(right, (Number, BigNumber)):
        return left.value == right.value
    if isinstance(left, (ListValue, Vector)) and type(left) is type(right):
        return len(left) == len(right) and all(
            values_equal(a, b) for a, b in zip(left.elements, right.elements)
        )
    if isinstance(left, HashMap) and isinstance(right, HashMap):
        return left.elements.keys() == right.elements.keys() and all(
            values_equal(v, right.elements[k]) for k, v in left.elements.items()
        )
    return left == right


__all__ = [
    "NIL",
    "NilType",
    "Number",
    "BigNumber",
    "String",
    "Boolean",
    "TRUE",
    "FALSE",
    "boolean",
    "Keyword",
    "ListValue",
    "Vector",
    "HashMap",
    "BuiltinFunctionRef",
    "ArithmeticFunctionRef",
    "PartialFunction",
    "ComplementFunction",
    "JuxtFunction",
    "CompFunction",
    "Quoted",
    "Module",
    "CALLABLE_TYPES",
    "type_name",
    "is_truthy",
    "values_equal",
]
