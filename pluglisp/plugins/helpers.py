"""Argument helpers for builtin handlers.

Handlers receive unevaluated expressions and validate their own arity.
"""

from __future__ import annotations

from typing import Sequence

from pluglisp import Expression, LispValue
from pluglisp.errors import PlugLispArityError, PlugLispTypeError
from pluglisp.types.lambda_fn import Function
from pluglisp.types.nil import NilType
from pluglisp.types.values import (
    CALLABLE_TYPES,
    BigNumber,
    Keyword,
    ListValue,
    Number,
    String,
    Vector,
    type_name,
)


def expect_args(name: str, args: Sequence[Expression], count: int) -> None:
    if len(args) != count:
        raise PlugLispArityError(f"{name} requires exactly {count} argument(s), got {len(args)}")


def expect_min_args(name: str, args: Sequence[Expression], count: int) -> None:
    if len(args) < count:
        raise PlugLispArityError(f"{name} requires at least {count} argument(s), got {len(args)}")


def expect_args_range(name: str, args: Sequence[Expression], low: int, high: int) -> None:
    if not low <= len(args) <= high:
        raise PlugLispArityError(
            f"{name} requires {low} to {high} arguments, got {len(args)}"
        )


def eval_args(evaluator, args: Sequence[Expression]) -> list[LispValue]:
    return [evaluator.eval(a) for a in args]


def to_number(name: str, value: LispValue) -> float | int:
    """Python number for a Number (float) or BigNumber (int)."""
    match value:
        case Number(value=n):
            return float(n)
        case BigNumber(value=n):
            return n
    raise PlugLispTypeError(f"{name} expects a number, got {type_name(value)}")


def to_int(name: str, value: LispValue) -> int:
    n = to_number(name, value)
    if isinstance(n, float):
        if not n.is_integer():
            raise PlugLispTypeError(f"{name} expects an integer, got {value}")
        return int(n)
    return n


def to_string(name: str, value: LispValue) -> str:
    if isinstance(value, String):
        return value.value
    raise PlugLispTypeError(f"{name} expects a string, got {type_name(value)}")


def to_key(name: str, value: LispValue) -> str:
    """Hash map key for a String or Keyword."""
    match value:
        case String(value=s):
            return s
        case Keyword(name=k):
            return k
    raise PlugLispTypeError(f"{name}: hash map keys must be strings or keywords")


def to_sequence(name: str, value: LispValue) -> tuple:
    """Elements of a List or Vector; nil counts as empty."""
    match value:
        case ListValue(elements=els) | Vector(elements=els):
            return els
        case NilType():
            return ()
    raise PlugLispTypeError(f"{name} expects a list or vector, got {type_name(value)}")


def is_callable_value(value: LispValue) -> bool:
    return isinstance(value, Function) or isinstance(value, CALLABLE_TYPES)


def to_callable(name: str, value: LispValue) -> LispValue:
    if not is_callable_value(value):
        raise PlugLispTypeError(f"{name} expects a function, got {type_name(value)}")
    return value


def same_kind(original: LispValue, elements: Sequence[LispValue]) -> LispValue:
    """Build a collection of the same kind as `original` (List unless it is a Vector)."""
    if isinstance(original, Vector):
        return Vector(tuple(elements))
    return ListValue(tuple(elements))
