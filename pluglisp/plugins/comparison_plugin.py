from __future__ import annotations

import operator
from typing import Callable

from pluglisp import Expression, LispValue
from pluglisp.errors import PlugLispTypeError
from pluglisp.plugins.base import Plugin
from pluglisp.plugins.helpers import eval_args, expect_min_args
from pluglisp.registry import VARIADIC, Category
from pluglisp.types.values import BigNumber, Number, String, boolean, type_name, values_equal


def equals(evaluator, args: list[Expression]) -> LispValue:
    """(= a b ...) is true when every argument equals the first."""
    expect_min_args("=", args, 1)
    values = eval_args(evaluator, args)
    return boolean(all(values_equal(values[0], v) for v in values[1:]))


def _orderable(name: str, value: LispValue):
    match value:
        case Number(value=n) | BigNumber(value=n):
            return n
        case String(value=s):
            return s
    raise PlugLispTypeError(f"{name} expects numbers or strings, got {type_name(value)}")


def _chain(name: str, compare: Callable) -> Callable:
    def handler(evaluator, args: list[Expression]) -> LispValue:
        expect_min_args(name, args, 2)
        keys = [_orderable(name, v) for v in eval_args(evaluator, args)]
        if len({isinstance(k, str) for k in keys}) > 1:
            raise PlugLispTypeError(f"{name} cannot compare strings with numbers")
        return boolean(all(compare(a, b) for a, b in zip(keys, keys[1:])))

    handler.__name__ = f"compare_{compare.__name__}"
    return handler


class ComparisonPlugin(Plugin):
    name = "comparison"
    description = "Equality and ordering"
    category = Category.COMPARISON

    def functions(self):
        return [
            ("=", VARIADIC, "Equality: (= a b ...)", equals),
            ("<", VARIADIC, "Strictly increasing: (< a b ...)", _chain("<", operator.lt)),
            (">", VARIADIC, "Strictly decreasing: (> a b ...)", _chain(">", operator.gt)),
            ("<=", VARIADIC, "Non-decreasing: (<= a b ...)", _chain("<=", operator.le)),
            (">=", VARIADIC, "Non-increasing: (>= a b ...)", _chain(">=", operator.ge)),
        ]
