from __future__ import annotations

from pluglisp import Expression, LispValue
from pluglisp.plugins.base import Plugin
from pluglisp.plugins.helpers import expect_args
from pluglisp.registry import VARIADIC, Category
from pluglisp.types.values import FALSE, TRUE, boolean, is_truthy


def and_builtin(evaluator, args: list[Expression]) -> LispValue:
    """(and a b ...) stops at the first falsy argument."""
    for arg in args:
        if not is_truthy(evaluator.eval(arg)):
            return FALSE
    return TRUE


def or_builtin(evaluator, args: list[Expression]) -> LispValue:
    """(or a b ...) stops at the first truthy argument."""
    for arg in args:
        if is_truthy(evaluator.eval(arg)):
            return TRUE
    return FALSE


def not_builtin(evaluator, args: list[Expression]) -> LispValue:
    expect_args("not", args, 1)
    return boolean(not is_truthy(evaluator.eval(args[0])))


class LogicalPlugin(Plugin):
    name = "logical"
    description = "Short-circuit boolean logic"
    category = Category.LOGICAL

    def functions(self):
        return [
            ("and", VARIADIC, "Logical and: (and a b ...)", and_builtin),
            ("or", VARIADIC, "Logical or: (or a b ...)", or_builtin),
            ("not", 1, "Logical negation: (not x)", not_builtin),
        ]
