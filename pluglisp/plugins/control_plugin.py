"""Conditionals and sequencing. Taken branches are evaluated in tail position."""

from __future__ import annotations

from pluglisp import Expression, LispValue
from pluglisp.errors import PlugLispArityError
from pluglisp.plugins.base import Plugin
from pluglisp.plugins.helpers import expect_args_range, expect_min_args
from pluglisp.registry import VARIADIC, Category
from pluglisp.types.expr import KeywordExpr
from pluglisp.types.values import FALSE, is_truthy


def if_builtin(evaluator, args: list[Expression]) -> LispValue:
    """(if test then [else]); a false test without else yields false."""
    expect_args_range("if", args, 2, 3)
    if is_truthy(evaluator.eval(args[0])):
        return evaluator.eval_tail(args[1])
    if len(args) == 3:
        return evaluator.eval_tail(args[2])
    return FALSE


def do_builtin(evaluator, args: list[Expression]) -> LispValue:
    """(do a b ... z) evaluates in order and returns the value of z."""
    expect_min_args("do", args, 1)
    for arg in args[:-1]:
        evaluator.eval(arg)
    return evaluator.eval_tail(args[-1])


def cond(evaluator, args: list[Expression]) -> LispValue:
    """(cond test expr ... :else expr)"""
    if len(args) % 2 != 0:
        raise PlugLispArityError("cond requires an even number of arguments")
    for i in range(0, len(args), 2):
        test = args[i]
        if isinstance(test, KeywordExpr) and test.name == "else":
            return evaluator.eval_tail(args[i + 1])
        if is_truthy(evaluator.eval(test)):
            return evaluator.eval_tail(args[i + 1])
    return FALSE


def _body(evaluator, body: list[Expression]) -> LispValue:
    for expr in body[:-1]:
        evaluator.eval(expr)
    return evaluator.eval_tail(body[-1])


def when(evaluator, args: list[Expression]) -> LispValue:
    expect_min_args("when", args, 2)
    if is_truthy(evaluator.eval(args[0])):
        return _body(evaluator, args[1:])
    return FALSE


def when_not(evaluator, args: list[Expression]) -> LispValue:
    expect_min_args("when-not", args, 2)
    if not is_truthy(evaluator.eval(args[0])):
        return _body(evaluator, args[1:])
    return FALSE


class ControlPlugin(Plugin):
    name = "control"
    description = "Conditionals and sequencing"
    dependencies = ("logical",)
    category = Category.CONTROL

    def functions(self):
        return [
            ("if", VARIADIC, "Conditional: (if test then else)", if_builtin),
            ("do", VARIADIC, "Evaluate in sequence: (do a b c)", do_builtin),
            ("cond", VARIADIC, "Multi-way conditional: (cond t1 e1 t2 e2 :else e)", cond),
            ("when", VARIADIC, "Evaluate body when test is truthy: (when test body...)", when),
            ("when-not", VARIADIC, "Evaluate body when test is falsy: (when-not test body...)", when_not),
        ]
