from __future__ import annotations

from pluglisp import Expression, LispValue
from pluglisp.errors import PlugLispTypeError
from pluglisp.plugins.base import Plugin
from pluglisp.plugins.helpers import eval_args, expect_args, expect_min_args, to_callable
from pluglisp.registry import VARIADIC, Category
from pluglisp.types.concurrency import Atom
from pluglisp.types.values import type_name


def _atom(name: str, value: LispValue) -> Atom:
    if not isinstance(value, Atom):
        raise PlugLispTypeError(f"{name} expects an atom, got {type_name(value)}")
    return value


def atom(evaluator, args: list[Expression]) -> LispValue:
    expect_args("atom", args, 1)
    return Atom(evaluator.eval(args[0]))


def deref(evaluator, args: list[Expression]) -> LispValue:
    expect_args("deref", args, 1)
    return _atom("deref", evaluator.eval(args[0])).deref()


def swap(evaluator, args: list[Expression]) -> LispValue:
    """(swap! a f x ...) sets a to (f @a x ...) atomically and returns the new value."""
    expect_min_args("swap!", args, 2)
    target, fn, *extra = eval_args(evaluator, args)
    box = _atom("swap!", target)
    to_callable("swap!", fn)
    return box.swap(lambda current: evaluator.call_with_values(fn, [current, *extra]))


def reset(evaluator, args: list[Expression]) -> LispValue:
    expect_args("reset!", args, 2)
    target, value = eval_args(evaluator, args)
    return _atom("reset!", target).reset(value)


class AtomPlugin(Plugin):
    name = "atom"
    description = "Atoms for controlled mutable state"
    category = Category.ATOM

    def functions(self):
        return [
            ("atom", 1, "Create an atom: (atom value)", atom),
            ("deref", 1, "Current value of an atom: (deref a)", deref),
            ("swap!", VARIADIC, "Update with a function: (swap! a f args...)", swap),
            ("reset!", 2, "Replace the value: (reset! a value)", reset),
        ]
