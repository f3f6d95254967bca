"""Higher-order functions and function composition values."""

from __future__ import annotations

from pluglisp import Expression, LispValue
from pluglisp.plugins.base import Plugin
from pluglisp.plugins.helpers import (
    eval_args,
    expect_args,
    expect_args_range,
    expect_min_args,
    is_callable_value,
    same_kind,
    to_callable,
    to_sequence,
)
from pluglisp.registry import VARIADIC, Category
from pluglisp.types.values import (
    CompFunction,
    ComplementFunction,
    JuxtFunction,
    PartialFunction,
    boolean,
    is_truthy,
)


def map_builtin(evaluator, args: list[Expression]) -> LispValue:
    """(map f coll) applies f to every element."""
    expect_args("map", args, 2)
    fn, coll = eval_args(evaluator, args)
    to_callable("map", fn)
    results = [evaluator.call_with_values(fn, [e]) for e in to_sequence("map", coll)]
    return same_kind(coll, results)


def filter_builtin(evaluator, args: list[Expression]) -> LispValue:
    """(filter pred coll) keeps elements for which pred is truthy."""
    expect_args("filter", args, 2)
    pred, coll = eval_args(evaluator, args)
    to_callable("filter", pred)
    kept = [
        e for e in to_sequence("filter", coll)
        if is_truthy(evaluator.call_with_values(pred, [e]))
    ]
    return same_kind(coll, kept)


def reduce_builtin(evaluator, args: list[Expression]) -> LispValue:
    """(reduce f init coll) or (reduce f coll)."""
    expect_args_range("reduce", args, 2, 3)
    values = eval_args(evaluator, args)
    fn = to_callable("reduce", values[0])
    if len(values) == 3:
        acc, elements = values[1], to_sequence("reduce", values[2])
    else:
        elements = to_sequence("reduce", values[1])
        if not elements:
            return evaluator.call_with_values(fn, [])
        acc, elements = elements[0], elements[1:]
    for element in elements:
        acc = evaluator.call_with_values(fn, [acc, element])
    return acc


def apply_builtin(evaluator, args: list[Expression]) -> LispValue:
    """(apply f x ... coll) calls f with the leading args followed by coll's elements."""
    expect_min_args("apply", args, 2)
    values = eval_args(evaluator, args)
    fn = to_callable("apply", values[0])
    spread = list(values[1:-1]) + list(to_sequence("apply", values[-1]))
    return evaluator.call_with_values(fn, spread)


def partial(evaluator, args: list[Expression]) -> LispValue:
    expect_min_args("partial", args, 1)
    fn, *bound = eval_args(evaluator, args)
    return PartialFunction(to_callable("partial", fn), tuple(bound))


def comp(evaluator, args: list[Expression]) -> LispValue:
    """(comp f g h) composes right to left; (comp) yields nil when called."""
    fns = eval_args(evaluator, args)
    for f in fns:
        to_callable("comp", f)
    return CompFunction(tuple(fns))


def complement(evaluator, args: list[Expression]) -> LispValue:
    expect_args("complement", args, 1)
    return ComplementFunction(to_callable("complement", evaluator.eval(args[0])))


def juxt(evaluator, args: list[Expression]) -> LispValue:
    expect_min_args("juxt", args, 1)
    fns = eval_args(evaluator, args)
    for f in fns:
        to_callable("juxt", f)
    return JuxtFunction(tuple(fns))


def identity(evaluator, args: list[Expression]) -> LispValue:
    expect_args("identity", args, 1)
    return evaluator.eval(args[0])


def is_fn(evaluator, args: list[Expression]) -> LispValue:
    expect_args("fn?", args, 1)
    return boolean(is_callable_value(evaluator.eval(args[0])))


class FunctionalPlugin(Plugin):
    name = "functional"
    description = "Higher-order functions and composition"
    category = Category.FUNCTIONAL

    def functions(self):
        return [
            ("map", 2, "Apply f to each element: (map f coll)", map_builtin),
            ("filter", 2, "Keep elements matching pred: (filter pred coll)", filter_builtin),
            ("reduce", VARIADIC, "Fold a collection: (reduce f init coll)", reduce_builtin),
            ("apply", VARIADIC, "Call f with a collection of args: (apply f coll)", apply_builtin),
            ("partial", VARIADIC, "Bind leading args: (partial f x)", partial),
            ("comp", VARIADIC, "Compose right to left: (comp f g)", comp),
            ("complement", 1, "Negate a predicate: (complement pred)", complement),
            ("juxt", VARIADIC, "Vector of each function's result: (juxt f g)", juxt),
            ("identity", 1, "Return the argument: (identity x)", identity),
            ("fn?", 1, "True for callable values: (fn? x)", is_fn),
        ]
