"""List construction and access. Every operation returns a new collection."""

from __future__ import annotations

from pluglisp import Expression, LispValue
from pluglisp.errors import PlugLispError, PlugLispTypeError
from pluglisp.plugins.base import Plugin
from pluglisp.plugins.helpers import (
    eval_args,
    expect_args,
    same_kind,
    to_int,
    to_sequence,
)
from pluglisp.registry import VARIADIC, Category
from pluglisp.types.nil import NIL, NilType
from pluglisp.types.values import (
    BigNumber,
    HashMap,
    ListValue,
    Number,
    String,
    boolean,
    type_name,
    values_equal,
)


def _elements(name: str, value: LispValue) -> tuple:
    if isinstance(value, String):
        return tuple(String(ch) for ch in value.value)
    return to_sequence(name, value)


def list_builtin(evaluator, args: list[Expression]) -> LispValue:
    return ListValue(tuple(eval_args(evaluator, args)))


def cons(evaluator, args: list[Expression]) -> LispValue:
    """(cons x coll) prepends x, always returning a list."""
    expect_args("cons", args, 2)
    head, coll = eval_args(evaluator, args)
    return ListValue((head,) + to_sequence("cons", coll))


def length(evaluator, args: list[Expression]) -> LispValue:
    expect_args("length", args, 1)
    value = evaluator.eval(args[0])
    match value:
        case String(value=s):
            return Number(len(s))
        case HashMap():
            return Number(len(value))
    return Number(len(to_sequence("length", value)))


def append(evaluator, args: list[Expression]) -> LispValue:
    """(append coll ...) joins collections into a list."""
    result: list = []
    for value in eval_args(evaluator, args):
        result.extend(to_sequence("append", value))
    return ListValue(tuple(result))


def first(evaluator, args: list[Expression]) -> LispValue:
    expect_args("first", args, 1)
    elements = _elements("first", evaluator.eval(args[0]))
    return elements[0] if elements else NIL


def second(evaluator, args: list[Expression]) -> LispValue:
    expect_args("second", args, 1)
    elements = _elements("second", evaluator.eval(args[0]))
    return elements[1] if len(elements) > 1 else NIL


def rest(evaluator, args: list[Expression]) -> LispValue:
    expect_args("rest", args, 1)
    return ListValue(_elements("rest", evaluator.eval(args[0]))[1:])


def last(evaluator, args: list[Expression]) -> LispValue:
    expect_args("last", args, 1)
    elements = _elements("last", evaluator.eval(args[0]))
    return elements[-1] if elements else NIL


def nth(evaluator, args: list[Expression]) -> LispValue:
    """(nth coll index) zero-based element access."""
    expect_args("nth", args, 2)
    coll, index = eval_args(evaluator, args)
    elements = _elements("nth", coll)
    i = to_int("nth", index)
    if not 0 <= i < len(elements):
        raise PlugLispError(f"nth: index {i} out of bounds for length {len(elements)}")
    return elements[i]


def is_empty(evaluator, args: list[Expression]) -> LispValue:
    expect_args("empty?", args, 1)
    value = evaluator.eval(args[0])
    match value:
        case String(value=s):
            return boolean(s == "")
        case HashMap():
            return boolean(len(value) == 0)
    return boolean(len(to_sequence("empty?", value)) == 0)


def take(evaluator, args: list[Expression]) -> LispValue:
    expect_args("take", args, 2)
    count, coll = eval_args(evaluator, args)
    n = max(to_int("take", count), 0)
    return same_kind(coll, to_sequence("take", coll)[:n])


def drop(evaluator, args: list[Expression]) -> LispValue:
    expect_args("drop", args, 2)
    count, coll = eval_args(evaluator, args)
    n = max(to_int("drop", count), 0)
    return same_kind(coll, to_sequence("drop", coll)[n:])


def reverse(evaluator, args: list[Expression]) -> LispValue:
    expect_args("reverse", args, 1)
    value = evaluator.eval(args[0])
    if isinstance(value, String):
        return String(value.value[::-1])
    return same_kind(value, tuple(reversed(to_sequence("reverse", value))))


def distinct(evaluator, args: list[Expression]) -> LispValue:
    expect_args("distinct", args, 1)
    value = evaluator.eval(args[0])
    seen: list = []
    for element in to_sequence("distinct", value):
        if not any(values_equal(element, s) for s in seen):
            seen.append(element)
    return same_kind(value, seen)


def _sort_key(value: LispValue):
    match value:
        case Number(value=n) | BigNumber(value=n):
            return (0, n)
        case String(value=s):
            return (1, s)
    raise PlugLispTypeError(f"sort: cannot order {type_name(value)} values")


def sort(evaluator, args: list[Expression]) -> LispValue:
    """(sort coll) orders numbers or strings ascending."""
    expect_args("sort", args, 1)
    value = evaluator.eval(args[0])
    elements = to_sequence("sort", value)
    kinds = {_sort_key(e)[0] for e in elements}
    if len(kinds) > 1:
        raise PlugLispTypeError("sort: cannot compare strings with numbers")
    return same_kind(value, sorted(elements, key=_sort_key))


def is_list(evaluator, args: list[Expression]) -> LispValue:
    expect_args("list?", args, 1)
    return boolean(isinstance(evaluator.eval(args[0]), ListValue))


def is_nil(evaluator, args: list[Expression]) -> LispValue:
    expect_args("nil?", args, 1)
    return boolean(isinstance(evaluator.eval(args[0]), NilType))


class ListPlugin(Plugin):
    name = "list"
    description = "List construction and access"
    category = Category.LIST

    def functions(self):
        return [
            ("list", VARIADIC, "Create a list: (list 1 2 3)", list_builtin),
            ("cons", 2, "Prepend an element: (cons x coll)", cons),
            ("length", 1, "Length of a collection or string: (length coll)", length),
            ("append", VARIADIC, "Join collections: (append l1 l2)", append),
            ("concat", VARIADIC, "Join collections: (concat l1 l2)", append),
            ("first", 1, "First element or nil: (first coll)", first),
            ("second", 1, "Second element or nil: (second coll)", second),
            ("rest", 1, "All but the first element: (rest coll)", rest),
            ("last", 1, "Last element or nil: (last coll)", last),
            ("nth", 2, "Element at index: (nth coll i)", nth),
            ("empty?", 1, "True for an empty collection: (empty? coll)", is_empty),
            ("take", 2, "First n elements: (take n coll)", take),
            ("drop", 2, "All but the first n elements: (drop n coll)", drop),
            ("reverse", 1, "Reverse a collection: (reverse coll)", reverse),
            ("distinct", 1, "Remove duplicates: (distinct coll)", distinct),
            ("sort", 1, "Sort numbers or strings: (sort coll)", sort),
            ("list?", 1, "True for lists: (list? x)", is_list),
            ("nil?", 1, "True for nil: (nil? x)", is_nil),
        ]
