from __future__ import annotations

from pluglisp import Expression, LispValue
from pluglisp.errors import PlugLispError, PlugLispTypeError
from pluglisp.plugins.base import Plugin
from pluglisp.plugins.helpers import (
    eval_args,
    expect_args,
    expect_args_range,
    expect_min_args,
    to_number,
    to_sequence,
)
from pluglisp.registry import VARIADIC, Category
from pluglisp.types.expr import ValueExpr
from pluglisp.types.lambda_fn import Function
from pluglisp.types.nil import NIL, NilType
from pluglisp.types.values import HashMap, ListValue, Number, String, Vector, boolean, type_name


def vector(evaluator, args: list[Expression]) -> LispValue:
    return Vector(tuple(eval_args(evaluator, args)))


def vec(evaluator, args: list[Expression]) -> LispValue:
    expect_args("vec", args, 1)
    return Vector(to_sequence("vec", evaluator.eval(args[0])))


def is_vector(evaluator, args: list[Expression]) -> LispValue:
    expect_args("vector?", args, 1)
    return boolean(isinstance(evaluator.eval(args[0]), Vector))


def _conj(coll: LispValue, items: list) -> LispValue:
    match coll:
        case Vector(elements=els):
            return Vector(els + tuple(items))
        case ListValue(elements=els):
            return ListValue(tuple(reversed(items)) + els)
        case NilType():
            return ListValue(tuple(reversed(items)))
    raise PlugLispTypeError(f"conj expects a list or vector, got {type_name(coll)}")


def conj(evaluator, args: list[Expression]) -> LispValue:
    """(conj coll x ...) appends to vectors and prepends to lists."""
    expect_min_args("conj", args, 1)
    coll, *items = eval_args(evaluator, args)
    return _conj(coll, items)


def into(evaluator, args: list[Expression]) -> LispValue:
    """(into target source) conjoins every element of source onto target."""
    expect_args("into", args, 2)
    target, source = eval_args(evaluator, args)
    return _conj(target, list(to_sequence("into", source)))


def range_builtin(evaluator, args: list[Expression]) -> LispValue:
    """(range end), (range start end) or (range start end step) as a list."""
    expect_args_range("range", args, 1, 3)
    bounds = [to_number("range", v) for v in eval_args(evaluator, args)]
    start, step = 0.0, 1.0
    if len(bounds) == 1:
        end = bounds[0]
    elif len(bounds) == 2:
        start, end = bounds
    else:
        start, end, step = bounds
    if step == 0:
        raise PlugLispError("range step cannot be zero")
    result = []
    current = start
    while (step > 0 and current < end) or (step < 0 and current > end):
        result.append(Number(current))
        current += step
    return ListValue(tuple(result))


def seq(evaluator, args: list[Expression]) -> LispValue:
    """(seq coll) is a list of the elements, or nil when there are none.

    Strings are split into one-character strings.
    """
    expect_args("seq", args, 1)
    value = evaluator.eval(args[0])
    if isinstance(value, String):
        elements = tuple(String(ch) for ch in value.value)
    else:
        elements = to_sequence("seq", value)
    return ListValue(elements) if elements else NIL


def is_coll(evaluator, args: list[Expression]) -> LispValue:
    expect_args("coll?", args, 1)
    return boolean(isinstance(evaluator.eval(args[0]), (ListValue, Vector, HashMap)))


def is_sequential(evaluator, args: list[Expression]) -> LispValue:
    expect_args("sequential?", args, 1)
    return boolean(isinstance(evaluator.eval(args[0]), (ListValue, Vector)))


def constantly(evaluator, args: list[Expression]) -> LispValue:
    """(constantly x) is a function of any arguments that always returns x."""
    expect_args("constantly", args, 1)
    value = evaluator.eval(args[0])
    return Function((), ValueExpr(value), evaluator.env, rest="_", name="constantly")


class SequencePlugin(Plugin):
    name = "sequence"
    description = "Vectors and generic sequence building"
    dependencies = ("list",)
    category = Category.SEQUENCE

    def functions(self):
        return [
            ("vector", VARIADIC, "Create a vector: (vector 1 2 3)", vector),
            ("vec", 1, "Convert a collection to a vector: (vec coll)", vec),
            ("vector?", 1, "True for vectors: (vector? x)", is_vector),
            ("conj", VARIADIC, "Add elements to a collection: (conj coll x ...)", conj),
            ("into", 2, "Pour one collection into another: (into [] coll)", into),
            ("range", VARIADIC, "Numeric range: (range start end step)", range_builtin),
            ("seq", 1, "Elements as a list, nil when empty: (seq coll)", seq),
            ("coll?", 1, "True for lists, vectors and hash maps: (coll? x)", is_coll),
            ("sequential?", 1, "True for lists and vectors: (sequential? x)", is_sequential),
            ("constantly", 1, "Function always returning x: (constantly x)", constantly),
        ]
