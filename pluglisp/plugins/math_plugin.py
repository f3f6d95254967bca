from __future__ import annotations

import math
import random
from typing import Callable

from pluglisp import Expression, LispValue
from pluglisp.errors import PlugLispError
from pluglisp.plugins.base import Plugin
from pluglisp.plugins.helpers import (
    eval_args,
    expect_args,
    expect_args_range,
    expect_min_args,
    to_int,
    to_number,
)
from pluglisp.registry import VARIADIC, Category
from pluglisp.types.values import BigNumber, Number


def _unary(name: str, op: Callable[[float], float]) -> Callable:
    def handler(evaluator, args: list[Expression]) -> LispValue:
        expect_args(name, args, 1)
        x = to_number(name, evaluator.eval(args[0]))
        try:
            return Number(float(op(x)))
        except (ValueError, OverflowError) as err:
            raise PlugLispError(f"{name}: {err}") from None

    handler.__name__ = f"math_{op.__name__}"
    return handler


def _constant(name: str, value: float) -> Callable:
    def handler(evaluator, args: list[Expression]) -> LispValue:
        expect_args(name, args, 0)
        return Number(value)

    handler.__name__ = f"const_{name}"
    return handler


def _sign(x: float) -> float:
    return float((x > 0) - (x < 0))


def _round_half_away(x: float) -> float:
    return float(math.floor(abs(x) + 0.5)) * _sign(x)


def abs_builtin(evaluator, args: list[Expression]) -> LispValue:
    expect_args("abs", args, 1)
    value = evaluator.eval(args[0])
    if isinstance(value, BigNumber):
        return BigNumber(abs(value.value))
    return Number(abs(to_number("abs", value)))


def pow_builtin(evaluator, args: list[Expression]) -> LispValue:
    expect_args("pow", args, 2)
    base, exponent = (to_number("pow", v) for v in eval_args(evaluator, args))
    try:
        return Number(math.pow(base, exponent))
    except (ValueError, OverflowError) as err:
        raise PlugLispError(f"pow: {err}") from None


def atan2_builtin(evaluator, args: list[Expression]) -> LispValue:
    """(atan2 y x) angle of the point (x, y) in radians."""
    expect_args("atan2", args, 2)
    y, x = (to_number("atan2", v) for v in eval_args(evaluator, args))
    return Number(math.atan2(y, x))


def min_builtin(evaluator, args: list[Expression]) -> LispValue:
    expect_min_args("min", args, 1)
    values = eval_args(evaluator, args)
    return min(values, key=lambda v: to_number("min", v))


def max_builtin(evaluator, args: list[Expression]) -> LispValue:
    expect_min_args("max", args, 1)
    values = eval_args(evaluator, args)
    return max(values, key=lambda v: to_number("max", v))


def mod_builtin(evaluator, args: list[Expression]) -> LispValue:
    """(mod a b) floored modulo: the result has the sign of b."""
    expect_args("mod", args, 2)
    a, b = (to_number("mod", v) for v in eval_args(evaluator, args))
    if b == 0:
        raise PlugLispError("division by zero")
    return Number(a - b * math.floor(a / b))


def random_builtin(evaluator, args: list[Expression]) -> LispValue:
    """(random) is a float in [0, 1); (random n) an integer in [0, n)."""
    expect_args_range("random", args, 0, 1)
    if not args:
        return Number(random.random())
    n = to_int("random", evaluator.eval(args[0]))
    if n <= 0:
        raise PlugLispError("random: bound must be positive")
    return Number(random.randrange(n))


class MathPlugin(Plugin):
    name = "math"
    description = "Mathematical functions and constants"
    category = Category.MATH

    def functions(self):
        return [
            ("sqrt", 1, "Square root: (sqrt x)", _unary("sqrt", math.sqrt)),
            ("pow", 2, "Power: (pow base exp)", pow_builtin),
            ("abs", 1, "Absolute value: (abs x)", abs_builtin),
            ("floor", 1, "Round down: (floor x)", _unary("floor", math.floor)),
            ("ceil", 1, "Round up: (ceil x)", _unary("ceil", math.ceil)),
            ("round", 1, "Round half away from zero: (round x)", _unary("round", _round_half_away)),
            ("trunc", 1, "Round toward zero: (trunc x)", _unary("trunc", math.trunc)),
            ("sin", 1, "Sine: (sin x)", _unary("sin", math.sin)),
            ("cos", 1, "Cosine: (cos x)", _unary("cos", math.cos)),
            ("tan", 1, "Tangent: (tan x)", _unary("tan", math.tan)),
            ("asin", 1, "Arc sine: (asin x)", _unary("asin", math.asin)),
            ("acos", 1, "Arc cosine: (acos x)", _unary("acos", math.acos)),
            ("atan", 1, "Arc tangent: (atan x)", _unary("atan", math.atan)),
            ("atan2", 2, "Arc tangent of y/x: (atan2 y x)", atan2_builtin),
            ("sinh", 1, "Hyperbolic sine: (sinh x)", _unary("sinh", math.sinh)),
            ("cosh", 1, "Hyperbolic cosine: (cosh x)", _unary("cosh", math.cosh)),
            ("tanh", 1, "Hyperbolic tangent: (tanh x)", _unary("tanh", math.tanh)),
            ("log", 1, "Natural logarithm: (log x)", _unary("log", math.log)),
            ("log10", 1, "Base-10 logarithm: (log10 x)", _unary("log10", math.log10)),
            ("log2", 1, "Base-2 logarithm: (log2 x)", _unary("log2", math.log2)),
            ("degrees", 1, "Radians to degrees: (degrees x)", _unary("degrees", math.degrees)),
            ("radians", 1, "Degrees to radians: (radians x)", _unary("radians", math.radians)),
            ("exp", 1, "Exponential: (exp x)", _unary("exp", math.exp)),
            ("sign", 1, "Sign as -1, 0 or 1: (sign x)", _unary("sign", _sign)),
            ("min", VARIADIC, "Smallest argument: (min a b ...)", min_builtin),
            ("max", VARIADIC, "Largest argument: (max a b ...)", max_builtin),
            ("mod", 2, "Floored modulo: (mod a b)", mod_builtin),
            ("pi", 0, "The constant pi: (pi)", _constant("pi", math.pi)),
            ("random", VARIADIC, "Random number: (random) or (random n)", random_builtin),
        ]
