"""Arithmetic operators with BigNumber promotion."""

from __future__ import annotations

import math
from functools import reduce

from pluglisp import Expression, LispValue
from pluglisp.errors import PlugLispError
from pluglisp.plugins.base import Plugin
from pluglisp.plugins.helpers import eval_args, expect_args, expect_min_args, to_number
from pluglisp.registry import VARIADIC, Category
from pluglisp.types.values import BigNumber, Number


def _operands(name: str, evaluator, args: list[Expression]) -> tuple[list, bool]:
    values = eval_args(evaluator, args)
    numbers = [to_number(name, v) for v in values]
    return numbers, any(isinstance(v, BigNumber) for v in values)


def _result(value: float | int, big: bool) -> LispValue:
    if big:
        return BigNumber(int(value))
    return Number(float(value))


def _big(numbers: list) -> list[int]:
    return [int(n) for n in numbers]


def add(evaluator, args: list[Expression]) -> LispValue:
    """(+ a b ...) sums its arguments; (+) is 0."""
    numbers, big = _operands("+", evaluator, args)
    if big:
        return BigNumber(sum(_big(numbers)))
    return Number(math.fsum(numbers) if numbers else 0.0)


def subtract(evaluator, args: list[Expression]) -> LispValue:
    """(- a) negates; (- a b ...) subtracts left to right."""
    expect_min_args("-", args, 1)
    numbers, big = _operands("-", evaluator, args)
    if big:
        numbers = _big(numbers)
    if len(numbers) == 1:
        return _result(-numbers[0], big)
    return _result(reduce(lambda a, b: a - b, numbers), big)


def multiply(evaluator, args: list[Expression]) -> LispValue:
    numbers, big = _operands("*", evaluator, args)
    if big:
        return BigNumber(math.prod(_big(numbers)))
    return Number(math.prod(numbers) if numbers else 1.0)


def divide(evaluator, args: list[Expression]) -> LispValue:
    """(/ a b ...) divides left to right; (/ a) is the reciprocal."""
    expect_min_args("/", args, 1)
    numbers, big = _operands("/", evaluator, args)
    if len(numbers) == 1:
        numbers = [1] + numbers
    if any(n == 0 for n in numbers[1:]):
        raise PlugLispError("division by zero")
    if big:
        result = int(numbers[0])
        for n in _big(numbers[1:]):
            if result % n != 0:
                return Number(float(result) / n)
            result //= n
        return BigNumber(result)
    return Number(reduce(lambda a, b: a / b, numbers))


def modulo(evaluator, args: list[Expression]) -> LispValue:
    """(% a b) remainder with the sign of the dividend."""
    expect_args("%", args, 2)
    (a, b), big = _operands("%", evaluator, args)
    if b == 0:
        raise PlugLispError("division by zero")
    if big:
        a, b = int(a), int(b)
        remainder = abs(a) % abs(b)
        return BigNumber(-remainder if a < 0 else remainder)
    return Number(math.fmod(a, b))


class ArithmeticPlugin(Plugin):
    name = "arithmetic"
    description = "Arithmetic operators"
    category = Category.ARITHMETIC

    def functions(self):
        return [
            ("+", VARIADIC, "Add numbers: (+ 1 2 3)", add),
            ("-", VARIADIC, "Subtract numbers: (- 10 3)", subtract),
            ("*", VARIADIC, "Multiply numbers: (* 2 3 4)", multiply),
            ("/", VARIADIC, "Divide numbers: (/ 12 3)", divide),
            ("%", 2, "Remainder: (% 7 3)", modulo),
        ]
