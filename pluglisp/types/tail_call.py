from __future__ import annotations

from pluglisp import LispValue
from pluglisp.types.expr import Position
from pluglisp.types.lambda_fn import Function


class TailCall:
    """A pending call to a user function, resolved by the evaluator's trampoline."""

    __slots__ = ("fn", "args", "position")

    def __init__(self, fn: Function, args: list[LispValue], position: Position | None = None):
        self.fn = fn
        self.args = args
        self.position = position
