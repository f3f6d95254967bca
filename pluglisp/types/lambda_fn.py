"""User-defined functions and macros plus their argument binding rules."""

from __future__ import annotations

from typing import ClassVar, Sequence

from pluglisp import Expression, LispValue
from pluglisp.errors import PlugLispArityError, PlugLispSyntaxError, PlugLispTypeError
from pluglisp.types.environment import Environment
from pluglisp.types.expr import BracketExpr, ListExpr, SymbolExpr
from pluglisp.types.values import ListValue

REST_MARKER = "&"


def parse_params(params_expr: Expression, owner: str) -> tuple[tuple[str, ...], str | None]:
    """Split a parameter vector into positional names and an optional rest name.

    `&` must be the second-to-last parameter: `[a b & more]`.
    """
    if not isinstance(params_expr, (BracketExpr, ListExpr)):
        raise PlugLispTypeError(f"{owner}: parameters must be a vector or list")
    names: list[str] = []
    for p in params_expr.elements:
        if not isinstance(p, SymbolExpr):
            raise PlugLispTypeError(f"{owner}: parameter must be a symbol, got {p}")
        names.append(p.name)
    if REST_MARKER not in names:
        return tuple(names), None
    idx = names.index(REST_MARKER)
    if idx != len(names) - 2 or names[-1] == REST_MARKER:
        raise PlugLispSyntaxError(f"{owner}: '&' must be followed by exactly one rest parameter")
    return tuple(names[:idx]), names[-1]


class Closure:
    """Parameters and body paired with the environment they were defined in."""

    __slots__ = ("params", "rest", "body", "env", "name")
    type_name: ClassVar[str] = "closure"
    kind: ClassVar[str] = "closure"

    def __init__(
        self,
        params: Sequence[str],
        body: Expression,
        env: Environment,
        rest: str | None = None,
        name: str | None = None,
    ):
        self.params: tuple[str, ...] = tuple(params)
        self.rest: str | None = rest
        self.body: Expression = body
        self.env: Environment = env
        self.name: str | None = name

    def param_text(self) -> str:
        names = list(self.params)
        if self.rest is not None:
            names += [REST_MARKER, self.rest]
        return " ".join(names)

    def __str__(self) -> str:
        return f"#<{self.kind}({self.param_text()})>"

    def __repr__(self) -> str:
        return str(self)

    def bind(self, args: Sequence[LispValue]) -> Environment:
        """Return a child of the captured environment with `args` bound."""
        required = len(self.params)
        label = self.name or f"anonymous {self.kind}"
        if self.rest is None and len(args) != required:
            raise PlugLispArityError(
                f"{label}: expected {required} argument(s), got {len(args)}"
            )
        if self.rest is not None and len(args) < required:
            raise PlugLispArityError(
                f"{label}: expected at least {required} argument(s), got {len(args)}"
            )
        local_env = Environment(outer=self.env)
        for name, value in zip(self.params, args):
            local_env.set(name, value)
        if self.rest is not None:
            local_env.set(self.rest, ListValue(tuple(args[required:])))
        return local_env


class Function(Closure):
    __slots__ = ()
    type_name: ClassVar[str] = "function"
    kind: ClassVar[str] = "function"


class Macro(Closure):
    __slots__ = ()
    type_name: ClassVar[str] = "macro"
    kind: ClassVar[str] = "macro"
