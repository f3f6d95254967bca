"""Syntax tree for PlugLisp.

Expressions are produced once by the reader and never mutated afterwards.
Each node may carry a source position for diagnostics; positions are ignored
by equality so that parsed trees compare structurally.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Union


def format_number(value: float) -> str:
    """Render a float the way the interpreter displays numbers."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if abs(value) > 1e15:
        return f"{value:.6e}"
    if value == int(value):
        return f"{value:.0f}"
    return repr(value)


def escape_string(text: str) -> str:
    escaped = (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\t", "\\t")
        .replace("\r", "\\r")
    )
    return f'"{escaped}"'


@dataclass(frozen=True)
class Position:
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


def _pos() -> Any:
    return field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class NumberExpr:
    value: float
    position: Position | None = _pos()

    def __str__(self) -> str:
        return format_number(self.value)


@dataclass(frozen=True)
class BigNumberExpr:
    text: str
    position: Position | None = _pos()

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class StringExpr:
    value: str
    position: Position | None = _pos()

    def __str__(self) -> str:
        return escape_string(self.value)


@dataclass(frozen=True)
class BooleanExpr:
    value: bool
    position: Position | None = _pos()

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class KeywordExpr:
    name: str
    position: Position | None = _pos()

    def __str__(self) -> str:
        return f":{self.name}"


@dataclass(frozen=True)
class SymbolExpr:
    name: str
    position: Position | None = _pos()

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class ListExpr:
    elements: tuple[Expr, ...] = ()
    position: Position | None = _pos()

    def __str__(self) -> str:
        return "(" + " ".join(str(e) for e in self.elements) + ")"


@dataclass(frozen=True)
class BracketExpr:
    elements: tuple[Expr, ...] = ()
    position: Position | None = _pos()

    def __str__(self) -> str:
        return "[" + " ".join(str(e) for e in self.elements) + "]"


@dataclass(frozen=True)
class HashMapExpr:
    # Flattened key/value pairs
    elements: tuple[Expr, ...] = ()
    position: Position | None = _pos()

    def __str__(self) -> str:
        return "{" + " ".join(str(e) for e in self.elements) + "}"


@dataclass(frozen=True)
class ValueExpr:
    """An already-evaluated value standing in expression position."""

    value: Any
    position: Position | None = _pos()

    def __str__(self) -> str:
        return str(self.value)


Expr = Union[
    NumberExpr,
    BigNumberExpr,
    StringExpr,
    BooleanExpr,
    KeywordExpr,
    SymbolExpr,
    ListExpr,
    BracketExpr,
    HashMapExpr,
    ValueExpr,
]


def position_of(expr: Any) -> Position | None:
    return getattr(expr, "position", None)
