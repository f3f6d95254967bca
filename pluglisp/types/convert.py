"""Conversions between syntax (Expr) and runtime data (Value).

- quote_expr: code to data, used by `quote` and for binding macro arguments.
- value_to_code: data back to code, used on macro expansions.
- value_to_expr: values back to argument expressions for calls made through
  the expression-based calling convention (partial, comp, map, ...).
"""

from __future__ import annotations

from pluglisp import Expression, LispValue
from pluglisp.types.expr import (
    BigNumberExpr,
    BooleanExpr,
    BracketExpr,
    HashMapExpr,
    KeywordExpr,
    ListExpr,
    NumberExpr,
    StringExpr,
    SymbolExpr,
    ValueExpr,
)
from pluglisp.types.values import (
    BigNumber,
    Boolean,
    Keyword,
    ListValue,
    Number,
    Quoted,
    String,
    Vector,
    boolean,
)


def _scalar_to_expr(value: LispValue) -> Expression | None:
    match value:
        case Number(value=v):
            return NumberExpr(float(v))
        case BigNumber(value=v):
            return BigNumberExpr(str(v))
        case String(value=v):
            return StringExpr(v)
        case Boolean(value=v):
            return BooleanExpr(v)
        case Keyword(name=n):
            return KeywordExpr(n)
    return None


def quote_expr(expr: Expression) -> LispValue:
    match expr:
        case NumberExpr(value=v):
            return Number(v)
        case BigNumberExpr(text=t):
            return BigNumber(int(t))
        case StringExpr(value=v):
            return String(v)
        case BooleanExpr(value=v):
            return boolean(v)
        case KeywordExpr(name=n):
            return Keyword(n)
        case ListExpr(elements=els):
            return ListValue(tuple(quote_expr(e) for e in els))
        case BracketExpr(elements=els):
            return Vector(tuple(quote_expr(e) for e in els))
        case ValueExpr(value=v):
            return v
        case SymbolExpr() | HashMapExpr():
            return Quoted(expr)
    return Quoted(expr)


def value_to_code(value: LispValue) -> Expression:
    scalar = _scalar_to_expr(value)
    if scalar is not None:
        return scalar
    match value:
        case Quoted(expr=e):
            return e
        case ListValue(elements=els):
            return ListExpr(tuple(value_to_code(v) for v in els))
        case Vector(elements=els):
            return BracketExpr(tuple(value_to_code(v) for v in els))
    return ValueExpr(value)


def value_to_expr(value: LispValue) -> Expression:
    scalar = _scalar_to_expr(value)
    if scalar is not None:
        return scalar
    if isinstance(value, Vector):
        return BracketExpr(tuple(value_to_expr(v) for v in value.elements))
    # A list literal in argument position would be evaluated as a call
    return ValueExpr(value)
