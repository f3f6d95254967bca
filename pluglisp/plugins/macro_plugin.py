"""Macros and quasiquotation.

A macro receives its argument forms as data, runs its body once and the
resulting data is turned back into code and evaluated in the caller's scope.

Quasiquote syntax: `template, ~expr inserts a value, ~@expr splices a list.
"""

from __future__ import annotations

from pluglisp import Expression, LispValue
from pluglisp.errors import PlugLispSyntaxError, PlugLispTypeError
from pluglisp.plugins.base import Plugin
from pluglisp.plugins.helpers import expect_args, to_sequence
from pluglisp.registry import Category
from pluglisp.types.convert import quote_expr
from pluglisp.types.expr import BracketExpr, ListExpr, SymbolExpr
from pluglisp.types.lambda_fn import Macro, parse_params
from pluglisp.types.values import ListValue, Quoted, Vector


def defmacro(evaluator, args: list[Expression]) -> LispValue:
    """(defmacro name [params] body)"""
    expect_args("defmacro", args, 3)
    name_expr, params, body = args
    if not isinstance(name_expr, SymbolExpr):
        raise PlugLispTypeError(f"defmacro: expected a symbol, got {name_expr}")
    positional, rest = parse_params(params, "defmacro")
    macro = Macro(positional, body, evaluator.env, rest=rest, name=name_expr.name)
    evaluator.env.set(name_expr.name, macro)
    return macro


def _head_name(expr: Expression) -> str | None:
    if isinstance(expr, ListExpr) and expr.elements and isinstance(expr.elements[0], SymbolExpr):
        return expr.elements[0].name
    return None


def macroexpand(evaluator, args: list[Expression]) -> LispValue:
    """(macroexpand '(m args...)) expands one macro call and returns the code as data."""
    expect_args("macroexpand", args, 1)
    form = args[0]
    if _head_name(form) == "quote" and len(form.elements) == 2:
        form = form.elements[1]
    name = _head_name(form)
    if name is not None:
        value, found = evaluator.env.get(name)
        if found and isinstance(value, Macro):
            return quote_expr(evaluator.expand_macro(value, form.elements[1:]))
    return quote_expr(form)


def _unquoted(expr: Expression, form: str) -> Expression | None:
    if _head_name(expr) == form:
        if len(expr.elements) != 2:
            raise PlugLispSyntaxError(f"{form} requires exactly 1 argument")
        return expr.elements[1]
    return None


def _expand_items(evaluator, elements: tuple, depth: int) -> tuple:
    out: list = []
    for element in elements:
        spliced = _unquoted(element, "unquote-splicing") if depth == 1 else None
        if spliced is not None:
            out.extend(to_sequence("unquote-splicing", evaluator.eval(spliced)))
        else:
            out.append(_expand(evaluator, element, depth))
    return tuple(out)


def _expand(evaluator, expr: Expression, depth: int) -> LispValue:
    inner = _unquoted(expr, "unquote")
    if inner is not None:
        if depth == 1:
            return evaluator.eval(inner)
        return ListValue((Quoted(SymbolExpr("unquote")), _expand(evaluator, inner, depth - 1)))
    nested = _unquoted(expr, "quasiquote")
    if nested is not None:
        return ListValue((Quoted(SymbolExpr("quasiquote")), _expand(evaluator, nested, depth + 1)))
    match expr:
        case ListExpr(elements=elements):
            return ListValue(_expand_items(evaluator, elements, depth))
        case BracketExpr(elements=elements):
            return Vector(_expand_items(evaluator, elements, depth))
    return quote_expr(expr)


def quasiquote(evaluator, args: list[Expression]) -> LispValue:
    expect_args("quasiquote", args, 1)
    return _expand(evaluator, args[0], 1)


def unquote(evaluator, args: list[Expression]) -> LispValue:
    raise PlugLispSyntaxError("unquote (~) used outside of quasiquote")


def unquote_splicing(evaluator, args: list[Expression]) -> LispValue:
    raise PlugLispSyntaxError("unquote-splicing (~@) used outside of quasiquote")


class MacroPlugin(Plugin):
    name = "macro"
    description = "Macros and quasiquotation"
    dependencies = ("core",)
    category = Category.MACRO

    def functions(self):
        return [
            ("defmacro", 3, "Define a macro: (defmacro name [params] body)", defmacro),
            ("macroexpand", 1, "Expand a macro call once: (macroexpand '(m x))", macroexpand),
            ("quasiquote", 1, "Template with unquotes: `(a ~b ~@c)", quasiquote),
            ("unquote", 1, "Insert a value inside quasiquote: ~x", unquote),
            ("unquote-splicing", 1, "Splice a list inside quasiquote: ~@xs", unquote_splicing),
        ]
