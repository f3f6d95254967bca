"""Core definitions: def, fn, defn, quote and introspection helpers."""

from __future__ import annotations

from pluglisp import Expression, LispValue
from pluglisp.errors import PlugLispTypeError
from pluglisp.plugins.base import Plugin
from pluglisp.plugins.helpers import expect_args, expect_args_range
from pluglisp.registry import VARIADIC, Category
from pluglisp.types.convert import quote_expr
from pluglisp.types.environment import Environment
from pluglisp.types.expr import SymbolExpr
from pluglisp.types.lambda_fn import Function, parse_params
from pluglisp.types.nil import NilType
from pluglisp.types.values import HashMap, ListValue, Number, String, Vector, type_name


def _symbol_name(owner: str, expr: Expression) -> str:
    if not isinstance(expr, SymbolExpr):
        raise PlugLispTypeError(f"{owner}: expected a symbol, got {expr}")
    return expr.name


def define(evaluator, args: list[Expression]) -> LispValue:
    """(def name value) binds name in the current scope and returns the value."""
    expect_args("def", args, 2)
    name = _symbol_name("def", args[0])
    value = evaluator.eval(args[1])
    if isinstance(value, Function) and value.name is None:
        value.name = name
    evaluator.env.set(name, value)
    return value


def make_function(owner: str, params: Expression, body: Expression, env: Environment,
                  name: str | None = None) -> Function:
    positional, rest = parse_params(params, owner)
    return Function(positional, body, env, rest=rest, name=name)


def fn(evaluator, args: list[Expression]) -> LispValue:
    """(fn [params] body) creates a closure over the current scope."""
    expect_args("fn", args, 2)
    return make_function("fn", args[0], args[1], evaluator.env)


def defn(evaluator, args: list[Expression]) -> LispValue:
    """(defn name [params] body) is shorthand for (def name (fn [params] body))."""
    expect_args("defn", args, 3)
    name = _symbol_name("defn", args[0])
    function = make_function("defn", args[1], args[2], evaluator.env, name=name)
    evaluator.env.set(name, function)
    return function


def quote(evaluator, args: list[Expression]) -> LispValue:
    expect_args("quote", args, 1)
    return quote_expr(args[0])


def help_builtin(evaluator, args: list[Expression]) -> LispValue:
    """(help) lists builtins by category; (help name) describes one builtin."""
    expect_args_range("help", args, 0, 1)
    registry = evaluator.registry
    if args:
        name = _symbol_name("help", args[0])
        fn_desc = registry.get(name)
        if fn_desc is not None:
            return String(fn_desc.signature())
        value, found = evaluator.env.get(name)
        if found:
            return String(f"{name}: user-defined {type_name(value)} {value}")
        return String(f"no help available for {name}")
    lines = []
    for category in registry.categories():
        lines.append(f"{category}: {' '.join(registry.list_by_category(category))}")
    return String("\n".join(lines))


def env_builtin(evaluator, args: list[Expression]) -> LispValue:
    """(env) returns every visible binding as a hash map."""
    expect_args("env", args, 0)
    frames = []
    scope = evaluator.env
    while scope is not None:
        frames.append(scope.vars)
        scope = scope.outer
    bindings: dict = {}
    for frame in reversed(frames):
        bindings.update(frame)
    return HashMap(bindings)


def plugins_builtin(evaluator, args: list[Expression]) -> LispValue:
    """(plugins) lists loaded plugin names."""
    expect_args("plugins", args, 0)
    manager = evaluator.plugin_manager
    if manager is None:
        return ListValue()
    return ListValue(tuple(String(info.name) for info in manager.list_plugins()))


def count(evaluator, args: list[Expression]) -> LispValue:
    expect_args("count", args, 1)
    value = evaluator.eval(args[0])
    match value:
        case ListValue() | Vector() | HashMap():
            return Number(len(value))
        case String(value=s):
            return Number(len(s))
        case NilType():
            return Number(0)
    raise PlugLispTypeError(f"count expects a collection, got {type_name(value)}")


class CorePlugin(Plugin):
    name = "core"
    description = "Core definitions, quoting and introspection"
    category = Category.CORE

    def functions(self):
        return [
            ("def", 2, "Define a variable: (def name value)", define),
            ("fn", 2, "Create a function: (fn [params] body)", fn),
            ("defn", 3, "Define a function: (defn name [params] body)", defn),
            ("quote", 1, "Return the argument unevaluated: (quote expr) or 'expr", quote),
            ("help", VARIADIC, "Show help: (help) or (help name)", help_builtin),
            ("env", 0, "Show visible bindings: (env)", env_builtin),
            ("plugins", 0, "List loaded plugins: (plugins)", plugins_builtin),
            ("count", 1, "Number of elements in a collection: (count coll)", count),
        ]
