from __future__ import annotations

from pluglisp import Expression, LispValue
from pluglisp.errors import PlugLispArityError, PlugLispTypeError
from pluglisp.plugins.base import Plugin
from pluglisp.plugins.helpers import expect_min_args
from pluglisp.registry import VARIADIC, Category
from pluglisp.types.expr import BracketExpr, ListExpr, SymbolExpr
from pluglisp.types.lambda_fn import Function, parse_params


def _binding_forms(owner: str, args: list[Expression]) -> tuple:
    expect_min_args(owner, args, 2)
    bindings = args[0]
    if not isinstance(bindings, (BracketExpr, ListExpr)):
        raise PlugLispTypeError(f"{owner} bindings must be a vector")
    return bindings.elements


def _run_body(scope, body: list[Expression]) -> LispValue:
    for expr in body[:-1]:
        scope.eval(expr)
    return scope.eval_tail(body[-1])


def _let(owner: str, evaluator, args: list[Expression]) -> LispValue:
    pairs = _binding_forms(owner, args)
    if len(pairs) % 2 != 0:
        raise PlugLispArityError(f"{owner} bindings require an even number of forms")
    scope = evaluator.with_env(evaluator.env.new_child())
    for i in range(0, len(pairs), 2):
        name = pairs[i]
        if not isinstance(name, SymbolExpr):
            raise PlugLispTypeError(f"{owner} binding name must be a symbol, got {name}")
        scope.env.set(name.name, scope.eval(pairs[i + 1]))
    return _run_body(scope, args[1:])


def let(evaluator, args: list[Expression]) -> LispValue:
    """(let [name value ...] body...)

    Bindings are made in order in a fresh child scope, so each value sees the
    names bound before it. The last body form is in tail position.
    """
    return _let("let", evaluator, args)


def let_star(evaluator, args: list[Expression]) -> LispValue:
    """(let* [name value ...] body...) sequential binding, same as let."""
    return _let("let*", evaluator, args)


def letfn(evaluator, args: list[Expression]) -> LispValue:
    """(letfn [[name [params] body] ...] body...)

    Every function closes over the shared child scope, so the local functions
    can call each other, including mutually recursively.
    """
    scope = evaluator.with_env(evaluator.env.new_child())
    for definition in _binding_forms("letfn", args):
        if not isinstance(definition, (BracketExpr, ListExpr)) or len(definition.elements) != 3:
            raise PlugLispTypeError("letfn function binding must be [name [params] body]")
        name, params, body = definition.elements
        if not isinstance(name, SymbolExpr):
            raise PlugLispTypeError(f"letfn function name must be a symbol, got {name}")
        positional, rest = parse_params(params, "letfn")
        scope.env.set(name.name, Function(positional, body, scope.env, rest=rest, name=name.name))
    return _run_body(scope, args[1:])


class BindingPlugin(Plugin):
    name = "binding"
    description = "Lexically scoped local bindings"
    dependencies = ("core",)
    category = Category.BINDING

    def functions(self):
        return [
            ("let", VARIADIC, "Local bindings: (let [x 1 y 2] body)", let),
            ("let*", VARIADIC, "Sequential local bindings: (let* [x 1 y x] body)", let_star),
            ("letfn", VARIADIC, "Local functions: (letfn [[f [x] body]] body)", letfn),
        ]
