"""Core evaluator and trampoline for the PlugLisp interpreter.

Implements symbol resolution (including `module.member` access), builtin
dispatch through the function registry, macro expansion and tail-call aware
application of user functions via a trampoline over TailCall objects.

Builtins receive their argument expressions unevaluated and decide what to
evaluate. Builtins that evaluate a form in tail position call `eval_tail` and
return its result, which may be a pending TailCall.
"""

from __future__ import annotations

from typing import Sequence

from pluglisp import Expression, LispValue
from pluglisp.errors import (
    PlugLispError,
    PlugLispNameError,
    PlugLispSyntaxError,
    PlugLispTypeError,
    PlugLispUnboundSymbol,
)
from pluglisp.evaluation.call_stack import CallStack
from pluglisp.registry import BuiltinFunction, Category, FunctionRegistry
from pluglisp.types.convert import quote_expr, value_to_code, value_to_expr
from pluglisp.types.environment import Environment
from pluglisp.types.expr import (
    BigNumberExpr,
    BooleanExpr,
    BracketExpr,
    HashMapExpr,
    KeywordExpr,
    ListExpr,
    NumberExpr,
    Position,
    StringExpr,
    SymbolExpr,
    ValueExpr,
    position_of,
)
from pluglisp.types.lambda_fn import Function, Macro
from pluglisp.types.nil import NIL, NilType
from pluglisp.types.tail_call import TailCall
from pluglisp.types.values import (
    ArithmeticFunctionRef,
    BigNumber,
    Boolean,
    BuiltinFunctionRef,
    CompFunction,
    ComplementFunction,
    HashMap,
    JuxtFunction,
    Keyword,
    Module,
    Number,
    PartialFunction,
    String,
    Vector,
    boolean,
    type_name,
)


class Evaluator:
    """Evaluates expressions against an environment.

    An Evaluator is cheap: `with_env` derives one bound to another scope that
    shares the registry, plugin manager and call stack.
    """

    __slots__ = ("registry", "env", "plugin_manager", "call_stack")

    def __init__(
        self,
        registry: FunctionRegistry,
        env: Environment,
        plugin_manager=None,
        call_stack: CallStack | None = None,
    ):
        self.registry = registry
        self.env = env
        self.plugin_manager = plugin_manager
        self.call_stack = call_stack

    def with_env(self, env: Environment) -> Evaluator:
        return Evaluator(self.registry, env, self.plugin_manager, self.call_stack)

    def fork(self) -> Evaluator:
        """Evaluator for another thread: same scope, private call stack."""
        stack = CallStack() if self.call_stack is not None else None
        return Evaluator(self.registry, self.env, self.plugin_manager, stack)

    # --- Entry points ---
    def eval(self, expr: Expression) -> LispValue:
        """Evaluate `expr` to a value, running any pending tail calls."""
        return self.trampoline(self.eval_tail(expr))

    def call_function(self, fn: LispValue, args: Sequence[Expression]) -> LispValue:
        """Call a function value with unevaluated argument expressions."""
        return self.trampoline(self.apply(fn, list(args)))

    def call_with_values(self, fn: LispValue, values: Sequence[LispValue]) -> LispValue:
        return self.call_function(fn, [value_to_expr(v) for v in values])

    def eval_tail(self, expr: Expression) -> LispValue:
        """
        Single-step evaluation with tail-call awareness.
        Returns either a value or a TailCall.
        """
        match expr:
            case NumberExpr(value=v):
                return Number(v)
            case BigNumberExpr(text=text):
                try:
                    return BigNumber(int(text))
                except ValueError:
                    raise PlugLispSyntaxError(f"invalid big number: {text}") from None
            case StringExpr(value=v):
                return String(v)
            case BooleanExpr(value=v):
                return boolean(v)
            case KeywordExpr(name=name):
                return Keyword(name)
            case ValueExpr(value=v):
                return v
            case SymbolExpr(name=name):
                return self.resolve_symbol(name)
            case ListExpr(elements=elements):
                return self._eval_list(elements, expr.position)
            case BracketExpr(elements=elements):
                return Vector(tuple(self.eval(e) for e in elements))
            case HashMapExpr(elements=elements):
                return self._eval_hash_map(elements)
        raise PlugLispTypeError(f"cannot evaluate expression of type {type(expr).__name__}")

    # --- Symbols ---
    def resolve_symbol(self, name: str) -> LispValue:
        if "." in name:
            return self._resolve_module_member(name)
        fn = self.registry.get(name)
        if fn is not None:
            return self._function_ref(fn)
        value, found = self.env.get(name)
        if not found:
            raise PlugLispUnboundSymbol(f"undefined symbol: {name}")
        return value

    def _resolve_module_member(self, name: str) -> LispValue:
        parts = name.split(".")
        if len(parts) != 2 or not all(parts):
            raise PlugLispNameError(f"invalid module access: {name}")
        module_name, member = parts
        module, found = self.env.get_module(module_name)
        if not found:
            raise PlugLispNameError(f"undefined module: {module_name}")
        if not isinstance(module, Module):
            raise PlugLispTypeError(f"{module_name} is not a module: {type_name(module)}")
        if member not in module.exports:
            raise PlugLispNameError(f"undefined symbol {member} in module {module_name}")
        return module.exports[member]

    @staticmethod
    def _function_ref(fn: BuiltinFunction) -> LispValue:
        if fn.category == Category.ARITHMETIC:
            return ArithmeticFunctionRef(fn.name)
        return BuiltinFunctionRef(fn.name)

    # --- Compound expressions ---
    def _eval_list(self, elements: tuple, position: Position | None) -> LispValue:
        if not elements:
            raise PlugLispSyntaxError("empty list cannot be evaluated")
        head, args = elements[0], list(elements[1:])
        if isinstance(head, SymbolExpr):
            fn = self.registry.get(head.name)
            if fn is not None:
                return fn.call(self, args)
        callee = self.eval(head)
        return self.apply(callee, args, position)

    def _eval_hash_map(self, elements: tuple) -> HashMap:
        if len(elements) % 2 != 0:
            raise PlugLispSyntaxError("hash map literal requires an even number of forms")
        result: dict = {}
        for i in range(0, len(elements), 2):
            key = self.eval(elements[i])
            match key:
                case String(value=k):
                    result[k] = self.eval(elements[i + 1])
                case Keyword(name=k):
                    result[k] = self.eval(elements[i + 1])
                case _:
                    raise PlugLispTypeError("hash map keys must be strings or keywords")
        return HashMap(result)

    # --- Application ---
    def apply(
        self, fn: LispValue, args: list[Expression], position: Position | None = None
    ) -> LispValue:
        """Apply a function value to argument expressions; may return a TailCall."""
        match fn:
            case Macro():
                return self.eval_tail(self.expand_macro(fn, args))
            case Function():
                values = [self.eval(a) for a in args]
                return TailCall(fn, values, position)
            case BuiltinFunctionRef(name=name) | ArithmeticFunctionRef(operation=name):
                builtin = self.registry.get(name)
                if builtin is None:
                    raise PlugLispUnboundSymbol(f"built-in function {name} is no longer registered")
                return builtin.call(self, args)
            case PartialFunction(original=original, bound_args=bound):
                combined = list(bound) + [self.eval(a) for a in args]
                return self.apply(original, [value_to_expr(v) for v in combined], position)
            case ComplementFunction(predicate=predicate):
                result = self.call_function(predicate, args)
                match result:
                    case Boolean(value=flag):
                        return boolean(not flag)
                    case NilType():
                        return boolean(True)
                return boolean(False)
            case JuxtFunction(functions=functions):
                return Vector(tuple(self.call_function(f, args) for f in functions))
            case CompFunction(functions=functions):
                if not functions:
                    return NIL
                result = self.call_function(functions[-1], args)
                for f in reversed(functions[:-1]):
                    result = self.call_function(f, [value_to_expr(result)])
                return result
        raise PlugLispTypeError(f"cannot call non-function value: {fn} ({type_name(fn)})")

    def expand_macro(self, macro: Macro, args: Sequence[Expression]) -> Expression:
        """Bind the argument forms as data, run the macro body once, return code."""
        macro_env = macro.bind([quote_expr(a) for a in args])
        expansion = self.with_env(macro_env).eval(macro.body)
        return value_to_code(expansion)

    def trampoline(self, result: LispValue) -> LispValue:
        """Run pending tail calls until a value is produced."""
        if not isinstance(result, TailCall):
            return result
        stack = self.call_stack
        depth = len(stack) if stack is not None else 0
        try:
            while isinstance(result, TailCall):
                fn = result.fn
                if stack is not None:
                    stack.enter(depth, fn.name or "<anonymous>", result.position or position_of(fn.body))
                frame_env = fn.bind(result.args)
                result = self.with_env(frame_env).eval_tail(fn.body)
        except PlugLispError as err:
            if stack is not None and err.trace is None:
                err.trace = stack.snapshot()
            raise
        finally:
            if stack is not None:
                stack.truncate(depth)
        return result
