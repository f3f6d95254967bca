from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterable

from pluglisp import Expression, LispValue
from pluglisp.errors import PlugLispError, PlugLispRuntimeFault
from pluglisp.evaluation.call_stack import CallStack
from pluglisp.evaluation.evaluator import Evaluator
from pluglisp.plugin_manager import PluginManager
from pluglisp.plugins import Plugin, default_plugins
from pluglisp.reader.parser import lex, TokenStream
from pluglisp.registry import FunctionRegistry
from pluglisp.types.environment import Environment
from pluglisp.types.nil import NIL

# Non-tail recursion costs several Python frames per Lisp call
MIN_RECURSION_LIMIT = 10_000


class Interpreter:
    """
    Orchestrates reading and evaluating PlugLisp code.
    Owns the function registry, plugin manager and global environment for a session.
    """

    def __init__(self, plugins: Iterable[Plugin] | None = None, *, trace: bool = False):
        self._logger = logging.getLogger("Interpreter")
        if sys.getrecursionlimit() < MIN_RECURSION_LIMIT:
            sys.setrecursionlimit(MIN_RECURSION_LIMIT)

        self.registry = FunctionRegistry()
        self.plugin_manager = PluginManager(self.registry)
        self.env: Environment = Environment()
        self.env.set("nil", NIL)
        for plugin in default_plugins() if plugins is None else plugins:
            self.plugin_manager.load_plugin(plugin)

        self.evaluator = Evaluator(
            self.registry,
            self.env,
            self.plugin_manager,
            call_stack=CallStack() if trace else None,
        )

    def eval_expr(self, expr: Expression) -> LispValue:
        try:
            return self.evaluator.eval(expr)
        except RecursionError:
            raise PlugLispRuntimeFault("maximum recursion depth exceeded") from None

    def eval(self, code: str) -> LispValue:
        """Evaluate every form in `code` and return the value of the last one."""
        stream = TokenStream(lex(code))
        result: LispValue = NIL
        while (expr := stream.parse_expr()) is not None:
            result = self.eval_expr(expr)
        return result

    def eval_file(self, path: str | Path) -> LispValue:
        path = Path(path)
        self._logger.debug("evaluating file %s", path)
        try:
            source = path.read_text(encoding="utf-8")
        except OSError as err:
            raise PlugLispError(f"cannot read file {path}: {err}") from err
        try:
            self.env.loaded_files.add(str(path.resolve()))
            return self.eval(source)
        except PlugLispError as err:
            wrapped = type(err)(f"{err} in file {path}")
            wrapped.trace = err.trace
            raise wrapped from err

    def shutdown(self) -> None:
        """Unload plugins, most recently loaded first."""
        for name in reversed(self.plugin_manager.loaded_names()):
            self.plugin_manager.unload_plugin(name)
