from __future__ import annotations

from bisect import insort
from dataclasses import dataclass
from typing import Dict, List, Optional

from pluglisp import Handler, LispValue
from pluglisp.errors import PlugLispRegistrationError
from pluglisp.rwlock import ReadWriteLock

# Arity value for functions accepting any number of arguments
VARIADIC = -1


class Category:
    CORE = "core"
    ARITHMETIC = "arithmetic"
    COMPARISON = "comparison"
    LOGICAL = "logical"
    CONTROL = "control"
    BINDING = "binding"
    LIST = "list"
    SEQUENCE = "sequence"
    FUNCTIONAL = "functional"
    STRING = "string"
    HASHMAP = "hashmap"
    KEYWORD = "keyword"
    MATH = "math"
    ATOM = "atom"
    MACRO = "macro"
    MODULE = "module"
    JSON = "json"
    IO = "io"
    CONCURRENCY = "concurrency"
    HTTP = "http"


@dataclass(frozen=True)
class BuiltinFunction:
    """Registry descriptor for a builtin.

    `arity` is documentation only: handlers validate their own arguments.
    """

    name: str
    category: str
    arity: int
    help: str
    handler: Handler

    def call(self, evaluator, args: list) -> LispValue:
        return self.handler(evaluator, args)

    def signature(self) -> str:
        arity = "variadic" if self.arity == VARIADIC else str(self.arity)
        return f"{self.name} [{self.category}, arity {arity}]: {self.help}"


class FunctionRegistry:
    """Authoritative name -> BuiltinFunction table, safe for concurrent readers."""

    def __init__(self):
        self._functions: Dict[str, BuiltinFunction] = {}
        self._categories: Dict[str, List[str]] = {}
        self._lock = ReadWriteLock()

    def register(self, fn: BuiltinFunction) -> None:
        if not fn.name:
            raise PlugLispRegistrationError("function name cannot be empty")
        with self._lock.write():
            if fn.name in self._functions:
                raise PlugLispRegistrationError(f"function {fn.name} already registered")
            self._functions[fn.name] = fn
            insort(self._categories.setdefault(fn.category, []), fn.name)

    def unregister(self, name: str) -> None:
        with self._lock.write():
            fn = self._functions.pop(name, None)
            if fn is None:
                raise PlugLispRegistrationError(f"function {name} not found")
            names = self._categories.get(fn.category, [])
            names.remove(name)
            if not names:
                del self._categories[fn.category]

    def get(self, name: str) -> Optional[BuiltinFunction]:
        with self._lock.read():
            return self._functions.get(name)

    def has(self, name: str) -> bool:
        with self._lock.read():
            return name in self._functions

    def __contains__(self, name: str) -> bool:
        return self.has(name)

    def list_functions(self) -> List[str]:
        with self._lock.read():
            return sorted(self._functions)

    def list_by_category(self, category: str) -> List[str]:
        with self._lock.read():
            return list(self._categories.get(category, []))

    def categories(self) -> List[str]:
        with self._lock.read():
            return sorted(self._categories)
