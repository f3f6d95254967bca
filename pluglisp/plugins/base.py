"""Plugin contract shared by every builtin bundle."""

from __future__ import annotations

from typing import ClassVar, Iterable

from pluglisp import Handler
from pluglisp.registry import BuiltinFunction, FunctionRegistry

# (name, arity, help, handler)
FunctionSpec = tuple[str, int, str, Handler]


class Plugin:
    """A named, versioned bundle of builtins.

    Subclasses set the class attributes and list their builtins in
    `functions()`. `initialize` and `shutdown` are no-ops unless overridden.
    """

    name: ClassVar[str] = ""
    version: ClassVar[str] = "1.0.0"
    description: ClassVar[str] = ""
    dependencies: ClassVar[tuple[str, ...]] = ()
    category: ClassVar[str] = ""

    def initialize(self, registry: FunctionRegistry) -> None:
        pass

    def shutdown(self) -> None:
        pass

    def functions(self) -> Iterable[FunctionSpec]:
        raise NotImplementedError

    def register_functions(self, registry: FunctionRegistry) -> None:
        for fn_name, arity, help_text, handler in self.functions():
            registry.register(BuiltinFunction(fn_name, self.category, arity, help_text, handler))

    def __repr__(self) -> str:
        return f"<Plugin {self.name} {self.version}>"
