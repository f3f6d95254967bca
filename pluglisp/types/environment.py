"""Runtime environment for PlugLisp.

The Environment stores bindings of names to evaluated values and supports
nested scopes via an `outer` link. Binding always happens in the local frame:
`def` and `let` never reach up the chain to overwrite an enclosing binding.

The module table and the set of loaded files are shared by every frame in a
tree, so a module defined anywhere is visible for `module.member` access.
"""

from __future__ import annotations

from io import StringIO
from typing import Optional

from pluglisp import LispValue


class Environment:
    """Hierarchical mapping from names to Lisp values."""

    __slots__ = ("vars", "outer", "modules", "loaded_files")

    def __init__(self, outer: Optional[Environment] = None):
        self.vars: dict[str, LispValue] = {}
        self.outer: Environment | None = outer
        if outer is None:
            self.modules: dict[str, LispValue] = {}
            self.loaded_files: set[str] = set()
        else:
            self.modules = outer.modules
            self.loaded_files = outer.loaded_files

    def new_child(self) -> Environment:
        return Environment(outer=self)

    def set(self, name: str, value: LispValue) -> None:
        """Bind `name` to `value` in this frame."""
        self.vars[name] = value

    def update(self, mapping: dict[str, LispValue]) -> None:
        """Bulk-define a mapping of name -> value in the current frame."""
        self.vars.update(mapping)

    def find(self, name: str) -> Optional[Environment]:
        """Find the nearest environment in the chain that contains `name`."""
        env: Optional[Environment] = self
        while env is not None:
            if name in env.vars:
                return env
            env = env.outer
        return None

    def get(self, name: str) -> tuple[LispValue, bool]:
        """Look up `name` along the chain; returns (value, found)."""
        env = self.find(name)
        if env is None:
            return None, False
        return env.vars[name], True

    def __contains__(self, name: str) -> bool:
        return self.find(name) is not None

    def get_module(self, name: str) -> tuple[LispValue, bool]:
        module = self.modules.get(name)
        return module, module is not None

    def set_module(self, name: str, module: LispValue) -> None:
        self.modules[name] = module

    def root(self) -> Environment:
        env = self
        while env.outer is not None:
            env = env.outer
        return env

    def _write_vars(self, buffer: StringIO) -> None:
        """Write this frame's variables into the buffer in a compact form."""
        buffer.write("{")
        buffer.write(", ".join(f"{k}: {v}" for k, v in self.vars.items()))
        buffer.write("}")

    def __str__(self) -> str:
        with StringIO() as buffer:
            self._write_vars(buffer)
            if self.outer is not None:
                buffer.write(" -> ...")
            return buffer.getvalue()

    def __repr__(self) -> str:
        with StringIO() as buffer:
            buffer.write("<Environment chain: ")
            chain = []
            env: Optional[Environment] = self
            while env is not None:
                with StringIO() as env_buf:
                    env._write_vars(env_buf)
                    chain.append(env_buf.getvalue())
                env = env.outer
            buffer.write(" -> ".join(chain))
            buffer.write(">")
            return buffer.getvalue()
