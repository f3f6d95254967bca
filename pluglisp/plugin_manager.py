"""Plugin lifecycle: dependency-checked loading and clean unloading.

Each loaded plugin owns exactly the function names it added to the registry,
computed as the difference between registry snapshots taken around
registration.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from pluglisp.errors import PlugLispError, PlugLispRegistrationError
from pluglisp.registry import FunctionRegistry
from pluglisp.rwlock import ReadWriteLock


@dataclass(frozen=True)
class PluginInfo:
    name: str
    version: str
    description: str
    dependencies: tuple[str, ...] = ()
    functions: tuple[str, ...] = ()


@dataclass
class _LoadedPlugin:
    plugin: object
    functions: List[str] = field(default_factory=list)


class PluginManager:
    def __init__(self, registry: FunctionRegistry):
        self.registry = registry
        self._plugins: Dict[str, _LoadedPlugin] = {}
        self._lock = ReadWriteLock()
        self._logger = logging.getLogger("PluginManager")

    def load_plugin(self, plugin) -> None:
        with self._lock.write():
            self._load(plugin)

    def unload_plugin(self, name: str) -> None:
        with self._lock.write():
            self._unload(name)

    def reload_plugin(self, plugin) -> None:
        """Unload and load `plugin` without letting other lifecycle calls interleave."""
        with self._lock.write():
            if plugin.name not in self._plugins:
                raise PlugLispRegistrationError(f"plugin {plugin.name} not loaded")
            self._unload(plugin.name)
            self._load(plugin)

    def _load(self, plugin) -> None:
        name = plugin.name
        if not name:
            raise PlugLispRegistrationError("plugin name cannot be empty")
        if name in self._plugins:
            raise PlugLispRegistrationError(f"plugin {name} already loaded")
        for dep in plugin.dependencies:
            if dep not in self._plugins:
                raise PlugLispRegistrationError(
                    f"plugin {name} depends on {dep} which is not loaded"
                )

        before = set(self.registry.list_functions())
        try:
            plugin.initialize(self.registry)
        except PlugLispError as err:
            raise PlugLispRegistrationError(f"failed to initialize plugin {name}: {err}") from err

        try:
            plugin.register_functions(self.registry)
        except Exception as err:
            self._rollback(plugin, before)
            raise PlugLispRegistrationError(
                f"failed to register functions for plugin {name}: {err}"
            ) from err

        owned = sorted(set(self.registry.list_functions()) - before)
        self._plugins[name] = _LoadedPlugin(plugin, owned)
        self._logger.info("loaded plugin %s (%d functions)", name, len(owned))

    def _rollback(self, plugin, before: set[str]) -> None:
        for fn_name in set(self.registry.list_functions()) - before:
            self.registry.unregister(fn_name)
        self._shutdown(plugin)

    def _unload(self, name: str) -> None:
        loaded = self._plugins.get(name)
        if loaded is None:
            raise PlugLispRegistrationError(f"plugin {name} not loaded")
        dependents = self._dependents(name)
        if dependents:
            raise PlugLispRegistrationError(
                f"cannot unload plugin {name}: required by {', '.join(dependents)}"
            )
        for fn_name in loaded.functions:
            if self.registry.has(fn_name):
                self.registry.unregister(fn_name)
        self._shutdown(loaded.plugin)
        del self._plugins[name]
        self._logger.info("unloaded plugin %s", name)

    def _shutdown(self, plugin) -> None:
        try:
            plugin.shutdown()
        except Exception as err:  # noqa: BLE001
            self._logger.warning("error shutting down plugin %s: %s", plugin.name, err)

    def _dependents(self, name: str) -> List[str]:
        return sorted(
            other
            for other, loaded in self._plugins.items()
            if name in loaded.plugin.dependencies
        )

    def get_plugin(self, name: str) -> Optional[object]:
        with self._lock.read():
            loaded = self._plugins.get(name)
            return loaded.plugin if loaded else None

    def is_loaded(self, name: str) -> bool:
        with self._lock.read():
            return name in self._plugins

    def get_dependencies(self, name: str) -> List[str]:
        with self._lock.read():
            loaded = self._plugins.get(name)
            if loaded is None:
                raise PlugLispRegistrationError(f"plugin {name} not loaded")
            return list(loaded.plugin.dependencies)

    def get_dependents(self, name: str) -> List[str]:
        with self._lock.read():
            return self._dependents(name)

    def get_plugin_functions(self, name: str) -> List[str]:
        with self._lock.read():
            loaded = self._plugins.get(name)
            if loaded is None:
                raise PlugLispRegistrationError(f"plugin {name} not loaded")
            return list(loaded.functions)

    def list_plugins(self) -> List[PluginInfo]:
        with self._lock.read():
            return [
                PluginInfo(
                    name=name,
                    version=loaded.plugin.version,
                    description=loaded.plugin.description,
                    dependencies=tuple(loaded.plugin.dependencies),
                    functions=tuple(loaded.functions),
                )
                for name, loaded in sorted(self._plugins.items())
            ]

    def loaded_names(self) -> List[str]:
        """Plugin names in load order."""
        with self._lock.read():
            return list(self._plugins)
