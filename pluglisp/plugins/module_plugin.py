"""Namespaced modules and source file loading.

    (module geometry (export area) (defn area [r] (* 3.14 r r)))
    (geometry.area 2)
    (import geometry)
    (require "geometry.lisp" :only [area])
"""

from __future__ import annotations

from pathlib import Path

from pluglisp import Expression, LispValue
from pluglisp.config import get_search_roots
from pluglisp.errors import PlugLispError, PlugLispNameError, PlugLispSyntaxError, PlugLispTypeError
from pluglisp.plugins.base import Plugin
from pluglisp.plugins.helpers import expect_args, expect_min_args, to_string
from pluglisp.reader.parser import read_all
from pluglisp.registry import VARIADIC, Category
from pluglisp.types.expr import BracketExpr, KeywordExpr, ListExpr, StringExpr, SymbolExpr
from pluglisp.types.nil import NIL
from pluglisp.types.values import ListValue, Module, String, type_name

SOURCE_SUFFIX = ".lisp"


def _name_of(owner: str, expr: Expression) -> str:
    match expr:
        case SymbolExpr(name=name) | StringExpr(value=name):
            return name
    raise PlugLispTypeError(f"{owner}: expected a module name, got {expr}")


def _export_names(expr: Expression) -> list[str]:
    if not (isinstance(expr, ListExpr) and expr.elements
            and expr.elements[0] == SymbolExpr("export")):
        raise PlugLispSyntaxError("module: second form must be (export name ...)")
    names = []
    for item in expr.elements[1:]:
        if not isinstance(item, SymbolExpr):
            raise PlugLispTypeError(f"module: exported name must be a symbol, got {item}")
        names.append(item.name)
    return names


def module(evaluator, args: list[Expression]) -> LispValue:
    """(module name (export a b) body...)"""
    expect_min_args("module", args, 2)
    name = _name_of("module", args[0])
    exported = _export_names(args[1])
    scope = evaluator.with_env(evaluator.env.new_child())
    for expr in args[2:]:
        scope.eval(expr)
    exports = {}
    for member in exported:
        if member not in scope.env.vars:
            raise PlugLispNameError(f"module {name}: exported symbol {member} is not defined")
        exports[member] = scope.env.vars[member]
    mod = Module(name, exports, scope.env)
    evaluator.env.set_module(name, mod)
    return mod


def _lookup_module(evaluator, name: str) -> Module:
    mod, found = evaluator.env.get_module(name)
    if not found:
        raise PlugLispNameError(f"undefined module: {name}")
    return mod


def import_builtin(evaluator, args: list[Expression]) -> LispValue:
    """(import name) copies a module's exports into the current scope."""
    expect_args("import", args, 1)
    mod = _lookup_module(evaluator, _name_of("import", args[0]))
    evaluator.env.update(mod.exports)
    return mod


def resolve_source(name: str) -> Path:
    """Find a source file as given, then under each search root."""
    given = Path(name).expanduser()
    candidates = [given]
    if not given.is_absolute():
        candidates += [root / given for root in get_search_roots()]
    if not given.suffix:
        candidates += [c.with_suffix(SOURCE_SUFFIX) for c in list(candidates)]
    for candidate in candidates:
        if candidate.is_file():
            return candidate.resolve()
    raise PlugLispError(f"file not found: {name}")


def load_source(evaluator, path: Path) -> LispValue:
    try:
        source = path.read_text(encoding="utf-8")
    except OSError as err:
        raise PlugLispError(f"cannot read {path}: {err}") from err
    evaluator.env.loaded_files.add(str(path))
    result: LispValue = NIL
    for expr in read_all(source):
        result = evaluator.eval(expr)
    return result


def load(evaluator, args: list[Expression]) -> LispValue:
    """(load "file") evaluates every form of a file in the current scope."""
    expect_args("load", args, 1)
    path = resolve_source(to_string("load", evaluator.eval(args[0])))
    return load_source(evaluator, path)


def require(evaluator, args: list[Expression]) -> LispValue:
    """(require "file" [:as alias | :only [names]])

    Loads the file into the global scope unless it was loaded before, then
    exposes the module named after the file stem.
    """
    expect_min_args("require", args, 1)
    path = resolve_source(to_string("require", evaluator.eval(args[0])))
    if str(path) not in evaluator.env.loaded_files:
        load_source(evaluator.with_env(evaluator.env.root()), path)
    options = args[1:]
    mod, found = evaluator.env.get_module(path.stem)
    if not options:
        return mod if found else NIL
    if not found:
        raise PlugLispNameError(f"require: no module {path.stem} defined in {path}")
    if len(options) != 2 or not isinstance(options[0], KeywordExpr):
        raise PlugLispSyntaxError("require: options must be :as alias or :only [names]")
    match options[0].name, options[1]:
        case "as", alias_expr:
            evaluator.env.set_module(_name_of("require", alias_expr), mod)
        case "only", BracketExpr(elements=names) | ListExpr(elements=names):
            for item in names:
                member = _name_of("require", item)
                if member not in mod.exports:
                    raise PlugLispNameError(f"undefined symbol {member} in module {mod.name}")
                evaluator.env.set(member, mod.exports[member])
        case option, _:
            raise PlugLispSyntaxError(f"require: unknown option :{option}")
    return mod


def modules(evaluator, args: list[Expression]) -> LispValue:
    expect_args("modules", args, 0)
    return ListValue(tuple(String(n) for n in sorted(evaluator.env.modules)))


def module_exports(evaluator, args: list[Expression]) -> LispValue:
    """(module-exports name) lists exported names."""
    expect_args("module-exports", args, 1)
    target = args[0]
    if isinstance(target, SymbolExpr):
        mod = _lookup_module(evaluator, target.name)
    else:
        mod = evaluator.eval(target)
        if not isinstance(mod, Module):
            raise PlugLispTypeError(f"module-exports expects a module, got {type_name(mod)}")
    return ListValue(tuple(String(n) for n in sorted(mod.exports)))


class ModulePlugin(Plugin):
    name = "module"
    description = "Modules, imports and file loading"
    dependencies = ("core",)
    category = Category.MODULE

    def functions(self):
        return [
            ("module", VARIADIC, "Define a module: (module name (export a) body...)", module),
            ("import", 1, "Import a module's exports: (import name)", import_builtin),
            ("load", 1, "Evaluate a source file: (load \"file.lisp\")", load),
            ("require", VARIADIC, "Load a file once: (require \"file\" :as m)", require),
            ("modules", 0, "List defined modules: (modules)", modules),
            ("module-exports", 1, "List a module's exports: (module-exports name)", module_exports),
        ]
