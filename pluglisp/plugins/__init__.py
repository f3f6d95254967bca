"""Builtin plugins shipped with PlugLisp."""

from __future__ import annotations

from pluglisp.plugins.arithmetic_plugin import ArithmeticPlugin
from pluglisp.plugins.atom_plugin import AtomPlugin
from pluglisp.plugins.base import Plugin
from pluglisp.plugins.binding_plugin import BindingPlugin
from pluglisp.plugins.comparison_plugin import ComparisonPlugin
from pluglisp.plugins.concurrency_plugin import ConcurrencyPlugin
from pluglisp.plugins.control_plugin import ControlPlugin
from pluglisp.plugins.core_plugin import CorePlugin
from pluglisp.plugins.functional_plugin import FunctionalPlugin
from pluglisp.plugins.hashmap_plugin import HashMapPlugin
from pluglisp.plugins.http_plugin import HttpPlugin
from pluglisp.plugins.io_plugin import IoPlugin
from pluglisp.plugins.json_plugin import JsonPlugin
from pluglisp.plugins.keyword_plugin import KeywordPlugin
from pluglisp.plugins.list_plugin import ListPlugin
from pluglisp.plugins.logical_plugin import LogicalPlugin
from pluglisp.plugins.macro_plugin import MacroPlugin
from pluglisp.plugins.math_plugin import MathPlugin
from pluglisp.plugins.module_plugin import ModulePlugin
from pluglisp.plugins.sequence_plugin import SequencePlugin
from pluglisp.plugins.string_plugin import StringPlugin


def default_plugins() -> list[Plugin]:
    """Fresh instances of every builtin plugin, dependencies first."""
    return [
        CorePlugin(),
        ArithmeticPlugin(),
        ComparisonPlugin(),
        LogicalPlugin(),
        ControlPlugin(),
        BindingPlugin(),
        ListPlugin(),
        SequencePlugin(),
        FunctionalPlugin(),
        KeywordPlugin(),
        StringPlugin(),
        HashMapPlugin(),
        MathPlugin(),
        AtomPlugin(),
        MacroPlugin(),
        ModulePlugin(),
        JsonPlugin(),
        IoPlugin(),
        ConcurrencyPlugin(),
        HttpPlugin(),
    ]


__all__ = [
    "Plugin",
    "default_plugins",
    "ArithmeticPlugin",
    "AtomPlugin",
    "BindingPlugin",
    "ComparisonPlugin",
    "ConcurrencyPlugin",
    "ControlPlugin",
    "CorePlugin",
    "FunctionalPlugin",
    "HashMapPlugin",
    "HttpPlugin",
    "IoPlugin",
    "JsonPlugin",
    "KeywordPlugin",
    "ListPlugin",
    "LogicalPlugin",
    "MacroPlugin",
    "MathPlugin",
    "ModulePlugin",
    "SequencePlugin",
    "StringPlugin",
]
