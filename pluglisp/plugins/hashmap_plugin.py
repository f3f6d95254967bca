"""Hash maps keyed by strings. Keywords are stored under their bare name."""

from __future__ import annotations

from pluglisp import Expression, LispValue
from pluglisp.errors import PlugLispArityError, PlugLispTypeError
from pluglisp.plugins.base import Plugin
from pluglisp.plugins.helpers import (
    eval_args,
    expect_args,
    expect_args_range,
    expect_min_args,
    to_int,
    to_key,
)
from pluglisp.registry import VARIADIC, Category
from pluglisp.types.nil import NIL, NilType
from pluglisp.types.values import HashMap, ListValue, Number, String, Vector, boolean, type_name


def _map(name: str, value: LispValue) -> dict:
    if isinstance(value, HashMap):
        return value.elements
    if isinstance(value, NilType):
        return {}
    raise PlugLispTypeError(f"{name} expects a hash map, got {type_name(value)}")


def _pairs(name: str, values: list) -> dict:
    if len(values) % 2 != 0:
        raise PlugLispArityError(f"{name} requires key/value pairs")
    return {to_key(name, values[i]): values[i + 1] for i in range(0, len(values), 2)}


def hash_map(evaluator, args: list[Expression]) -> LispValue:
    """(hash-map k v ...)"""
    return HashMap(_pairs("hash-map", eval_args(evaluator, args)))


def hash_map_get(evaluator, args: list[Expression]) -> LispValue:
    """(hash-map-get m key [default])"""
    expect_args_range("hash-map-get", args, 2, 3)
    values = eval_args(evaluator, args)
    elements = _map("hash-map-get", values[0])
    default = values[2] if len(values) == 3 else NIL
    return elements.get(to_key("hash-map-get", values[1]), default)


def hash_map_put(evaluator, args: list[Expression]) -> LispValue:
    expect_args("hash-map-put", args, 3)
    m, key, value = eval_args(evaluator, args)
    return HashMap({**_map("hash-map-put", m), to_key("hash-map-put", key): value})


def hash_map_remove(evaluator, args: list[Expression]) -> LispValue:
    expect_args("hash-map-remove", args, 2)
    m, key = eval_args(evaluator, args)
    k = to_key("hash-map-remove", key)
    return HashMap({n: v for n, v in _map("hash-map-remove", m).items() if n != k})


def hash_map_contains(evaluator, args: list[Expression]) -> LispValue:
    expect_args("hash-map-contains?", args, 2)
    m, key = eval_args(evaluator, args)
    return boolean(to_key("hash-map-contains?", key) in _map("hash-map-contains?", m))


def hash_map_keys(evaluator, args: list[Expression]) -> LispValue:
    expect_args("hash-map-keys", args, 1)
    return ListValue(tuple(String(k) for k in _map("hash-map-keys", evaluator.eval(args[0]))))


def hash_map_values(evaluator, args: list[Expression]) -> LispValue:
    expect_args("hash-map-values", args, 1)
    return ListValue(tuple(_map("hash-map-values", evaluator.eval(args[0])).values()))


def hash_map_size(evaluator, args: list[Expression]) -> LispValue:
    expect_args("hash-map-size", args, 1)
    return Number(len(_map("hash-map-size", evaluator.eval(args[0]))))


def hash_map_empty(evaluator, args: list[Expression]) -> LispValue:
    expect_args("hash-map-empty?", args, 1)
    return boolean(not _map("hash-map-empty?", evaluator.eval(args[0])))


def assoc(evaluator, args: list[Expression]) -> LispValue:
    """(assoc m k v ...) returns a new map with the pairs added."""
    expect_min_args("assoc", args, 3)
    m, *pairs = eval_args(evaluator, args)
    return HashMap({**_map("assoc", m), **_pairs("assoc", pairs)})


def dissoc(evaluator, args: list[Expression]) -> LispValue:
    """(dissoc m k ...) returns a new map without the keys."""
    expect_min_args("dissoc", args, 1)
    m, *keys = eval_args(evaluator, args)
    drop = {to_key("dissoc", k) for k in keys}
    return HashMap({n: v for n, v in _map("dissoc", m).items() if n not in drop})


def get(evaluator, args: list[Expression]) -> LispValue:
    """(get coll key [default]) looks up a map key or a vector/list index."""
    expect_args_range("get", args, 2, 3)
    values = eval_args(evaluator, args)
    coll, key = values[0], values[1]
    default = values[2] if len(values) == 3 else NIL
    if isinstance(coll, (Vector, ListValue)):
        i = to_int("get", key)
        return coll.elements[i] if 0 <= i < len(coll) else default
    return _map("get", coll).get(to_key("get", key), default)


class HashMapPlugin(Plugin):
    name = "hashmap"
    description = "Immutable hash maps"
    category = Category.HASHMAP

    def functions(self):
        return [
            ("hash-map", VARIADIC, "Create a map: (hash-map k v ...)", hash_map),
            ("hash-map-get", VARIADIC, "Look up a key: (hash-map-get m k [default])", hash_map_get),
            ("hash-map-put", 3, "Add or replace a key: (hash-map-put m k v)", hash_map_put),
            ("hash-map-remove", 2, "Remove a key: (hash-map-remove m k)", hash_map_remove),
            ("hash-map-contains?", 2, "Key test: (hash-map-contains? m k)", hash_map_contains),
            ("hash-map-keys", 1, "List of keys: (hash-map-keys m)", hash_map_keys),
            ("hash-map-values", 1, "List of values: (hash-map-values m)", hash_map_values),
            ("hash-map-size", 1, "Number of entries: (hash-map-size m)", hash_map_size),
            ("hash-map-empty?", 1, "True for an empty map: (hash-map-empty? m)", hash_map_empty),
            ("assoc", VARIADIC, "Add pairs: (assoc m k v ...)", assoc),
            ("dissoc", VARIADIC, "Remove keys: (dissoc m k ...)", dissoc),
            ("get", VARIADIC, "Map key or index lookup: (get coll k [default])", get),
        ]
