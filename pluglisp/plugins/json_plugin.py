from __future__ import annotations

import json
import math
from typing import Any

from pluglisp import Expression, LispValue
from pluglisp.errors import PlugLispError, PlugLispTypeError
from pluglisp.plugins.base import Plugin
from pluglisp.plugins.helpers import eval_args, expect_args, to_string
from pluglisp.registry import Category
from pluglisp.types.nil import NIL, NilType
from pluglisp.types.values import (
    BigNumber,
    Boolean,
    HashMap,
    Keyword,
    ListValue,
    Number,
    Quoted,
    String,
    Vector,
    boolean,
    type_name,
)

# Integers at or above this magnitude are kept exact as BigNumber
BIG_INTEGER = 10 ** 15


def from_json(data: Any) -> LispValue:
    match data:
        case None:
            return NIL
        case bool():
            return boolean(data)
        case int():
            return BigNumber(data) if abs(data) >= BIG_INTEGER else Number(float(data))
        case float():
            return Number(data)
        case str():
            return String(data)
        case list():
            return ListValue(tuple(from_json(d) for d in data))
        case dict():
            return HashMap({k: from_json(v) for k, v in data.items()})
    raise PlugLispTypeError(f"unsupported JSON value: {data!r}")


def to_json(value: LispValue) -> Any:
    match value:
        case NilType():
            return None
        case Boolean(value=flag):
            return flag
        case Number(value=n):
            if math.isnan(n) or math.isinf(n):
                raise PlugLispError(f"cannot encode {value} as JSON")
            return int(n) if float(n).is_integer() else n
        case BigNumber(value=n):
            return n
        case String(value=s):
            return s
        case Keyword(name=name):
            return name
        case Quoted():
            return str(value)
        case ListValue(elements=els) | Vector(elements=els):
            return [to_json(e) for e in els]
        case HashMap(elements=els):
            return {k: to_json(v) for k, v in els.items()}
    raise PlugLispTypeError(f"cannot convert {type_name(value)} to JSON")


def json_parse(evaluator, args: list[Expression]) -> LispValue:
    expect_args("json-parse", args, 1)
    text = to_string("json-parse", evaluator.eval(args[0]))
    try:
        return from_json(json.loads(text))
    except json.JSONDecodeError as err:
        raise PlugLispError(f"json-parse: {err}") from None


def json_stringify(evaluator, args: list[Expression]) -> LispValue:
    expect_args("json-stringify", args, 1)
    data = to_json(evaluator.eval(args[0]))
    return String(json.dumps(data, separators=(",", ":"), ensure_ascii=False))


def json_stringify_pretty(evaluator, args: list[Expression]) -> LispValue:
    expect_args("json-stringify-pretty", args, 1)
    data = to_json(evaluator.eval(args[0]))
    return String(json.dumps(data, indent=2, ensure_ascii=False))


def json_path(evaluator, args: list[Expression]) -> LispValue:
    """(json-path data "a.b.0") walks map keys and list indices; nil when missing."""
    expect_args("json-path", args, 2)
    data, path_value = eval_args(evaluator, args)
    path = to_string("json-path", path_value)
    current = data
    for step in (s for s in path.split(".") if s):
        match current:
            case HashMap(elements=els):
                if step not in els:
                    return NIL
                current = els[step]
            case ListValue(elements=els) | Vector(elements=els):
                if not step.lstrip("-").isdigit():
                    return NIL
                i = int(step)
                if not -len(els) <= i < len(els):
                    return NIL
                current = els[i]
            case _:
                return NIL
    return current


class JsonPlugin(Plugin):
    name = "json"
    description = "JSON encoding and decoding"
    category = Category.JSON

    def functions(self):
        return [
            ("json-parse", 1, "Decode JSON text: (json-parse s)", json_parse),
            ("json-stringify", 1, "Encode as compact JSON: (json-stringify v)", json_stringify),
            ("json-stringify-pretty", 1, "Encode as indented JSON: (json-stringify-pretty v)",
             json_stringify_pretty),
            ("json-path", 2, "Navigate decoded JSON: (json-path data \"a.b.0\")", json_path),
        ]
