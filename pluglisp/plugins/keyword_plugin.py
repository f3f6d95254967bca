from __future__ import annotations

from pluglisp import Expression, LispValue
from pluglisp.errors import PlugLispError, PlugLispTypeError
from pluglisp.plugins.base import Plugin
from pluglisp.plugins.helpers import expect_args
from pluglisp.registry import Category
from pluglisp.types.values import Keyword, String, boolean, type_name


def keyword(evaluator, args: list[Expression]) -> LispValue:
    """(keyword "name") -> :name"""
    expect_args("keyword", args, 1)
    value = evaluator.eval(args[0])
    match value:
        case Keyword():
            return value
        case String(value=s):
            name = s[1:] if s.startswith(":") else s
            if not name:
                raise PlugLispError("keyword name cannot be empty")
            return Keyword(name)
    raise PlugLispTypeError(f"keyword expects a string, got {type_name(value)}")


def is_keyword(evaluator, args: list[Expression]) -> LispValue:
    expect_args("keyword?", args, 1)
    return boolean(isinstance(evaluator.eval(args[0]), Keyword))


class KeywordPlugin(Plugin):
    name = "keyword"
    description = "Keyword construction and tests"
    category = Category.KEYWORD

    def functions(self):
        return [
            ("keyword", 1, "Create a keyword: (keyword \"name\")", keyword),
            ("keyword?", 1, "True for keywords: (keyword? x)", is_keyword),
        ]
